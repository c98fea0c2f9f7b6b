"""Serialise a rendered tree to HTML markup for display by a host surface."""

from __future__ import annotations

from html import escape

from .nodes import Element, Node, NodeKind, Text

_SIMPLE_TAGS: dict[NodeKind, str] = {
    NodeKind.PARAGRAPH: "p",
    NodeKind.BOLD: "strong",
    NodeKind.ITALIC: "em",
    NodeKind.STRIKETHROUGH: "del",
    NodeKind.INLINE_CODE: "code",
    NodeKind.BLOCKQUOTE: "blockquote",
    NodeKind.UNORDERED_LIST: "ul",
    NodeKind.TABLE_ROW: "tr",
}


def to_html(node: Node) -> str:
    """Render *node* and its descendants as an HTML fragment."""
    if isinstance(node, Text):
        return escape(node.value, quote=False)

    inner = "".join(to_html(child) for child in node.children)
    kind = node.kind

    if kind in _SIMPLE_TAGS:
        tag = _SIMPLE_TAGS[kind]
        return f"<{tag}>{inner}</{tag}>"
    if kind is NodeKind.ROOT:
        return inner
    if kind is NodeKind.HEADING:
        level = node.get("level", 1)
        return f"<h{level}>{inner}</h{level}>"
    if kind is NodeKind.LINE_BREAK:
        return "<br>\n"
    if kind is NodeKind.CODE_BLOCK:
        lang = node.get("language") or ""
        cls = f' class="language-{escape(lang)}"' if lang else ""
        code = _code_inner(node)
        return f"<pre><code{cls}>{code}</code></pre>\n"
    if kind is NodeKind.ORDERED_LIST:
        start = node.get("start")
        attr = f' start="{start}"' if start and start != 1 else ""
        return f"<ol{attr}>{inner}</ol>"
    if kind is NodeKind.LIST_ITEM:
        cls = ' class="task-list-item"' if node.get("task") else ""
        return f"<li{cls}>{inner}</li>"
    if kind is NodeKind.LINK:
        href = escape(node.get("href") or "")
        title = node.get("title")
        title_attr = f' title="{escape(title)}"' if title else ""
        return f'<a href="{href}"{title_attr}>{inner}</a>'
    if kind is NodeKind.IMAGE:
        src = escape(node.get("src") or "")
        alt = escape(node.get("alt") or "")
        return f'<img src="{src}" alt="{alt}">'
    if kind is NodeKind.HORIZONTAL_RULE:
        return "<hr>\n"
    if kind is NodeKind.TABLE:
        return f"<table>{inner}</table>\n"
    if kind is NodeKind.TABLE_CELL:
        tag = "th" if node.get("header") else "td"
        align = node.get("align")
        style = f' style="text-align:{align}"' if align else ""
        return f"<{tag}{style}>{inner}</{tag}>"
    if kind is NodeKind.CHECKBOX:
        checked = " checked" if node.get("checked") else ""
        return f'<input type="checkbox" disabled{checked}>'
    if kind is NodeKind.DIAGRAM_CONTAINER:
        return f'<div class="mermaid-diagram">{node.get("markup", "")}</div>\n'
    if kind is NodeKind.DIAGRAM_ERROR:
        return f'<div class="mermaid-error">{inner}</div>\n'
    # UNKNOWN carries raw markup through untouched
    if node.get("raw"):
        return "".join(
            c.value if isinstance(c, Text) else to_html(c)
            for c in node.children
        )
    return inner


def _code_inner(node: Node) -> str:
    if isinstance(node, Text):
        return escape(node.value, quote=False)
    return "".join(_code_inner(c) for c in node.children)
