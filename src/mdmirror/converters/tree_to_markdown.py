"""Rendered-tree to Markdown conversion (the structural converter).

Walks the live preview tree bottom-up and emits Markdown text.  The mapping
is total: every ``NodeKind`` has exactly one rule in ``_RULES`` and
unrecognised structure degrades to its children's text.

The conversion is deliberately lossy in two places:

* Diagram containers (and their error substitutes) emit nothing: a rendered
  diagram has no recoverable source.
* List markers are normalised: bullets become ``-`` and ordered lists are
  renumbered from 1.
"""

from __future__ import annotations

from typing import Callable

from ..tree.nodes import Element, Node, NodeKind, Text, find_first, text_content
from .common import ConversionResult

Rule = Callable[[Element, "Element | None"], str]

_LIST_KINDS = frozenset({NodeKind.UNORDERED_LIST, NodeKind.ORDERED_LIST})


def convert_node(node: Node, parent: Element | None = None) -> str:
    """Convert one node (and its subtree) to Markdown."""
    if isinstance(node, Text):
        return node.value
    return _RULES[node.kind](node, parent)


def convert_children(node: Element) -> str:
    return "".join(convert_node(child, node) for child in node.children)


# ---------------------------------------------------------------------------
# Per-kind rules
# ---------------------------------------------------------------------------


def _passthrough(node: Element, parent: Element | None) -> str:
    return convert_children(node)


def _nothing(node: Element, parent: Element | None) -> str:
    return ""


def _heading(node: Element, parent: Element | None) -> str:
    level = node.get("level", 1)
    return f"{'#' * level} {convert_children(node).strip()}\n\n"


def _paragraph(node: Element, parent: Element | None) -> str:
    return f"{convert_children(node).strip()}\n\n"


def _line_break(node: Element, parent: Element | None) -> str:
    return "\n"


def _wrap(marker: str) -> Rule:
    def rule(node: Element, parent: Element | None) -> str:
        return f"{marker}{convert_children(node)}{marker}"

    return rule


def _inline_code(node: Element, parent: Element | None) -> str:
    if parent is not None and parent.kind is NodeKind.CODE_BLOCK:
        return convert_children(node)
    return f"`{convert_children(node)}`"


def _code_block(node: Element, parent: Element | None) -> str:
    language = node.get("language") or ""
    code = text_content(node).rstrip()
    return f"```{language}\n{code}\n```\n\n"


def _blockquote(node: Element, parent: Element | None) -> str:
    lines = convert_children(node).strip().split("\n")
    return "\n".join(f"> {line}" for line in lines) + "\n\n"


def _list_item_body(item: Element) -> tuple[str, str]:
    """Return ``(task_prefix, body)`` for a list item."""
    checkbox = find_first(item, NodeKind.CHECKBOX, skip=_LIST_KINDS)
    if checkbox is None:
        prefix = ""
    elif checkbox.get("checked"):
        prefix = "[x] "
    else:
        prefix = "[ ] "
    body = "".join(
        convert_node(child, item)
        for child in item.children
        if not (
            isinstance(child, Element) and child.kind is NodeKind.CHECKBOX
        )
    )
    return prefix, body.strip()


def _list_items(node: Element) -> list[Element]:
    return [
        child
        for child in node.children
        if isinstance(child, Element) and child.kind is NodeKind.LIST_ITEM
    ]


def _unordered_list(node: Element, parent: Element | None) -> str:
    result = ""
    for item in _list_items(node):
        task, body = _list_item_body(item)
        result += f"- {task}{body}\n"
    return result + "\n"


def _ordered_list(node: Element, parent: Element | None) -> str:
    result = ""
    for number, item in enumerate(_list_items(node), start=1):
        task, body = _list_item_body(item)
        result += f"{number}. {task}{body}\n"
    return result + "\n"


def _link(node: Element, parent: Element | None) -> str:
    href = node.get("href") or ""
    return f"[{convert_children(node)}]({href})"


def _image(node: Element, parent: Element | None) -> str:
    alt = node.get("alt") or ""
    src = node.get("src") or ""
    return f"![{alt}]({src})"


def _horizontal_rule(node: Element, parent: Element | None) -> str:
    return "---\n\n"


def _table_rows(node: Element) -> list[Element]:
    rows: list[Element] = []
    for child in node.children:
        if not isinstance(child, Element):
            continue
        if child.kind is NodeKind.TABLE_ROW:
            rows.append(child)
        elif child.kind is not NodeKind.TABLE:
            rows.extend(_table_rows(child))
    return rows


def _table(node: Element, parent: Element | None) -> str:
    rows = _table_rows(node)
    if not rows:
        return convert_children(node)
    result = ""
    for index, row in enumerate(rows):
        cells = [
            convert_children(cell).strip()
            for cell in row.children
            if isinstance(cell, Element) and cell.kind is NodeKind.TABLE_CELL
        ]
        result += "| " + " | ".join(cells) + " |\n"
        if index == 0:
            result += "| " + " | ".join("------" for _ in cells) + " |\n"
    return result + "\n"


_RULES: dict[NodeKind, Rule] = {
    NodeKind.ROOT: _passthrough,
    NodeKind.HEADING: _heading,
    NodeKind.PARAGRAPH: _paragraph,
    NodeKind.LINE_BREAK: _line_break,
    NodeKind.BOLD: _wrap("**"),
    NodeKind.ITALIC: _wrap("*"),
    NodeKind.STRIKETHROUGH: _wrap("~~"),
    NodeKind.INLINE_CODE: _inline_code,
    NodeKind.CODE_BLOCK: _code_block,
    NodeKind.BLOCKQUOTE: _blockquote,
    NodeKind.UNORDERED_LIST: _unordered_list,
    NodeKind.ORDERED_LIST: _ordered_list,
    # Items are emitted by their list; a stray item contributes its text
    NodeKind.LIST_ITEM: _passthrough,
    NodeKind.LINK: _link,
    NodeKind.IMAGE: _image,
    NodeKind.HORIZONTAL_RULE: _horizontal_rule,
    NodeKind.TABLE: _table,
    NodeKind.TABLE_ROW: _passthrough,
    NodeKind.TABLE_CELL: _passthrough,
    NodeKind.CHECKBOX: _nothing,
    NodeKind.DIAGRAM_CONTAINER: _nothing,
    NodeKind.DIAGRAM_ERROR: _nothing,
    NodeKind.UNKNOWN: _passthrough,
}


def tree_to_markdown(tree: Element) -> str:
    """
    Convert a rendered tree back to Markdown text.

    Args:
        tree: Root of the rendered tree (usually the preview surface root)

    Returns:
        Markdown text, trimmed, with exactly one trailing newline
    """
    return convert_children(tree).strip() + "\n"


def convert_with_warnings(tree: Element) -> ConversionResult:
    """
    Convert a rendered tree to Markdown and report lossy spots.

    Args:
        tree: Root of the rendered tree

    Returns:
        ConversionResult with Markdown text and any warnings
    """
    warnings = []
    diagrams = 0
    raw_html = 0
    stack: list[Node] = [tree]
    while stack:
        node = stack.pop()
        if isinstance(node, Text):
            continue
        if node.kind in (NodeKind.DIAGRAM_CONTAINER, NodeKind.DIAGRAM_ERROR):
            diagrams += 1
        elif node.kind is NodeKind.UNKNOWN and node.get("raw"):
            raw_html += 1
        stack.extend(node.children)

    if diagrams:
        warnings.append(
            f"{diagrams} diagram block(s) dropped - rendered diagrams have no source text."
        )
    if raw_html:
        warnings.append(
            f"{raw_html} raw HTML fragment(s) passed through as text."
        )

    return ConversionResult(
        text=tree_to_markdown(tree),
        source_format="tree",
        target_format="markdown",
        converted=True,
        warnings=warnings,
    )
