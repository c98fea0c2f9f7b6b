"""Markdown to rendered-tree conversion using the mistune AST."""

from __future__ import annotations

import logging
from typing import Any, Callable

import mistune

from ..tree.nodes import Element, Node, NodeKind, Text, element, root
from .common import fence_language, parse_task_marker

logger = logging.getLogger(__name__)

_PLUGINS = ["table", "strikethrough"]


class TreeBuilder:
    """Build ``Element`` trees from mistune AST tokens.

    One method per token type, named after the token, each returning the
    list of nodes the token contributes to its parent.  Token types without
    a method degrade to an UNKNOWN element so nothing is silently lost.

    Args:
        hard_breaks: Render soft line breaks as LINE_BREAK elements
            (otherwise they become a single newline of text).
    """

    def __init__(self, hard_breaks: bool = True) -> None:
        self.hard_breaks = hard_breaks

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def build(self, tokens: list[dict[str, Any]]) -> Element:
        """Build the whole document under a ROOT element."""
        return root(*self.build_tokens(tokens))

    def build_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            nodes.extend(self.build_token(token))
        return _normalize_text(nodes)

    def build_token(self, token: dict[str, Any]) -> list[Node]:
        token_type: str = token.get("type") or ""
        func: Callable[[dict[str, Any]], list[Node]] | None = getattr(
            self, f"_build_{token_type}", None
        )
        if func is None:
            return [self._passthrough(token)]
        return func(token)

    def _children(self, token: dict[str, Any]) -> list[Node]:
        return self.build_tokens(token.get("children") or [])

    def _passthrough(self, token: dict[str, Any]) -> Element:
        logger.debug("No tree rule for token type %r", token.get("type"))
        if "children" in token:
            children = self._children(token)
        elif token.get("raw"):
            children = [Text(token["raw"])]
        else:
            children = []
        return Element(
            kind=NodeKind.UNKNOWN,
            children=children,
            attrs={"tag": token.get("type") or ""},
        )

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _build_text(self, token: dict[str, Any]) -> list[Node]:
        return [Text(token.get("raw", ""))]

    def _build_emphasis(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.ITALIC, *self._children(token))]

    def _build_strong(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.BOLD, *self._children(token))]

    def _build_strikethrough(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.STRIKETHROUGH, *self._children(token))]

    def _build_codespan(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.INLINE_CODE, Text(token.get("raw", "")))]

    def _build_linebreak(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.LINE_BREAK)]

    def _build_softbreak(self, token: dict[str, Any]) -> list[Node]:
        if self.hard_breaks:
            return [element(NodeKind.LINE_BREAK)]
        return [Text("\n")]

    def _build_inline_html(self, token: dict[str, Any]) -> list[Node]:
        return [_raw_html(token.get("raw", ""))]

    def _build_link(self, token: dict[str, Any]) -> list[Node]:
        attrs = token.get("attrs") or {}
        return [
            element(
                NodeKind.LINK,
                *self._children(token),
                href=attrs.get("url", ""),
                title=attrs.get("title"),
            )
        ]

    def _build_image(self, token: dict[str, Any]) -> list[Node]:
        attrs = token.get("attrs") or {}
        alt = "".join(
            _plain_text(child) for child in self._children(token)
        )
        return [
            element(
                NodeKind.IMAGE,
                src=attrs.get("url", ""),
                alt=alt,
                title=attrs.get("title"),
            )
        ]

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _build_blank_line(self, token: dict[str, Any]) -> list[Node]:
        return []

    def _build_paragraph(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.PARAGRAPH, *self._children(token))]

    def _build_block_text(self, token: dict[str, Any]) -> list[Node]:
        # Tight list items carry no paragraph wrapper on the surface
        return self._children(token)

    def _build_heading(self, token: dict[str, Any]) -> list[Node]:
        level = (token.get("attrs") or {}).get("level", 1)
        return [element(NodeKind.HEADING, *self._children(token), level=level)]

    def _build_block_code(self, token: dict[str, Any]) -> list[Node]:
        info = (token.get("attrs") or {}).get("info")
        code = token.get("raw", "")
        inner = element(NodeKind.INLINE_CODE, *([Text(code)] if code else []))
        return [
            element(NodeKind.CODE_BLOCK, inner, language=fence_language(info))
        ]

    def _build_block_quote(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.BLOCKQUOTE, *self._children(token))]

    def _build_block_html(self, token: dict[str, Any]) -> list[Node]:
        return [_raw_html(token.get("raw", ""))]

    def _build_thematic_break(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.HORIZONTAL_RULE)]

    def _build_list(self, token: dict[str, Any]) -> list[Node]:
        attrs = token.get("attrs") or {}
        if attrs.get("ordered"):
            node = element(
                NodeKind.ORDERED_LIST,
                *self._children(token),
                start=attrs.get("start", 1),
            )
        else:
            node = element(NodeKind.UNORDERED_LIST, *self._children(token))
        return [node]

    def _build_list_item(self, token: dict[str, Any]) -> list[Node]:
        nodes: list[Node] = []
        previous = None
        for child in token.get("children") or []:
            child_type = child.get("type")
            # Tight item text runs straight into a nested block; keep them
            # on separate lines as the surface does
            if previous == "block_text" and child_type != "blank_line":
                nodes.append(Text("\n"))
            nodes.extend(self.build_token(child))
            if child_type != "blank_line":
                previous = child_type
        item = element(NodeKind.LIST_ITEM, *_normalize_text(nodes))
        apply_task_marker(item)
        return [item]

    def _build_table(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.TABLE, *self._children(token))]

    def _build_table_head(self, token: dict[str, Any]) -> list[Node]:
        # Head cells hang directly off table_head; present them as one row
        return [element(NodeKind.TABLE_ROW, *self._children(token))]

    def _build_table_body(self, token: dict[str, Any]) -> list[Node]:
        return self._children(token)

    def _build_table_row(self, token: dict[str, Any]) -> list[Node]:
        return [element(NodeKind.TABLE_ROW, *self._children(token))]

    def _build_table_cell(self, token: dict[str, Any]) -> list[Node]:
        attrs = token.get("attrs") or {}
        return [
            element(
                NodeKind.TABLE_CELL,
                *self._children(token),
                header=bool(attrs.get("head")),
                align=attrs.get("align"),
            )
        ]


# ---------------------------------------------------------------------------
# Task list rule
# ---------------------------------------------------------------------------


def apply_task_marker(item: Element) -> bool:
    """Turn a leading ``[ ]`` / ``[x]`` marker into a checkbox element.

    Looks at the first inline content of *item* (directly, or inside its
    first paragraph for loose lists).  When it starts with a task marker
    the marker text is removed, a CHECKBOX is inserted in its place, and
    the item is tagged as a task item.

    Returns:
        True if *item* became a task item.
    """
    container = item
    if (
        container.children
        and isinstance(container.children[0], Element)
        and container.children[0].kind is NodeKind.PARAGRAPH
    ):
        container = container.children[0]

    if not container.children or not isinstance(
        container.children[0], Text
    ):
        return False

    first = container.children[0]
    parsed = parse_task_marker(first.value)
    if parsed is None:
        return False

    checked, remainder = parsed
    checkbox = element(NodeKind.CHECKBOX, checked=checked)
    if remainder:
        container.children[0] = Text(remainder)
        container.children.insert(0, checkbox)
    else:
        container.children[0] = checkbox
    item.attrs["task"] = True
    return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _raw_html(raw: str) -> Element:
    return element(NodeKind.UNKNOWN, Text(raw), tag="html", raw=True)


def _plain_text(node: Node) -> str:
    if isinstance(node, Text):
        return node.value
    return "".join(_plain_text(child) for child in node.children)


def _normalize_text(nodes: list[Node]) -> list[Node]:
    """Merge adjacent text leaves and drop empty ones."""
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, Text):
            if not node.value:
                continue
            if result and isinstance(result[-1], Text):
                result[-1] = Text(result[-1].value + node.value)
                continue
        result.append(node)
    return result


def create_parser() -> mistune.Markdown:
    """Create the mistune parser in AST mode with the GFM plugins we map."""
    return mistune.create_markdown(renderer="ast", plugins=_PLUGINS)


_parser = create_parser()


def markdown_to_tree(markdown_text: str, hard_breaks: bool = True) -> Element:
    """
    Convert Markdown text to a rendered tree.

    Args:
        markdown_text: Markdown formatted text
        hard_breaks: Treat single newlines inside paragraphs as line breaks

    Returns:
        ROOT element holding the rendered document
    """
    tokens = _parser(markdown_text)
    return TreeBuilder(hard_breaks=hard_breaks).build(tokens)  # type: ignore[arg-type]
