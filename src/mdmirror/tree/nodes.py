"""Rendered-view tree: the live structure of the editable preview surface.

The tree is a closed variant: every node is either a ``Text`` leaf or an
``Element`` whose ``kind`` is one of ``NodeKind``.  Kind-specific data lives
in ``Element.attrs``:

============================  ===========================================
Kind                          Attributes
============================  ===========================================
HEADING                       ``level`` (1-6)
CODE_BLOCK                    ``language`` (may be empty)
LINK                          ``href``, ``title``
IMAGE                         ``src``, ``alt``
CHECKBOX                      ``checked`` (True, False, or None)
LIST_ITEM                     ``task`` (True for task items)
ORDERED_LIST                  ``start``
TABLE_CELL                    ``header``, ``align``
DIAGRAM_CONTAINER             ``diagram_id``, ``markup``
DIAGRAM_ERROR                 ``message``
UNKNOWN                       ``tag``
============================  ===========================================

Trees compare by value, which lets the preview surface skip replacing
content with an identical render.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union


class NodeKind(str, Enum):
    """Element kinds that can appear in a rendered tree."""

    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    LINE_BREAK = "line_break"
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    INLINE_CODE = "inline_code"
    CODE_BLOCK = "code_block"
    BLOCKQUOTE = "blockquote"
    UNORDERED_LIST = "unordered_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    LINK = "link"
    IMAGE = "image"
    HORIZONTAL_RULE = "horizontal_rule"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    CHECKBOX = "checkbox"
    DIAGRAM_CONTAINER = "diagram_container"
    DIAGRAM_ERROR = "diagram_error"
    UNKNOWN = "unknown"


@dataclass
class Text:
    """Literal text leaf."""

    value: str


@dataclass
class Element:
    """Tagged element with ordered children and kind-specific attributes."""

    kind: NodeKind
    children: list[Node] = field(default_factory=list)
    attrs: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attrs.get(key, default)

    def append(self, node: Node) -> None:
        self.children.append(node)


Node = Union[Text, Element]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def element(kind: NodeKind, *children: Node, **attrs: Any) -> Element:
    """Build an element; keyword arguments become attributes."""
    return Element(kind=kind, children=list(children), attrs=dict(attrs))


def root(*children: Node) -> Element:
    """Build the container element that stands for the whole surface."""
    return Element(kind=NodeKind.ROOT, children=list(children))


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def text_content(node: Node) -> str:
    """Concatenated text of *node* and all its descendants."""
    if isinstance(node, Text):
        return node.value
    return "".join(text_content(child) for child in node.children)


def iter_elements(node: Node) -> Iterator[Element]:
    """Yield *node* (when an element) and every descendant element, pre-order."""
    if isinstance(node, Text):
        return
    yield node
    for child in node.children:
        yield from iter_elements(child)


def iter_slots(node: Element) -> Iterator[tuple[Element, int]]:
    """Yield ``(parent, index)`` for every descendant element, pre-order.

    Indices are positional so callers can replace a child in place even
    when an equal-valued sibling exists.
    """
    for index, child in enumerate(node.children):
        if isinstance(child, Element):
            yield node, index
            yield from iter_slots(child)


def find_first(
    node: Element,
    kind: NodeKind,
    skip: frozenset[NodeKind] = frozenset(),
) -> Element | None:
    """Return the first descendant of *kind*, not descending into *skip* kinds."""
    for child in node.children:
        if not isinstance(child, Element):
            continue
        if child.kind is kind:
            return child
        if child.kind in skip:
            continue
        found = find_first(child, kind, skip)
        if found is not None:
            return found
    return None


def outline(node: Node, indent: int = 0) -> str:
    """Indented, human-readable dump of a tree (used by the CLI)."""
    pad = "  " * indent
    if isinstance(node, Text):
        return f"{pad}{node.value!r}\n"
    shown = {k: v for k, v in node.attrs.items() if k != "markup"}
    attrs = " ".join(f"{k}={v!r}" for k, v in shown.items())
    line = f"{pad}{node.kind.value}" + (f" {attrs}" if attrs else "") + "\n"
    return line + "".join(
        outline(child, indent + 1) for child in node.children
    )
