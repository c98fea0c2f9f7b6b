"""Rendered-view tree model and serialisers."""

from .html import to_html
from .nodes import (
    Element,
    Node,
    NodeKind,
    Text,
    element,
    find_first,
    iter_elements,
    iter_slots,
    outline,
    root,
    text_content,
)

__all__ = [
    "Element",
    "Node",
    "NodeKind",
    "Text",
    "element",
    "find_first",
    "iter_elements",
    "iter_slots",
    "outline",
    "root",
    "text_content",
    "to_html",
]
