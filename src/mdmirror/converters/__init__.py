"""Format conversion between Markdown text and the rendered tree."""

from .common import (
    ConversionResult,
    fence_language,
    parse_task_marker,
)
from .markdown_to_tree import (
    TreeBuilder,
    apply_task_marker,
    markdown_to_tree,
)
from .tree_to_markdown import (
    convert_node,
    convert_with_warnings,
    tree_to_markdown,
)

__all__ = [
    "ConversionResult",
    "TreeBuilder",
    "apply_task_marker",
    "convert_node",
    "convert_with_warnings",
    "fence_language",
    "markdown_to_tree",
    "parse_task_marker",
    "tree_to_markdown",
]
