"""Common types and utilities for Markdown <-> rendered-tree conversion."""

import re
from dataclasses import dataclass, field

# =============================================================================
# Task list markers
# =============================================================================
#
# A list item whose inline content starts with "[ ]", "[x]" or "[X]" followed
# by whitespace is a task item.  The marker is removed from the text and a
# checkbox element takes its place.
# =============================================================================

TASK_MARKER_RE = re.compile(r"^\[([ xX])\]\s")

# =============================================================================
# Code fence language
# =============================================================================

DEFAULT_DIAGRAM_LANGUAGE = "mermaid"

_LANGUAGE_RE = re.compile(r"^[\w+#.-]+")


def fence_language(info: str | None) -> str:
    """Extract the language tag from a code fence info string.

    Only the leading word is kept, mirroring how renderers derive the
    ``language-xxx`` class from an info string.

    Examples:
        >>> fence_language("python title=demo.py")
        'python'
        >>> fence_language(None)
        ''
    """
    if not info:
        return ""
    match = _LANGUAGE_RE.match(info.strip())
    return match.group(0) if match else ""


def parse_task_marker(content: str) -> tuple[bool, str] | None:
    """Split a leading task marker off *content*.

    Returns:
        ``(checked, remainder)`` when *content* starts with a marker,
        otherwise ``None``.

    Examples:
        >>> parse_task_marker("[x] done")
        (True, 'done')
        >>> parse_task_marker("plain") is None
        True
    """
    match = TASK_MARKER_RE.match(content)
    if match is None:
        return None
    return match.group(1) in "xX", content[match.end():]


@dataclass
class ConversionResult:
    """Result of format conversion with metadata and warnings.

    Attributes:
        text: Converted text output
        source_format: Format of input ('markdown' or 'tree')
        target_format: Format of output ('markdown' or 'tree')
        converted: True if conversion performed
        warnings: Lossy conversions that happened along the way
    """

    text: str
    source_format: str = "unknown"
    target_format: str = "unknown"
    converted: bool = False
    warnings: list[str] = field(default_factory=list)
