"""Status-bar statistics for the current document."""

import re

from .models import CursorStatus, DocumentStats

_CJK_RE = re.compile(r"[\u4e00-\u9fff]")
_WORD_RE = re.compile(r"[a-zA-Z]+")


def document_stats(text: str) -> DocumentStats:
    """Count words, characters and lines of *text*.

    Words are CJK ideographs (one each) plus runs of ASCII letters.

    Examples:
        >>> document_stats("Hello world").words
        2
        >>> document_stats("a\\nb").lines
        2
    """
    words = len(_CJK_RE.findall(text)) + len(_WORD_RE.findall(text))
    return DocumentStats(
        words=words,
        chars=len(text),
        lines=text.count("\n") + 1,
    )


def cursor_status(text: str, start: int, end: int | None = None) -> CursorStatus:
    """Column of the caret and size of the selection ``text[start:end]``.

    The caret sits at *end* (at *start* when there is no selection).

    Examples:
        >>> cursor_status("ab\\ncd", 4).column
        2
        >>> cursor_status("hello", 1, 4).selected
        3
    """
    if end is None:
        end = start
    start = max(0, min(start, len(text)))
    end = max(0, min(end, len(text)))
    if start > end:
        start, end = end, start
    line_start = text.rfind("\n", 0, end) + 1
    return CursorStatus(column=end - line_start + 1, selected=end - start)
