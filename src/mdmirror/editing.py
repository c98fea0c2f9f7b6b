"""Formatting commands over the Markdown buffer.

Each command is a pure function of the buffer text and the current
selection ``[start, end)`` and returns a ``TextEdit`` with the new text and
the selection to restore.  Wrapping and line prefixes toggle: applying the
same command twice gives back the original text.
"""

from __future__ import annotations

from .models import TextEdit

PLACEHOLDERS = {
    "**": "bold text",
    "*": "italic text",
    "~~": "strikethrough text",
    "`": "code",
}
DEFAULT_PLACEHOLDER = "text"


def _clamp(text: str, start: int, end: int) -> tuple[int, int]:
    start = max(0, min(start, len(text)))
    end = max(0, min(end, len(text)))
    return (start, end) if start <= end else (end, start)


def _line_bounds(text: str, position: int) -> tuple[int, int]:
    """Start and end offsets of the line containing *position*."""
    line_start = text.rfind("\n", 0, position) + 1
    line_end = text.find("\n", position)
    if line_end == -1:
        line_end = len(text)
    return line_start, line_end


def wrap_selection(
    text: str, start: int, end: int, before: str, after: str | None = None
) -> TextEdit:
    """Toggle *before*/*after* around the selection.

    * Already wrapped (the markers sit just outside the selection): the
      markers are removed.
    * Non-empty selection: it is wrapped and stays selected.
    * Empty selection: a placeholder is inserted wrapped and selected.

    Examples:
        >>> wrap_selection("a word", 2, 6, "**").text
        'a **word**'
        >>> wrap_selection("a **word**", 4, 8, "**").text
        'a word'
    """
    if after is None:
        after = before
    start, end = _clamp(text, start, end)

    outer_start = start - len(before)
    if (
        outer_start >= 0
        and text[outer_start:start] == before
        and text[end : end + len(after)] == after
    ):
        new_text = text[:outer_start] + text[start:end] + text[end + len(after) :]
        return TextEdit(text=new_text, start=outer_start, end=end - len(before))

    if start == end:
        placeholder = PLACEHOLDERS.get(before, DEFAULT_PLACEHOLDER)
        new_text = text[:start] + before + placeholder + after + text[start:]
        inner = start + len(before)
        return TextEdit(text=new_text, start=inner, end=inner + len(placeholder))

    new_text = text[:start] + before + text[start:end] + after + text[end:]
    return TextEdit(text=new_text, start=start + len(before), end=end + len(before))


def toggle_line_prefix(text: str, start: int, end: int, prefix: str) -> TextEdit:
    """Add *prefix* to the caret's line, or remove it if already there.

    The caret is the selection end.  Offsets on that line move with the
    inserted or removed prefix.

    Examples:
        >>> toggle_line_prefix("one\\ntwo", 5, 5, "> ").text
        'one\\n> two'
        >>> toggle_line_prefix("- item", 0, 0, "- ").text
        'item'
    """
    start, end = _clamp(text, start, end)
    line_start, _ = _line_bounds(text, end)

    if text.startswith(prefix, line_start):
        new_text = text[:line_start] + text[line_start + len(prefix) :]

        def shift(offset: int) -> int:
            if offset <= line_start:
                return offset
            return max(line_start, offset - len(prefix))

    else:
        new_text = text[:line_start] + prefix + text[line_start:]

        def shift(offset: int) -> int:
            return offset + len(prefix) if offset >= line_start else offset

    return TextEdit(text=new_text, start=shift(start), end=shift(end))


def insert_block(text: str, start: int, end: int, block: str) -> TextEdit:
    """Append *block* after the caret's line.

    A blank line separates the block from a non-empty current line.  The
    selection is left where it was.

    Examples:
        >>> insert_block("# Title", 3, 3, "---").text
        '# Title\\n\\n---'
        >>> insert_block("", 0, 0, "---").text
        '---'
    """
    start, end = _clamp(text, start, end)
    line_start, line_end = _line_bounds(text, end)
    separator = "\n\n" if line_end > line_start else ""
    new_text = text[:line_end] + separator + block + text[line_end:]
    return TextEdit(text=new_text, start=start, end=end)
