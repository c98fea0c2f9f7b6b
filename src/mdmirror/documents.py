"""Document operations: open, save, new and drop.

Each operation talks to a host collaborator (a file picker, a save dialog, a
confirmation prompt) and applies the error policy the editor uses
everywhere:

* the user dismissing a dialog (``DialogCancelled``) is a silent no-op;
* I/O and decoding failures become an error notice and leave the document
  unchanged;
* success replaces the document wholesale and posts a success notice.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Awaitable, Callable

from .file_handler import (
    is_droppable_file,
    read_file_async,
    write_file_async,
)
from .models import NoticeLevel, SaveOutcome
from .sync.session import DEFAULT_FILENAME, EditorSession

logger = logging.getLogger(__name__)


class DialogCancelled(Exception):
    """Raised by a host dialog when the user dismisses it."""


Opener = Callable[[], Awaitable[tuple[str, str]]]
Saver = Callable[[str], Awaitable[SaveOutcome]]
Confirm = Callable[[str], Awaitable[bool]]

_IO_ERRORS = (OSError, ValueError, UnicodeError)


async def open_document(session: EditorSession, opener: Opener) -> bool:
    """Ask the host for a document and load it.

    Args:
        session: Session to load into.
        opener: Host picker returning ``(filename, text)``.

    Returns:
        True if a document was loaded.
    """
    try:
        filename, text = await opener()
    except DialogCancelled:
        logger.debug("Open dialog dismissed")
        return False
    except _IO_ERRORS as e:
        logger.warning("Failed to open document: %s", e)
        session.notify(f"Failed to open file: {e}", NoticeLevel.ERROR)
        return False

    path = getattr(opener, "path", None)
    session.load_document(filename, text, path=path)
    session.notify(f"Opened: {filename}", NoticeLevel.SUCCESS)
    return True


async def save_document(session: EditorSession, saver: Saver) -> SaveOutcome:
    """Hand the current text to the host save dialog.

    Returns:
        The outcome reported (or implied) by the saver.
    """
    try:
        outcome = await saver(session.text)
    except DialogCancelled:
        logger.debug("Save dialog dismissed")
        return SaveOutcome.CANCELLED
    except _IO_ERRORS as e:
        logger.warning("Failed to save document: %s", e)
        session.notify(f"Failed to save file: {e}", NoticeLevel.ERROR)
        return SaveOutcome.ERROR

    if outcome is SaveOutcome.OK:
        path = getattr(saver, "path", None)
        if path is not None:
            session.path = path
            session.filename = path.name
        session.mark_saved()
        session.notify(f"Saved: {session.filename}", NoticeLevel.SUCCESS)
    elif outcome is SaveOutcome.ERROR:
        session.notify("Failed to save file", NoticeLevel.ERROR)
    return outcome


async def new_document(
    session: EditorSession, confirm: Confirm | None = None
) -> bool:
    """Start an empty document, asking first if there are unsaved changes.

    Returns:
        True if the document was replaced.
    """
    if session.modified and confirm is not None:
        if not await confirm(
            "The current document has unsaved changes. Create a new one anyway?"
        ):
            return False
    session.load_document(DEFAULT_FILENAME, "")
    return True


def drop_document(session: EditorSession, filename: str, text: str) -> bool:
    """Load a file dropped onto the editor.

    Only Markdown and plain-text files are accepted.

    Returns:
        True if the document was loaded.
    """
    if not is_droppable_file(filename):
        session.notify(
            "Please drop a .md, .markdown or .txt file", NoticeLevel.ERROR
        )
        return False
    session.load_document(filename, text)
    session.notify(f"Opened: {filename}", NoticeLevel.SUCCESS)
    return True


# =============================================================================
# Filesystem-backed collaborators
# =============================================================================


class PathOpener:
    """Opener that reads a fixed path through the encoding-aware handler."""

    def __init__(self, path: str | Path) -> None:
        self.requested = str(path)
        self.path: Path | None = None

    async def __call__(self) -> tuple[str, str]:
        content, encoding, resolved = await read_file_async(self.requested)
        logger.debug("Read %s (%s)", resolved, encoding)
        self.path = resolved
        return resolved.name, content


class PathSaver:
    """Saver that writes the document to a fixed path."""

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self.requested = str(path)
        self.encoding = encoding
        self.path: Path | None = None

    async def __call__(self, text: str) -> SaveOutcome:
        resolved, count = await write_file_async(
            self.requested, text, self.encoding
        )
        logger.debug("Wrote %d bytes to %s", count, resolved)
        self.path = resolved
        return SaveOutcome.OK
