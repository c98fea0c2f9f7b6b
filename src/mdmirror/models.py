"""Pydantic models shared by the session, document and storage layers.

- ``NoticeLevel`` / ``Notice``: transient user-facing notifications.
- ``SaveOutcome``: result of a host save dialog.
- ``PendingFile``: a document handed over once by the host interception hook.
- ``DirectoryEntry``: one node of a recursive directory listing.
- ``DocumentStats``: status-bar counters.
- ``CursorStatus``: caret column and selection size for the status bar.
- ``TextEdit``: result of a formatting command on the buffer.
- ``Preferences``: persisted user preferences.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class NoticeLevel(str, Enum):
    """Severity of a user-facing notification."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notice(BaseModel):
    """Transient notification shown to the user (a "toast")."""

    level: NoticeLevel = NoticeLevel.INFO
    message: str

    model_config = {"frozen": True}


class SaveOutcome(str, Enum):
    """What a host save dialog reported back."""

    OK = "ok"
    CANCELLED = "cancelled"
    ERROR = "error"


class PendingFile(BaseModel):
    """Externally-opened document waiting to be loaded into the editor.

    Attributes:
        content: Full document text.
        filename: Display name of the document.
        source_url: Where the host intercepted the document, if known.
        timestamp: Milliseconds since the epoch when the record was stored.
    """

    content: str
    filename: str = "Untitled"
    source_url: str | None = None
    timestamp: int

    model_config = {"frozen": True}


class DirectoryEntry(BaseModel):
    """One file or directory in a recursive listing.

    Attributes:
        name: Base name.
        kind: ``file`` or ``directory``.
        path: Path relative to the listing root, ``/``-separated.
        children: Sorted child entries (directories only).
    """

    name: str
    kind: Literal["file", "directory"]
    path: str
    children: list[DirectoryEntry] | None = None

    model_config = {"frozen": True}


class DocumentStats(BaseModel):
    """Word, character and line counts for the status bar."""

    words: int = 0
    chars: int = 0
    lines: int = 1

    model_config = {"frozen": True}


class CursorStatus(BaseModel):
    """Caret position for the status bar.

    Attributes:
        column: 1-based column of the caret on its line.
        selected: Number of selected characters (0 for a bare caret).
    """

    column: int = 1
    selected: int = 0

    model_config = {"frozen": True}


class TextEdit(BaseModel):
    """New buffer text plus the selection to restore after a command.

    ``start`` and ``end`` are character offsets with ``start <= end``.
    """

    text: str
    start: int
    end: int

    model_config = {"frozen": True}


class Preferences(BaseModel):
    """User preferences persisted between sessions."""

    theme: Literal["dark", "light"] = "dark"
    view_mode: Literal["editor", "split", "preview"] = "split"
    sidebar_collapsed: bool = False

    model_config = {"frozen": True}
