"""Bidirectional sync between the Markdown buffer and the rendered view."""

from .coordinator import SyncCoordinator
from .scroll import ScrollMirror
from .session import WELCOME_DOCUMENT, EditorSession, Theme, ViewMode
from .state import SyncState
from .surfaces import (
    InMemoryTextBuffer,
    PreviewSurface,
    ScrollSurface,
    TextBuffer,
)

__all__ = [
    "EditorSession",
    "InMemoryTextBuffer",
    "PreviewSurface",
    "ScrollMirror",
    "ScrollSurface",
    "SyncCoordinator",
    "SyncState",
    "TextBuffer",
    "Theme",
    "ViewMode",
    "WELCOME_DOCUMENT",
]
