"""Editor session: the single explicit context shared by every entry point.

The session owns the two surfaces, the current document's identity
(filename, path, modified flag) and the user-facing toggles (theme, view
mode, scroll sync).  It is created at startup with the welcome document and
mutated only through the coordinator and the document operations.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Callable

from ..models import Notice, NoticeLevel
from .surfaces import InMemoryTextBuffer, PreviewSurface, TextBuffer

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "Untitled"
RECENT_NOTICES = 20

WELCOME_DOCUMENT = """\
# Welcome to mdmirror

> A Markdown editor with a live, directly editable preview

## Quick start

- Open a local `.md` file and start typing
- Edit the **rendered preview** directly, changes flow back to the source
- Drop a `.md`, `.markdown` or `.txt` file to open it

## Supported syntax

**Bold** *italic* ~~strikethrough~~ `inline code`

### Lists

- Unordered item 1
- Unordered item 2

1. Ordered item 1
2. Ordered item 2

### Task lists

- [x] Finished task
- [ ] Open task

### Code

```python
def hello():
    print("Hello, Markdown!")
```

### Tables

| Action | Shortcut | Description |
|------|--------|------|
| Open | Ctrl+O | Open a file |
| Save | Ctrl+S | Save the file |

### Quotes

> This is a quotation.
> It can span several lines.

### Diagrams

```mermaid
graph LR
    A[Edit Markdown] --> B[Live preview]
    B --> C{Happy?}
    C -->|Yes| D[Save]
    C -->|No| A
```

### Links

[Visit GitHub](https://github.com)

---

*Start writing your document!*
"""


class ViewMode(str, Enum):
    """Which panes are visible."""

    EDITOR = "editor"
    SPLIT = "split"
    PREVIEW = "preview"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


NoticeListener = Callable[[Notice], None]


class EditorSession:
    """State of one editing session.

    Args:
        text: Initial document text (the welcome document by default).
        buffer: Text-editing component; an in-memory buffer when omitted.
        preview: Rendered surface; a fresh one when omitted.
        theme: Initial theme.
        view_mode: Initial layout.
        scroll_sync: Whether the scroll mirror is enabled.
    """

    def __init__(
        self,
        text: str = WELCOME_DOCUMENT,
        buffer: TextBuffer | None = None,
        preview: PreviewSurface | None = None,
        theme: Theme = Theme.DARK,
        view_mode: ViewMode = ViewMode.SPLIT,
        scroll_sync: bool = True,
    ) -> None:
        self.buffer: TextBuffer = (
            buffer if buffer is not None else InMemoryTextBuffer(text)
        )
        self.preview = preview if preview is not None else PreviewSurface()
        self.filename = DEFAULT_FILENAME
        self.path: Path | None = None
        self.modified = False
        self.theme = Theme(theme)
        self.view_mode = ViewMode(view_mode)
        self.scroll_sync = scroll_sync
        self.sidebar_collapsed = False
        self.notices: deque[Notice] = deque(maxlen=RECENT_NOTICES)
        self._notice_listeners: list[NoticeListener] = []

    # ------------------------------------------------------------------
    # Document
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self.buffer.text

    @property
    def title(self) -> str:
        """Window title: filename with a modified marker."""
        return f"{'* ' if self.modified else ''}{self.filename}"

    def load_document(
        self, filename: str, text: str, path: Path | None = None
    ) -> None:
        """Replace the whole document and mark it as saved."""
        logger.info("Loading document %s (%d chars)", filename, len(text))
        self.filename = filename
        self.path = path
        self.buffer.replace(text)
        self.mark_saved()

    def mark_modified(self) -> None:
        self.modified = True

    def mark_saved(self) -> None:
        self.modified = False

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        """Receive every notice; returns an unsubscribe function."""
        self._notice_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._notice_listeners:
                self._notice_listeners.remove(listener)

        return unsubscribe

    def notify(
        self, message: str, level: NoticeLevel = NoticeLevel.INFO
    ) -> Notice:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        for listener in list(self._notice_listeners):
            listener(notice)
        return notice

    # ------------------------------------------------------------------
    # Toggles
    # ------------------------------------------------------------------

    def toggle_theme(self) -> Theme:
        self.theme = Theme.LIGHT if self.theme is Theme.DARK else Theme.DARK
        return self.theme

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.view_mode = ViewMode(mode)
