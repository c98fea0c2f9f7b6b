"""Proportional scroll mirroring between the source and preview panes."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .session import EditorSession, ViewMode
from .surfaces import ScrollSurface

logger = logging.getLogger(__name__)

FrameRequest = Callable[[Callable[[], None]], None]


def next_loop_tick(callback: Callable[[], None]) -> None:
    """Run *callback* on the next event-loop iteration (the "next frame")."""
    asyncio.get_running_loop().call_soon(callback)


class ScrollMirror:
    """Keep both panes at the same scroll fraction.

    A programmatic scroll of the other pane produces its own scroll event;
    the ``syncing`` flag suppresses that event and is only cleared on the
    next frame, once the programmatic scroll has settled.

    Args:
        session: Provides the scroll-sync toggle and the view mode.
        source: Scroll geometry of the source pane.
        preview: Scroll geometry of the preview pane.
        request_frame: Schedules a callback for the next frame.
    """

    def __init__(
        self,
        session: EditorSession,
        source: ScrollSurface,
        preview: ScrollSurface,
        request_frame: FrameRequest = next_loop_tick,
    ) -> None:
        self.session = session
        self.source = source
        self.preview = preview
        self.request_frame = request_frame
        self.syncing = False

    def on_source_scroll(self) -> bool:
        return self._mirror(self.source, self.preview)

    def on_preview_scroll(self) -> bool:
        return self._mirror(self.preview, self.source)

    def _mirror(self, scrolled: ScrollSurface, other: ScrollSurface) -> bool:
        if self.syncing:
            return False
        if not self.session.scroll_sync:
            return False
        if self.session.view_mode is not ViewMode.SPLIT:
            return False

        self.syncing = True
        other.scroll_to_fraction(scrolled.fraction())
        self.request_frame(self._release)
        return True

    def _release(self) -> None:
        self.syncing = False
