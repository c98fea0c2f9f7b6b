"""Sync coordinator: keeps the Markdown buffer and the rendered view consistent.

Forward direction (buffer -> preview)::

    buffer change -> forward timer (80 ms) -> RenderPipeline.render()
                  -> PreviewSurface.replace()

Reverse direction (preview -> buffer)::

    preview input -> reverse timer (500 ms) -> tree_to_markdown()
                  -> compare with buffer -> TextBuffer.replace()
                  -> grace timer (100 ms) -> back to IDLE

``state`` is a cooperative exclusion flag on the single event-loop thread:
while one direction is being applied the other direction's triggers are
ignored, which is what stops each write from echoing back forever.  The
``editing`` flag is separate and records that the preview is the active
edit target, so only user-authored preview changes are converted back.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ..converters.tree_to_markdown import tree_to_markdown
from ..core.debounce import Debouncer
from ..render.pipeline import RenderPipeline
from ..tree.nodes import Element
from .session import EditorSession
from .state import SyncState

logger = logging.getLogger(__name__)

FORWARD_DELAY = 0.08
REVERSE_DELAY = 0.5
GRACE_DELAY = 0.1


class SyncCoordinator:
    """Decide, on every change notification, which pipeline runs and whether
    its result is written back.

    Args:
        session: Session holding the buffer and the preview surface.
        pipeline: Forward render pipeline.
        forward_delay: Debounce for buffer changes, in seconds.
        reverse_delay: Debounce for preview input, in seconds.
        grace_delay: How long the buffer stays guarded after a reverse write.
        to_text: Structural converter, ``tree -> markdown``.
    """

    def __init__(
        self,
        session: EditorSession,
        pipeline: RenderPipeline,
        forward_delay: float = FORWARD_DELAY,
        reverse_delay: float = REVERSE_DELAY,
        grace_delay: float = GRACE_DELAY,
        to_text: Callable[[Element], str] = tree_to_markdown,
    ) -> None:
        self.session = session
        self.pipeline = pipeline
        self.to_text = to_text
        self.state = SyncState.IDLE
        self.editing = False
        self.forward_passes = 0
        self.reverse_writes = 0
        self._forward_lock = asyncio.Lock()
        self._forward = Debouncer(forward_delay, self._run_forward, "forward")
        self._reverse = Debouncer(reverse_delay, self._run_reverse, "reverse")
        self._grace = Debouncer(grace_delay, self._release_reverse, "grace")
        self._unsubscribe: Callable[[], None] | None = session.buffer.subscribe(
            self.on_source_changed
        )

    # ------------------------------------------------------------------
    # Text-editing component events
    # ------------------------------------------------------------------

    def on_source_changed(self, text: str | None = None) -> None:
        """Buffer changed: schedule a forward render unless it is our echo."""
        if self.state is SyncState.APPLYING_REVERSE:
            logger.debug("Ignoring buffer change echoed from reverse sync")
            return
        self.session.mark_modified()
        self._forward.schedule()

    # ------------------------------------------------------------------
    # Preview surface events
    # ------------------------------------------------------------------

    def on_preview_focus(self) -> None:
        self.session.preview.focused = True
        self.editing = True

    def on_preview_input(self) -> None:
        """Preview edited: (re)start the reverse timer if the edit is the user's."""
        if self.state is SyncState.APPLYING_FORWARD:
            logger.debug("Ignoring preview input during forward render")
            return
        if self.session.preview.focused:
            self.editing = True
        if not self.editing:
            logger.debug("Ignoring preview input outside an editing session")
            return
        self._reverse.schedule()

    def on_preview_blur(self) -> None:
        """Preview lost focus: flush pending edits immediately."""
        self.session.preview.focused = False
        if not self.editing:
            return
        self._reverse.cancel()
        if self._grace.pending:
            # The earlier write's echo has already been delivered
            self._grace.cancel()
            self._release_reverse()
        self.sync_preview_to_source()
        self.editing = False

    # ------------------------------------------------------------------
    # Reverse direction
    # ------------------------------------------------------------------

    def sync_preview_to_source(self) -> bool:
        """Convert the preview back to Markdown and write it if it differs.

        Returns:
            True if the buffer was overwritten.
        """
        if self.state is not SyncState.IDLE:
            logger.debug("Reverse sync skipped while %s", self.state.value)
            return False
        try:
            text = self.to_text(self.session.preview.root)
        except Exception:
            logger.exception("Converting the preview to Markdown failed")
            return False

        if text.strip() == self.session.text.strip():
            logger.debug("Reverse sync produced no change; buffer untouched")
            return False

        self.state = SyncState.APPLYING_REVERSE
        try:
            self.session.buffer.replace(text)
        except Exception:
            logger.exception("Writing converted text to the buffer failed")
            self.state = SyncState.IDLE
            return False
        self.session.mark_modified()
        self.reverse_writes += 1
        self._grace.schedule()
        return True

    def _run_reverse(self) -> None:
        self.sync_preview_to_source()

    def _release_reverse(self) -> None:
        self.editing = False
        if self.state is SyncState.APPLYING_REVERSE:
            self.state = SyncState.IDLE

    # ------------------------------------------------------------------
    # Forward direction
    # ------------------------------------------------------------------

    async def _run_forward(self) -> None:
        async with self._forward_lock:
            if self.state is SyncState.APPLYING_REVERSE:
                logger.debug("Forward render skipped during reverse sync")
                return
            self.state = SyncState.APPLYING_FORWARD
            try:
                tree = await self.pipeline.render(self.session.text)
                self.forward_passes += 1
                if not self.session.preview.replace(tree):
                    logger.debug("Rendered tree unchanged; preview untouched")
            except Exception:
                logger.exception("Forward render failed; keeping previous view")
            finally:
                self.state = SyncState.IDLE

    async def render_now(self) -> None:
        """Render immediately, dropping any pending forward timer."""
        self._forward.cancel()
        await self._run_forward()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def pending(self) -> bool:
        """True while any timer is armed."""
        return self._forward.pending or self._reverse.pending or self._grace.pending

    async def drain(self) -> None:
        """Wait for callbacks that have already been launched."""
        for debouncer in (self._forward, self._reverse, self._grace):
            await debouncer.drain()

    async def close(self) -> None:
        """Cancel pending timers, finish running work and detach from the buffer."""
        for debouncer in (self._forward, self._reverse, self._grace):
            debouncer.cancel()
        await self.drain()
        self.state = SyncState.IDLE
        self.editing = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
