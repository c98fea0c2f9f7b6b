"""Editor session startup and shutdown."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from dotenv import load_dotenv

from .config import Config, default_state_dir, load_config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import UnifiedConfig, build_config
from .editing import insert_block, toggle_line_prefix, wrap_selection
from .models import CursorStatus, DocumentStats, TextEdit
from .pending import PendingFileStore, consume_pending_file
from .preferences import PreferenceStore
from .render.diagrams import DiagramRenderer, MermaidCliRenderer, diagram_theme
from .render.pipeline import RenderPipeline
from .stats import cursor_status, document_stats
from .sync.coordinator import SyncCoordinator
from .sync.session import EditorSession, Theme, ViewMode
from .sync.surfaces import PreviewSurface, TextBuffer

logger = logging.getLogger(__name__)


@dataclass
class EditorApp:
    """Everything a host needs to drive one editing session."""

    config: Config
    session: EditorSession
    pipeline: RenderPipeline
    coordinator: SyncCoordinator
    preferences: PreferenceStore
    pending: PendingFileStore

    async def toggle_theme(self) -> Theme:
        """Flip the theme, re-render diagrams with it, and remember it."""
        theme = self.session.toggle_theme()
        renderer = self.pipeline.diagram_renderer
        if isinstance(renderer, MermaidCliRenderer):
            renderer.theme = diagram_theme(theme.value)
        self.preferences.update(theme=theme.value)
        await self.coordinator.render_now()
        return theme

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.session.set_view_mode(mode)
        self.preferences.update(view_mode=self.session.view_mode.value)

    def toggle_sidebar(self) -> bool:
        self.session.sidebar_collapsed = not self.session.sidebar_collapsed
        self.preferences.update(
            sidebar_collapsed=self.session.sidebar_collapsed
        )
        return self.session.sidebar_collapsed

    def stats(self) -> DocumentStats:
        return document_stats(self.session.text)

    def cursor_status(self, start: int, end: int | None = None) -> CursorStatus:
        return cursor_status(self.session.text, start, end)

    # Formatting commands write through the buffer and schedule a render

    def wrap_selection(
        self, start: int, end: int, before: str, after: str | None = None
    ) -> TextEdit:
        return self._apply(
            wrap_selection(self.session.text, start, end, before, after)
        )

    def toggle_line_prefix(self, start: int, end: int, prefix: str) -> TextEdit:
        return self._apply(
            toggle_line_prefix(self.session.text, start, end, prefix)
        )

    def insert_block(self, start: int, end: int, block: str) -> TextEdit:
        return self._apply(insert_block(self.session.text, start, end, block))

    def _apply(self, edit: TextEdit) -> TextEdit:
        if edit.text != self.session.text:
            self.session.buffer.replace(edit.text)
        return edit


def load_runtime_config(overrides: dict[str, Any] | None = None) -> Config:
    """Resolve configuration from CLI overrides, env, .env and YAML.

    Raises:
        ValueError: If the YAML or any resolved value is invalid.
    """
    # .env first so ${VAR} interpolation in YAML can use its values
    load_dotenv()

    unified = UnifiedConfig()
    config_files = discover_config_files()
    if config_files:
        unified = build_config(load_hierarchical_config())
        logger.info("Configuration loaded from: %s", config_files[0])

    opts = overrides or {}
    return load_config(
        theme=opts.get("theme"),
        view_mode=opts.get("view_mode"),
        state_dir=opts.get("state_dir"),
        no_diagrams=opts.get("no_diagrams", False),
        debug=opts.get("debug", False),
        unified=unified,
    )


def build_pipeline(
    config: Config,
    theme: str,
    diagram_renderer: DiagramRenderer | None = None,
) -> RenderPipeline:
    """Create the render pipeline described by *config*."""
    if diagram_renderer is None and config.diagrams_enabled:
        diagram_renderer = MermaidCliRenderer(
            command=config.diagram_command,
            theme=diagram_theme(theme),
            timeout=config.diagram_timeout,
        )
    if not config.diagrams_enabled:
        diagram_renderer = None
    return RenderPipeline(
        diagram_renderer,
        diagram_language=config.diagram_language,
        hard_breaks=config.hard_breaks,
    )


@asynccontextmanager
async def editor_lifespan(
    config_overrides: dict[str, Any] | None = None,
    diagram_renderer: DiagramRenderer | None = None,
    buffer: TextBuffer | None = None,
    preview: PreviewSurface | None = None,
) -> AsyncIterator[EditorApp]:
    """
    Manage editor session startup and shutdown.

    On startup:
    - Resolve configuration: CLI > env vars (.env loaded first) > YAML > defaults
    - Restore saved preferences (explicit theme/view overrides win)
    - Create the session with the welcome document, then load a pending
      external file if one is waiting and fresh
    - Wire the coordinator and render the initial view

    On shutdown:
    - Cancel pending sync timers and wait for running work

    Args:
        config_overrides: Optional dict with CLI values (theme, view_mode,
            state_dir, no_diagrams, debug).
        diagram_renderer: Replacement for the Mermaid CLI renderer.
        buffer: Host text-editing component.
        preview: Host rendered surface.

    Yields:
        The wired ``EditorApp``.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    logger.info("Editor session starting...")
    overrides = config_overrides or {}
    try:
        config = load_runtime_config(overrides)
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        raise RuntimeError(f"Configuration error: {e}") from e

    state_dir = config.state_dir or default_state_dir()
    preferences = PreferenceStore(state_dir)
    prefs = preferences.load()
    # Saved preferences beat configured defaults; CLI overrides beat both
    if preferences.path.exists():
        theme = overrides.get("theme") or prefs.theme
        view_mode = overrides.get("view_mode") or prefs.view_mode
    else:
        theme, view_mode = config.theme, config.view_mode

    session = EditorSession(
        buffer=buffer,
        preview=preview,
        theme=Theme(theme),
        view_mode=ViewMode(view_mode),
        scroll_sync=config.scroll_sync,
    )
    session.sidebar_collapsed = prefs.sidebar_collapsed

    pending = PendingFileStore(state_dir)
    consume_pending_file(
        session, pending, max_age_ms=config.pending_max_age_ms
    )

    pipeline = build_pipeline(config, theme, diagram_renderer)
    coordinator = SyncCoordinator(
        session,
        pipeline,
        forward_delay=config.forward_delay,
        reverse_delay=config.reverse_delay,
        grace_delay=config.grace_delay,
    )
    await coordinator.render_now()
    logger.info("Editor ready: %s", session.filename)

    app = EditorApp(
        config=config,
        session=session,
        pipeline=pipeline,
        coordinator=coordinator,
        preferences=preferences,
        pending=pending,
    )
    try:
        yield app
    finally:
        await coordinator.close()
        logger.info("Editor session closed")
