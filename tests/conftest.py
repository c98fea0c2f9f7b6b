"""Shared pytest fixtures for mdmirror tests."""

import asyncio

import pytest

from mdmirror.render.diagrams import DiagramRenderError
from mdmirror.render.pipeline import RenderPipeline
from mdmirror.sync.coordinator import SyncCoordinator
from mdmirror.sync.session import EditorSession

# Short timers keep the coordinator tests fast; the ordering is what matters
FORWARD = 0.01
REVERSE = 0.03
GRACE = 0.02


class FakeDiagramRenderer:
    """Diagram renderer double.

    Records every call, fails for sources containing ``invalid``, and can
    simulate a slow, non-reentrant subsystem.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.active = 0
        self.max_active = 0

    async def __call__(self, source: str, diagram_id: str) -> str:
        self.calls.append((source, diagram_id))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if "invalid" in source:
                raise DiagramRenderError("Parse error on line 2")
            return f'<svg id="{diagram_id}"></svg>'
        finally:
            self.active -= 1


@pytest.fixture
def make_renderer():
    """Factory for renderer doubles with custom behaviour."""
    return FakeDiagramRenderer


@pytest.fixture
def fake_renderer():
    return FakeDiagramRenderer()


@pytest.fixture
def pipeline(fake_renderer):
    return RenderPipeline(fake_renderer)


@pytest.fixture
def session():
    return EditorSession(text="# Start\n")


@pytest.fixture
async def coordinator(session, pipeline):
    """Coordinator with short timers, closed after the test."""
    coord = SyncCoordinator(
        session,
        pipeline,
        forward_delay=FORWARD,
        reverse_delay=REVERSE,
        grace_delay=GRACE,
    )
    yield coord
    await coord.close()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run with an empty CWD and HOME so no real config or state is used."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for var in (
        "MDMIRROR_CONFIG",
        "XDG_CONFIG_HOME",
        "MDMIRROR_THEME",
        "MDMIRROR_VIEW_MODE",
        "MDMIRROR_SCROLL_SYNC",
        "MDMIRROR_STATE_DIR",
        "MDMIRROR_DIAGRAMS",
        "MDMIRROR_MERMAID_CMD",
        "MDMIRROR_FORWARD_DELAY_MS",
        "MDMIRROR_REVERSE_DELAY_MS",
        "MDMIRROR_GRACE_DELAY_MS",
        "MDMIRROR_DEBUG",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    return work
