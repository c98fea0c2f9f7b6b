"""Coordinator state shared by the forward and reverse pipelines."""

from __future__ import annotations

from enum import Enum


class SyncState(str, Enum):
    """Which side, if any, is currently being written by the coordinator.

    ``APPLYING_FORWARD``: a rendered tree is being written into the preview
    surface, so preview edits must not trigger a reverse sync.

    ``APPLYING_REVERSE``: converted text is being written into the buffer,
    so buffer changes must not trigger a forward render.
    """

    IDLE = "idle"
    APPLYING_FORWARD = "applying_forward"
    APPLYING_REVERSE = "applying_reverse"
