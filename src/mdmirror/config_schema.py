"""Unified configuration schema for mdmirror.

Defines Pydantic models for the YAML config structure with dedicated
sections for the editor, the sync timers, diagram rendering, the pending
external file and logging.  Every section has defaults, so an empty or
missing config file is valid.

Usage:
    from mdmirror.config_schema import UnifiedConfig, build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class EditorConfig(BaseModel):
    """Editor appearance and state location."""

    theme: Literal["dark", "light"] = Field(
        default="dark", description="Initial theme"
    )
    view_mode: Literal["editor", "split", "preview"] = Field(
        default="split", description="Initial layout"
    )
    scroll_sync: bool = Field(
        default=True, description="Mirror scroll position between panes"
    )
    state_dir: str | None = Field(
        default=None,
        description="Directory for preferences and the pending file record",
    )

    model_config = {"frozen": True}


class SyncConfig(BaseModel):
    """Debounce timings of the sync coordinator, in milliseconds."""

    forward_delay_ms: int = Field(
        default=80, ge=1, le=10000, description="Buffer change -> render"
    )
    reverse_delay_ms: int = Field(
        default=500, ge=1, le=60000, description="Preview input -> buffer"
    )
    grace_delay_ms: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Echo suppression after a reverse write",
    )
    hard_breaks: bool = Field(
        default=True, description="Render single newlines as line breaks"
    )

    model_config = {"frozen": True}


class DiagramsConfig(BaseModel):
    """Diagram rendering settings."""

    enabled: bool = Field(default=True, description="Render diagram blocks")
    language: str = Field(
        default="mermaid", min_length=1, description="Diagram fence language"
    )
    command: str = Field(default="mmdc", description="Mermaid CLI executable")
    timeout: float = Field(
        default=30.0, gt=0, description="Seconds allowed per diagram"
    )

    model_config = {"frozen": True}


class PendingConfig(BaseModel):
    """External file hand-over settings."""

    max_age_ms: int = Field(
        default=30000, ge=0, description="Discard older pending files"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    editor: EditorConfig = Field(default_factory=EditorConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    diagrams: DiagramsConfig = Field(default_factory=DiagramsConfig)
    pending: PendingConfig = Field(default_factory=PendingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully: anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
