"""Tests for the unified config schema (config_schema.py).

Covers every section model (EditorConfig, SyncConfig, DiagramsConfig,
PendingConfig, LoggingConfig), UnifiedConfig and the build_config() factory.
"""

import pytest
from pydantic import ValidationError

from mdmirror.config_schema import (
    DiagramsConfig,
    EditorConfig,
    LoggingConfig,
    PendingConfig,
    SyncConfig,
    UnifiedConfig,
    build_config,
)

# ---------------------------------------------------------------------------
# UnifiedConfig tests
# ---------------------------------------------------------------------------


class TestUnifiedConfig:
    def test_empty_produces_valid_defaults(self):
        config = UnifiedConfig()
        assert config.editor.theme == "dark"
        assert config.editor.view_mode == "split"
        assert config.sync.forward_delay_ms == 80
        assert config.sync.reverse_delay_ms == 500
        assert config.sync.grace_delay_ms == 100
        assert config.diagrams.language == "mermaid"
        assert config.pending.max_age_ms == 30000
        assert config.logging.level == "INFO"

    def test_full_config_with_all_sections(self):
        config = UnifiedConfig(
            editor=EditorConfig(theme="light", view_mode="preview"),
            sync=SyncConfig(forward_delay_ms=50, hard_breaks=False),
            diagrams=DiagramsConfig(enabled=False, command="/opt/mmdc"),
            pending=PendingConfig(max_age_ms=10000),
            logging=LoggingConfig(level="DEBUG", file="/tmp/mdmirror.log"),
        )
        assert config.editor.view_mode == "preview"
        assert config.sync.hard_breaks is False
        assert config.diagrams.command == "/opt/mmdc"
        assert config.pending.max_age_ms == 10000
        assert config.logging.file == "/tmp/mdmirror.log"

    def test_unknown_sections_ignored(self):
        config = UnifiedConfig(**{"future_feature": {"key": "value"}})
        assert not hasattr(config, "future_feature")

    def test_frozen_model_prevents_mutation(self):
        config = UnifiedConfig()
        with pytest.raises(ValidationError):
            config.editor = EditorConfig(theme="light")


# ---------------------------------------------------------------------------
# Section tests
# ---------------------------------------------------------------------------


class TestEditorConfig:
    def test_rejects_unknown_theme(self):
        with pytest.raises(ValidationError):
            EditorConfig(theme="sepia")

    def test_rejects_unknown_view_mode(self):
        with pytest.raises(ValidationError):
            EditorConfig(view_mode="fullscreen")

    def test_state_dir_optional(self):
        assert EditorConfig().state_dir is None

    def test_frozen_model(self):
        cfg = EditorConfig()
        with pytest.raises(ValidationError):
            cfg.theme = "light"


class TestSyncConfig:
    @pytest.mark.parametrize(
        "field", ["forward_delay_ms", "reverse_delay_ms", "grace_delay_ms"]
    )
    def test_rejects_non_positive_delays(self, field):
        with pytest.raises(ValidationError):
            SyncConfig(**{field: 0})

    def test_rejects_absurd_delays(self):
        with pytest.raises(ValidationError):
            SyncConfig(forward_delay_ms=60000)

    def test_coerces_numeric_strings(self):
        assert SyncConfig(reverse_delay_ms="750").reverse_delay_ms == 750


class TestDiagramsConfig:
    def test_defaults(self):
        cfg = DiagramsConfig()
        assert cfg.enabled is True
        assert cfg.command == "mmdc"
        assert cfg.timeout == 30.0

    def test_empty_language_rejected(self):
        with pytest.raises(ValidationError):
            DiagramsConfig(language="")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            DiagramsConfig(timeout=0)


class TestPendingConfig:
    def test_negative_age_rejected(self):
        with pytest.raises(ValidationError):
            PendingConfig(max_age_ms=-1)


class TestLoggingConfig:
    def test_defaults(self):
        cfg = LoggingConfig()
        assert cfg.level == "INFO"
        assert cfg.file is None

    def test_frozen_model(self):
        cfg = LoggingConfig()
        with pytest.raises(ValidationError):
            cfg.level = "DEBUG"


# ---------------------------------------------------------------------------
# build_config tests
# ---------------------------------------------------------------------------


class TestBuildConfig:
    def test_empty_dict_returns_defaults(self):
        assert build_config({}) == UnifiedConfig()

    def test_partial_sections_fill_defaults(self):
        config = build_config({"editor": {"theme": "light"}})
        assert config.editor.theme == "light"
        assert config.editor.view_mode == "split"
        assert config.sync == SyncConfig()

    def test_full_raw_dict(self):
        config = build_config(
            {
                "editor": {"theme": "light", "scroll_sync": False},
                "sync": {"forward_delay_ms": 100},
                "diagrams": {"language": "mmd"},
                "pending": {"max_age_ms": 5000},
                "logging": {"level": "WARNING"},
            }
        )
        assert config.editor.scroll_sync is False
        assert config.sync.forward_delay_ms == 100
        assert config.diagrams.language == "mmd"
        assert config.pending.max_age_ms == 5000
        assert config.logging.level == "WARNING"

    def test_invalid_section_raises(self):
        with pytest.raises(ValidationError):
            build_config({"sync": {"forward_delay_ms": "soon"}})
