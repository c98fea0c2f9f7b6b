"""Runtime configuration for the editor session and the CLI.

Resolves settings from CLI args, environment variables, .env files and the
YAML config file.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    MDMIRROR_THEME: ``dark`` or ``light``
    MDMIRROR_VIEW_MODE: ``editor``, ``split`` or ``preview``
    MDMIRROR_SCROLL_SYNC: Mirror scroll position (true/false)
    MDMIRROR_STATE_DIR: Directory for preferences and the pending file
    MDMIRROR_DIAGRAMS: Render diagram blocks (true/false)
    MDMIRROR_MERMAID_CMD: Mermaid CLI executable
    MDMIRROR_FORWARD_DELAY_MS / MDMIRROR_REVERSE_DELAY_MS /
    MDMIRROR_GRACE_DELAY_MS: Sync debounce timings
    MDMIRROR_DEBUG: Enable debug logging
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .config_schema import UnifiedConfig

logger = logging.getLogger(__name__)

THEMES = ("dark", "light")
VIEW_MODES = ("editor", "split", "preview")


def default_state_dir() -> Path:
    return Path.home() / ".local" / "state" / "mdmirror"


@dataclass
class Config:
    theme: str = "dark"
    view_mode: str = "split"
    scroll_sync: bool = True
    state_dir: Path | None = None
    forward_delay_ms: int = 80
    reverse_delay_ms: int = 500
    grace_delay_ms: int = 100
    hard_breaks: bool = True
    diagrams_enabled: bool = True
    diagram_language: str = "mermaid"
    diagram_command: str = "mmdc"
    diagram_timeout: float = 30.0
    pending_max_age_ms: int = 30000
    debug: bool = False

    @property
    def forward_delay(self) -> float:
        return self.forward_delay_ms / 1000

    @property
    def reverse_delay(self) -> float:
        return self.reverse_delay_ms / 1000

    @property
    def grace_delay(self) -> float:
        return self.grace_delay_ms / 1000


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If a delay is not positive, the theme or view mode is
            unknown, or the diagram language is empty.
    """
    config.theme = config.theme.strip().lower()
    if config.theme not in THEMES:
        raise ValueError(
            f"Invalid theme '{config.theme}': must be one of {', '.join(THEMES)}"
        )

    config.view_mode = config.view_mode.strip().lower()
    if config.view_mode not in VIEW_MODES:
        raise ValueError(
            f"Invalid view mode '{config.view_mode}': must be one of {', '.join(VIEW_MODES)}"
        )

    for name in ("forward_delay_ms", "reverse_delay_ms", "grace_delay_ms"):
        if getattr(config, name) <= 0:
            raise ValueError(
                f"Invalid {name} '{getattr(config, name)}': must be a positive number of milliseconds"
            )

    config.diagram_language = config.diagram_language.strip()
    if not config.diagram_language:
        raise ValueError(
            "Diagram language cannot be empty. Set diagrams.language in config.yml."
        )

    if config.diagram_timeout <= 0:
        raise ValueError(
            f"Invalid diagram timeout '{config.diagram_timeout}': must be positive"
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _get_int_env(key: str) -> int | None:
    val = os.getenv(key)
    if val is None:
        return None
    try:
        return int(val)
    except ValueError:
        raise ValueError(
            f"Invalid {key} '{val}': must be a whole number of milliseconds"
        ) from None


def load_config(
    theme: str | None = None,
    view_mode: str | None = None,
    state_dir: str | None = None,
    no_diagrams: bool = False,
    debug: bool = False,
    unified: UnifiedConfig | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > YAML (``unified``) > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        theme: Override theme.
        view_mode: Override layout.
        state_dir: Override state directory.
        no_diagrams: Disable diagram rendering (CLI flag).
        debug: Enable debug logging (CLI flag).
        unified: Parsed YAML configuration.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If any resolved value is invalid.
    """
    yaml_cfg = unified or UnifiedConfig()

    # --- String fields: CLI > env > YAML ---

    final_theme = theme or os.getenv("MDMIRROR_THEME") or yaml_cfg.editor.theme
    final_view = (
        view_mode or os.getenv("MDMIRROR_VIEW_MODE") or yaml_cfg.editor.view_mode
    )
    state_raw = (
        state_dir or os.getenv("MDMIRROR_STATE_DIR") or yaml_cfg.editor.state_dir
    )
    final_state_dir = (
        Path(state_raw).expanduser() if state_raw else default_state_dir()
    )
    final_command = os.getenv("MDMIRROR_MERMAID_CMD") or yaml_cfg.diagrams.command

    # --- Boolean fields: CLI > env > YAML ---

    if no_diagrams:
        final_diagrams = False
    else:
        env_diagrams = _get_bool_env("MDMIRROR_DIAGRAMS")
        final_diagrams = (
            env_diagrams if env_diagrams is not None else yaml_cfg.diagrams.enabled
        )

    env_scroll = _get_bool_env("MDMIRROR_SCROLL_SYNC")
    final_scroll = (
        env_scroll if env_scroll is not None else yaml_cfg.editor.scroll_sync
    )

    if debug:
        final_debug = True
    else:
        final_debug = bool(_get_bool_env("MDMIRROR_DEBUG"))

    # --- Numeric fields: env > YAML ---

    def _delay(key: str, fallback: int) -> int:
        value = _get_int_env(key)
        return fallback if value is None else value

    config = Config(
        theme=final_theme,
        view_mode=final_view,
        scroll_sync=final_scroll,
        state_dir=final_state_dir,
        forward_delay_ms=_delay(
            "MDMIRROR_FORWARD_DELAY_MS", yaml_cfg.sync.forward_delay_ms
        ),
        reverse_delay_ms=_delay(
            "MDMIRROR_REVERSE_DELAY_MS", yaml_cfg.sync.reverse_delay_ms
        ),
        grace_delay_ms=_delay(
            "MDMIRROR_GRACE_DELAY_MS", yaml_cfg.sync.grace_delay_ms
        ),
        hard_breaks=yaml_cfg.sync.hard_breaks,
        diagrams_enabled=final_diagrams,
        diagram_language=yaml_cfg.diagrams.language,
        diagram_command=final_command,
        diagram_timeout=yaml_cfg.diagrams.timeout,
        pending_max_age_ms=yaml_cfg.pending.max_age_ms,
        debug=final_debug,
    )

    validate_config(config)

    return config
