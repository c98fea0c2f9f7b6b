"""
YAML configuration discovery and loading for mdmirror.

Three files can contribute, highest precedence first:

1. ``$MDMIRROR_CONFIG``, an explicit path;
2. the project file, ``.mdmirror/config.yml`` (or ``.yaml``) in the working
   directory or the nearest parent that has one;
3. the user file, ``$XDG_CONFIG_HOME/mdmirror/config.yml`` (default
   ``~/.config``).

Files are merged key by key inside each section, so a project file can
change ``sync.forward_delay_ms`` and still inherit the user's other
``sync`` settings.  String values may reference environment variables as
``${VAR}`` or ``${VAR:-default}``.

Usage:
    from mdmirror.config_loader import load_hierarchical_config

    raw = load_hierarchical_config()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDMIRROR_CONFIG"
PROJECT_DIR_NAME = ".mdmirror"
CONFIG_NAMES = ("config.yml", "config.yaml")

# ${VAR} or ${VAR:-default}
_ENV_REF = re.compile(r"\$\{([^}:]+?)(?::-(.*?))?\}")


def interpolate_env_vars(value: str) -> str:
    """Substitute ``${VAR}`` / ``${VAR:-default}`` references in *value*.

    An unset or empty variable falls back to its default, or to ``""`` when
    there is none.  A ``${`` without a closing brace is kept as-is.
    """

    def _lookup(match: re.Match) -> str:
        current = os.environ.get(match.group(1))
        if current:
            return current
        return match.group(2) or ""

    return _ENV_REF.sub(_lookup, value)


def interpolate_tree(obj: Any) -> Any:
    """Apply ``interpolate_env_vars`` to every string in a YAML document."""
    if isinstance(obj, str):
        return interpolate_env_vars(obj)
    if isinstance(obj, list):
        return [interpolate_tree(item) for item in obj]
    if isinstance(obj, dict):
        return {key: interpolate_tree(item) for key, item in obj.items()}
    return obj


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / "mdmirror" / "config.yml"


def find_project_config(start: Path | None = None) -> Path | None:
    """Nearest ``.mdmirror/config.yml`` at or above *start* (default CWD)."""
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        for name in CONFIG_NAMES:
            path = candidate_dir / PROJECT_DIR_NAME / name
            if path.is_file():
                return path
    return None


def discover_config_files() -> list[Path]:
    """Existing config files, highest precedence first."""
    found: list[Path] = []
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser().resolve()
        if path.exists():
            found.append(path)
        else:
            logger.warning("%s points to a missing file: %s", CONFIG_ENV_VAR, path)

    project = find_project_config()
    if project is not None:
        found.append(project)

    user = user_config_path()
    if user.is_file() and user not in found:
        found.append(user)
    return found


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def _load_mapping(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError:
            logger.exception("Failed to parse config file %s", path)
            raise
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Config file %s has non-dict root (%s), skipping",
            path,
            type(data).__name__,
        )
        return {}
    return data


def load_hierarchical_config() -> dict[str, Any]:
    """Load every discovered config file and merge them.

    Files are applied from lowest to highest precedence.  Within a section
    mapping, keys from a higher-precedence file replace the same keys from
    a lower one; any other top-level value is replaced whole.  Env var
    references are resolved afterwards.

    Returns:
        The merged mapping, or ``{}`` when no config file exists.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config files found; using defaults")
        return {}

    merged: dict[str, Any] = {}
    for path in reversed(paths):
        logger.debug("Loading config: %s", path)
        for section, value in _load_mapping(path).items():
            current = merged.get(section)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[section] = {**current, **value}
            else:
                merged[section] = value

    return interpolate_tree(merged)
