"""Persisted user preferences (theme, view mode, sidebar state)."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from .models import Preferences

logger = logging.getLogger(__name__)

PREFERENCES_FILENAME = "preferences.json"


class PreferenceStore:
    """JSON-file backed preference storage.

    Missing, unreadable or invalid files yield the default preferences.

    Args:
        state_dir: Directory holding the preferences file.
    """

    def __init__(self, state_dir: Path) -> None:
        self._state_dir = state_dir

    @property
    def path(self) -> Path:
        return self._state_dir / PREFERENCES_FILENAME

    def load(self) -> Preferences:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Preferences()
        except OSError as e:
            logger.warning("Could not read preferences: %s", e)
            return Preferences()

        try:
            return Preferences.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Ignoring invalid preferences file: %s", e)
            return Preferences()

    def save(self, prefs: Preferences) -> None:
        """Persist *prefs* atomically."""
        self._state_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self._state_dir), suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(prefs.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def update(self, **changes: object) -> Preferences:
        """Load, apply *changes*, validate and save; returns the new value."""
        prefs = Preferences.model_validate(
            {**self.load().model_dump(), **changes}
        )
        self.save(prefs)
        return prefs
