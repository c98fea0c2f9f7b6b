"""Pending external file: a document handed over once by the host.

When the host intercepts an externally-opened Markdown document it stores a
single ``PendingFile`` record.  The editor consumes it on startup:

* the record is removed before it is acted on, so it is used at most once;
* records older than ``PENDING_MAX_AGE_MS`` are discarded unused.

The record lives in a JSON file in the state directory and is written
atomically (temp file + ``os.replace()``) so readers never see partial data.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path

from pydantic import ValidationError

from .models import NoticeLevel, PendingFile
from .sync.session import EditorSession

logger = logging.getLogger(__name__)

PENDING_MAX_AGE_MS = 30_000
PENDING_FILENAME = "pending_file.json"


def now_ms() -> int:
    return int(time.time() * 1000)


class PendingFileStore:
    """Load, store and remove the single pending-file record.

    Args:
        state_dir: Directory holding the record file.
    """

    def __init__(self, state_dir: Path) -> None:
        self._state_dir = state_dir

    @property
    def path(self) -> Path:
        return self._state_dir / PENDING_FILENAME

    def put(self, record: PendingFile) -> None:
        """Persist *record* atomically, replacing any previous one."""
        self._state_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self._state_dir), suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(record.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def take(self) -> PendingFile | None:
        """Remove and return the stored record, if any.

        Unreadable or malformed records are logged, removed and treated as
        absent.  A record that cannot be removed is never returned.
        """
        path = self.path
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read pending file record: %s", e)
            return None

        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            # A record still on disk is never loaded
            logger.warning("Could not remove pending file record: %s", e)
            return None

        try:
            return PendingFile.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Discarding malformed pending file record: %s", e)
            return None


def consume_pending_file(
    session: EditorSession,
    store: PendingFileStore,
    now: int | None = None,
    max_age_ms: int = PENDING_MAX_AGE_MS,
) -> PendingFile | None:
    """Load the pending external file into *session*, at most once.

    Args:
        session: Session to load into.
        store: Where the record is kept.
        now: Current time in ms since the epoch (defaults to the clock).
        max_age_ms: Records strictly older than this are discarded.

    Returns:
        The loaded record, or None if nothing was loaded.
    """
    record = store.take()
    if record is None:
        return None

    current = now_ms() if now is None else now
    age = current - record.timestamp
    if age > max_age_ms:
        logger.info(
            "Discarding stale pending file %s (%d ms old)",
            record.filename,
            age,
        )
        return None

    session.load_document(record.filename, record.content)
    session.notify(f"Opened: {record.filename}", NoticeLevel.SUCCESS)
    return record
