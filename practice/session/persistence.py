"""
Session Persistence - client-local session snapshots

Mirrors an in-progress session into a key/value store so a reload does
not lose progress. The stored record is a cache: anything unreadable,
from another schema version, for another group or older than the
freshness window is deleted and the caller builds a fresh queue.

Storage is any MutableMapping[str, str]. FileSessionStorage keeps one
JSON file per key; a plain dict works for in-memory use and tests.
"""

from __future__ import annotations
import logging
import os
from collections.abc import MutableMapping
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, Optional
from urllib.parse import quote, unquote

from pydantic import ValidationError

from practice.session.types import SessionSnapshot
from practice.srs.constants import SNAPSHOT_TTL_HOURS, SNAPSHOT_VERSION
from practice.srs.review_state import as_utc


logger = logging.getLogger(__name__)

KEY_PREFIX = "practice_session"
DEFAULT_SESSION_DIR = Path.home() / ".study_practice" / "sessions"


def session_key(project_id: str, group_id: str, version: int = SNAPSHOT_VERSION) -> str:
    return f"{KEY_PREFIX}:v{version}:{project_id}:{group_id}"


def get_session_dir() -> Path:
    """Snapshot directory from PRACTICE_SESSION_DIR, or the default under home."""
    configured = os.getenv("PRACTICE_SESSION_DIR")
    return Path(configured).expanduser() if configured else DEFAULT_SESSION_DIR


class FileSessionStorage(MutableMapping):
    """
    Directory-backed string store: one file per key.

    Keys are percent-encoded into file names so they round-trip.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else get_session_dir()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}{self.SUFFIX}"

    def __getitem__(self, key: str) -> str:
        path = self._path(key)
        if not path.exists():
            raise KeyError(key)
        return path.read_text(encoding="utf-8")

    def __setitem__(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def __delitem__(self, key: str) -> None:
        path = self._path(key)
        if not path.exists():
            raise KeyError(key)
        path.unlink()

    def __iter__(self) -> Iterator[str]:
        for path in sorted(self.directory.glob(f"*{self.SUFFIX}")):
            yield unquote(path.name[: -len(self.SUFFIX)])

    def __len__(self) -> int:
        return sum(1 for _ in self.directory.glob(f"*{self.SUFFIX}"))


class SessionPersistence:
    """
    Versioned, TTL-checked snapshot store keyed by (project, group).
    """

    def __init__(
        self,
        storage: Optional[MutableMapping] = None,
        ttl: timedelta = timedelta(hours=SNAPSHOT_TTL_HOURS),
        version: int = SNAPSHOT_VERSION
    ):
        self.storage = storage if storage is not None else FileSessionStorage()
        self.ttl = ttl
        self.version = version

    def key(self, project_id: str, group_id: str) -> str:
        return session_key(project_id, group_id, self.version)

    def save(self, snapshot: SessionSnapshot) -> bool:
        """
        Write snapshot under its (project, group) key.

        Storage failures are logged and reported as False; the session
        itself keeps running.
        """
        key = self.key(snapshot.project_id, snapshot.group_id)
        try:
            self.storage[key] = snapshot.model_dump_json()
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save practice session %s: %s", key, exc)
            return False
        return True

    def clear(self, project_id: str, group_id: str) -> None:
        key = self.key(project_id, group_id)
        try:
            self.storage.pop(key, None)
        except OSError as exc:
            logger.warning("Could not clear practice session %s: %s", key, exc)

    def load(
        self,
        project_id: str,
        group_id: str,
        now: Optional[datetime] = None
    ) -> Optional[SessionSnapshot]:
        """
        Return the stored snapshot if it can be resumed, else None.

        A record that exists but fails validation is deleted.
        """
        key = self.key(project_id, group_id)
        try:
            raw = self.storage.get(key)
        except OSError as exc:
            logger.warning("Could not read practice session %s: %s", key, exc)
            return None
        if raw is None:
            return None

        now = as_utc(now or datetime.now(timezone.utc))
        reason = None
        snapshot = None
        try:
            snapshot = SessionSnapshot.model_validate_json(raw)
        except (ValidationError, ValueError):
            reason = "unreadable"

        if snapshot is not None:
            if snapshot.version != self.version:
                reason = f"version {snapshot.version} != {self.version}"
            elif snapshot.project_id != project_id or snapshot.group_id != group_id:
                reason = "project/group mismatch"
            else:
                age = now - as_utc(snapshot.saved_at)
                if age > self.ttl:
                    reason = "expired"
                elif age < timedelta(0):
                    reason = "saved in the future"

        if reason is not None:
            logger.info("Discarding practice session %s (%s)", key, reason)
            self.clear(project_id, group_id)
            return None

        return snapshot
