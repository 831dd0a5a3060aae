"""Namespaced on-disk TTL cache used to make repeated runs idempotent."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
import time
from threading import RLock
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

MISSING = object()

ONE_WEEK_SECONDS = 60 * 60 * 24 * 7


class FileCache:
    """Persistent key/value cache with time-to-live expiry.

    Every entry lives in its own JSON file under ``base_path``. File names are
    the namespace followed by a digest of the key, so arbitrary keys map to
    safe file names and two namespaces can share a directory.

    I/O errors are not swallowed: a cache that cannot be written should stop
    the run rather than silently re-download everything next time.
    """

    def __init__(
        self,
        base_path: str,
        namespace: str = "photos",
        ttl: float = ONE_WEEK_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if not namespace:
            raise ValueError("namespace must not be empty")
        self.base_path = base_path
        self.namespace = namespace
        self.ttl = ttl
        self._clock = clock or time.time
        self._lock = RLock()
        os.makedirs(self.base_path, exist_ok=True)

    def _path_for(self, key: str) -> str:
        digest = hashlib.md5(key.encode("utf-8")).hexdigest()
        return os.path.join(self.base_path, f"{self.namespace}-{digest}")

    def _read_entry(self, key: str) -> Optional[dict]:
        path = self._path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        try:
            entry = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt cache entry for %r at %s", key, path)
            return None
        if not isinstance(entry, dict) or entry.get("key") != key:
            return None
        expires_at = entry.get("expires_at")
        if not isinstance(expires_at, (int, float)) or expires_at <= self._clock():
            return None
        return entry

    def get(self, key: str, default: Any = MISSING) -> Any:
        with self._lock:
            entry = self._read_entry(key)
            if entry is None:
                return default
            return entry.get("value")

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        entry = {
            "key": key,
            "value": value,
            "created_at": now,
            "expires_at": now + self.ttl,
        }
        payload = json.dumps(entry, ensure_ascii=False)
        target = self._path_for(key)
        with self._lock:
            fd, tmp_path = tempfile.mkstemp(dir=self.base_path, prefix=".tmp-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_path, target)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return self._read_entry(key) is not None


__all__ = ["FileCache", "MISSING", "ONE_WEEK_SECONDS"]
