"""
Two-tier (in-process + on-disk) cache for reference data such as exchange rates and PPP multipliers.

Values are JSON-serializable dicts carrying a 'fetchedAt' ISO-8601 timestamp,
which is what staleness is measured against.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple

import config

logger = logging.getLogger(__name__)

CacheValue = Dict[str, Any]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """Format a datetime the way cached values store it (UTC, millisecond precision, Z suffix)"""
    return moment.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.') + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC"""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class CacheStore:
    """
    Persistence side channel for the cache.
    Implementations log their own failures and never raise to the caller.
    """

    def load(self, key: str) -> Optional[CacheValue]:
        raise NotImplementedError

    def save(self, key: str, value: CacheValue) -> None:
        raise NotImplementedError


class NullCacheStore(CacheStore):
    """Disables persistence (e.g. read-only deployments)"""

    def load(self, key: str) -> Optional[CacheValue]:
        return None

    def save(self, key: str, value: CacheValue) -> None:
        return None


class JsonFileCacheStore(CacheStore):
    """One JSON document per cache key, e.g. .exchange-rates.json"""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or config.CACHE_DIR

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f".{key}.json")

    def load(self, key: str) -> Optional[CacheValue]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {path}: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Ignoring cache file {path}: expected a JSON object")
            return None
        return data

    def save(self, key: str, value: CacheValue) -> None:
        path = self.path_for(key)
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(value, f, indent=2)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            # Disk caching not available - the in-process tier still works
            logger.warning(f"Could not persist cache file {path}: {e}")


class ReferenceCache:
    """
    TTL cache consulted before reference data providers.

    Reads go in-process first, then to the persistence store; disk hits are
    promoted in-process. get() also returns stale values (with fresh=False) so
    callers can fall back to them when a live refresh fails.
    """

    def __init__(
        self,
        ttl_seconds: int,
        store: Optional[CacheStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.store = store if store is not None else JsonFileCacheStore()
        self.clock = clock or utc_now
        self._memory: Dict[str, CacheValue] = {}
        self._write_lock = threading.Lock()

    def get(self, key: str) -> Tuple[Optional[CacheValue], bool]:
        """
        Look up a cached value.

        Returns:
            Tuple of (value or None, fresh)
        """
        value = self._memory.get(key)
        if value is None:
            value = self.store.load(key)
            if value is None or 'fetchedAt' not in value:
                return None, False
            self._memory[key] = value
        return value, not self.is_stale(value)

    def put(self, key: str, value: CacheValue) -> None:
        """Replace the cached value in both tiers (whole-value replacement, last writer wins)"""
        with self._write_lock:
            self._memory[key] = value
            self.store.save(key, value)

    def is_stale(self, value: CacheValue) -> bool:
        age = self.age(value)
        return age is None or age >= self.ttl

    def age(self, value: CacheValue) -> Optional[timedelta]:
        try:
            fetched_at = parse_timestamp(value['fetchedAt'])
        except (KeyError, TypeError, ValueError):
            return None
        return self.clock() - fetched_at

    def now_iso(self) -> str:
        return isoformat_utc(self.clock())

    def clear(self, key: Optional[str] = None) -> None:
        """Drop in-process entries (the persistence store is left alone)"""
        with self._write_lock:
            if key is None:
                self._memory.clear()
            else:
                self._memory.pop(key, None)
