"""
Per-Space Cache Module

This module implements the key-value storage of a single space.

Each key maps to an immutable Entry. All read-modify-write decisions
(set, prolong, lazy eviction) go through compute(), which runs the
decision exactly once while holding the lock stripe owning the key.
Unrelated keys hash to different stripes and do not wait for each other.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Any, List, Optional, Set

from ..config.settings import settings
from ..exceptions import KeyNotFoundError, UnexpectedError
from .entry import Clock, Entry, ValueHolder, ValueMeta, check_expired_at, to_bytes, utcnow

logger = logging.getLogger(__name__)


class SpaceCache:
    """
    In-memory key-value storage of one space with per-entry expiration.

    Features:
    - Expiration: every entry expires at its own absolute expired_at
      (None = never). Expired entries are treated as absent and removed
      lazily when they are read or listed.
    - Versioning: the version of a key grows by one each time its stored
      bytes actually change.
    - Atomic updates: set() and prolong() are linearizable per key.

    Internal Storage:
        Plain dict, key -> Entry. Entries are replaced, never mutated.

    Attributes:
        name: Name of the space this cache belongs to
    """

    def __init__(self, name: str, clock: Optional[Clock] = None, lock_stripes: int = None):
        """
        Initialize the space cache.

        Args:
            name: Space name (used for errors and logging)
            clock: Callable returning the current aware datetime (default UTC now)
            lock_stripes: Number of key lock stripes (default from settings.LOCK_STRIPES)

        Raises:
            ValueError: If lock_stripes is not positive
        """
        stripes = lock_stripes if lock_stripes is not None else settings.LOCK_STRIPES
        if stripes <= 0:
            raise ValueError("lock_stripes must be positive")

        self.name = name
        self._clock = clock if clock is not None else utcnow
        self._entries: Dict[str, Entry] = {}
        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(stripes)]

    def _lock_for(self, key: str) -> threading.Lock:
        return self._locks[hash(key) % len(self._locks)]

    def compute(self, key: str, fn: Callable[[Optional[Entry]], Optional[Entry]]) -> Optional[Entry]:
        """
        Atomically recompute the entry of a key.

        fn receives the current entry (or None) and is called exactly once
        under the key's lock. Its result replaces the entry; None removes
        the key; returning the same entry leaves the map untouched.

        Args:
            key: The key to recompute
            fn: Decision callback

        Returns:
            The entry now stored for the key, or None
        """
        with self._lock_for(key):
            old = self._entries.get(key)
            new = fn(old)
            if new is None:
                if old is not None:
                    # clear() does not take stripe locks, the key may be gone already
                    self._entries.pop(key, None)
            elif new is not old:
                self._entries[key] = new
            return new

    def _evict_if_expired(self, key: str, now: datetime) -> None:
        """Remove the key only if the entry stored right now is expired."""
        def _evict(old: Optional[Entry]) -> Optional[Entry]:
            if old is not None and old.is_expired(now):
                return None
            return old

        self.compute(key, _evict)

    def get(self, key: str) -> Optional[ValueHolder]:
        """
        Retrieve the value and metadata for a key.

        Args:
            key: The key to look up

        Returns:
            ValueHolder if the key is present and live, None otherwise.
            An expired entry is removed before returning None.
        """
        now = self._clock()
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(now):
            # Lazy expiration
            logger.debug(f"Key '{key}' in space '{self.name}' expired")
            self._evict_if_expired(key, now)
            return None

        return entry.holder()

    def set(self, key: str, value: bytes, expired_at: Optional[datetime] = None) -> ValueMeta:
        """
        Insert or update a value.

        Exactly one of the following happens atomically:
        - key absent or expired: a fresh entry with version 0 is stored
        - stored bytes differ: version is bumped, modified_at set to now
        - stored bytes are identical: only expired_at is replaced,
          version and timestamps stay as they are

        Args:
            key: The key to store
            value: Raw bytes to associate with the key
            expired_at: Absolute expiration time (None = never expires)

        Returns:
            Metadata of the stored entry

        Raises:
            TypeError: If value is not bytes-like
            ValueError: If expired_at is a naive datetime
        """
        value = to_bytes(value)
        check_expired_at(expired_at)
        now = self._clock()

        def _set(old: Optional[Entry]) -> Entry:
            if old is None or old.is_expired(now):
                return Entry.create(value, expired_at, now)
            if old.value != value:
                return old.modify(value, expired_at, now)
            return old.prolong(expired_at)

        entry = self.compute(key, _set)
        if entry is None:
            raise UnexpectedError(f"set produced no entry for key '{key}'")
        return entry.meta()

    def prolong(self, key: str, expired_at: Optional[datetime]) -> ValueMeta:
        """
        Replace the expiration time of a live entry.

        Value, version, created_at and modified_at are left unchanged.

        Args:
            key: The key to prolong
            expired_at: New absolute expiration time

        Returns:
            Metadata of the updated entry

        Raises:
            KeyNotFoundError: If the key is missing or expired
            ValueError: If expired_at is a naive datetime
        """
        check_expired_at(expired_at)
        now = self._clock()

        def _prolong(old: Optional[Entry]) -> Optional[Entry]:
            if old is None or old.is_expired(now):
                return None
            return old.prolong(expired_at)

        entry = self.compute(key, _prolong)
        if entry is None:
            raise KeyNotFoundError(self.name, key)
        return entry.meta()

    def invalidate(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        with self._lock_for(key):
            self._entries.pop(key, None)

    def keys(self) -> Set[str]:
        """
        Get the keys whose entries are currently live.

        Expired entries found while scanning are removed.

        Returns:
            Set of live keys
        """
        now = self._clock()
        live = set()
        for key, entry in self._entries.copy().items():
            if entry.is_expired(now):
                self._evict_if_expired(key, now)
            else:
                live.add(key)
        return live

    def size(self) -> int:
        """
        Get the current number of keys in the space.

        Note: This may include expired keys that haven't been cleaned up yet.
        """
        return len(self._entries)

    def clear(self) -> None:
        """Remove all keys from the space."""
        self._entries.clear()

    def cleanup_expired(self) -> int:
        """
        Remove all expired keys (active expiration).

        Each removal re-checks the entry under its key lock, so an entry
        rewritten concurrently is kept.

        Returns:
            Number of keys removed
        """
        now = self._clock()
        removed = 0
        for key, entry in self._entries.copy().items():
            if not entry.is_expired(now):
                continue

            def _evict(old: Optional[Entry]) -> Optional[Entry]:
                nonlocal removed
                if old is not None and old.is_expired(now):
                    removed += 1
                    return None
                return old

            self.compute(key, _evict)
        return removed

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the space.

        Returns:
            Dictionary containing:
            - total_keys: Total keys stored
            - expired_keys: Count of expired (but not yet cleaned) keys
            - active_keys: Count of live keys
        """
        now = self._clock()
        entries = self._entries.copy()
        total = len(entries)
        expired = sum(1 for entry in entries.values() if entry.is_expired(now))

        return {
            "total_keys": total,
            "expired_keys": expired,
            "active_keys": total - expired,
        }
