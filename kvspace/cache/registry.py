"""
Space Registry Module

This module implements the entry point of the storage: the map of space
names to SpaceCache instances.

Spaces are created lazily by the first write into them and removed
explicitly with delete_space(). Key-level operations are delegated to
the SpaceCache of the space.

Missing spaces are not errors for reads, listings and deletes; they
simply yield nothing. Only prolong() reports a missing space or key.
"""

import logging
import threading
from datetime import datetime
from typing import Dict, Any, Optional, Set

from ..exceptions import SpaceNotFoundError
from .entry import Clock, SetValueRequest, ValueHolder, ValueMeta
from .space import SpaceCache

logger = logging.getLogger(__name__)


class SpaceRegistry:
    """
    Namespaced in-memory key-value storage.

    Every operation is safe to call from any thread without external
    locking. Operations on the same (space, key) pair are linearizable.

    Usage:
        storage = SpaceRegistry()
        meta = storage.set("sessions", "user:1", b"payload", expired_at)
        holder = storage.get("sessions", "user:1")  # ValueHolder or None
        storage.prolong("sessions", "user:1", later)
        storage.delete_space("sessions")
    """

    def __init__(self, clock: Optional[Clock] = None, lock_stripes: int = None):
        """
        Initialize an empty registry.

        Args:
            clock: Clock shared by all spaces (default UTC now)
            lock_stripes: Lock stripes per space (default from settings)
        """
        self._clock = clock
        self._lock_stripes = lock_stripes
        self._spaces: Dict[str, SpaceCache] = {}
        # Guards space creation only
        self._create_lock = threading.Lock()

    def spaces(self) -> Set[str]:
        """Get the names of all existing spaces, including empty ones."""
        return set(self._spaces.copy())

    def keys(self, space: str) -> Set[str]:
        """
        Get the live keys of a space.

        Returns:
            Set of keys, empty if the space does not exist
        """
        try:
            cache = self.with_space(space)
        except SpaceNotFoundError:
            return set()
        return cache.keys()

    def delete_space(self, space: str) -> None:
        """Remove a space and all its entries. Missing spaces are ignored."""
        if self._spaces.pop(space, None) is not None:
            logger.debug(f"Space '{space}' deleted")

    def with_space(self, space: str, creating: bool = False) -> SpaceCache:
        """
        Get the cache of a space.

        Args:
            space: Space name
            creating: Create the space if it does not exist

        Returns:
            The one SpaceCache of this space

        Raises:
            SpaceNotFoundError: If the space does not exist and creating is False
        """
        cache = self._spaces.get(space)
        if cache is not None:
            return cache
        if not creating:
            raise SpaceNotFoundError(space)

        with self._create_lock:
            cache = self._spaces.get(space)
            if cache is None:
                cache = SpaceCache(space, clock=self._clock, lock_stripes=self._lock_stripes)
                self._spaces[space] = cache
                logger.debug(f"Space '{space}' created")
            return cache

    def get(self, space: str, key: str) -> Optional[ValueHolder]:
        """
        Retrieve a value with its metadata.

        Returns:
            ValueHolder, or None if the space or key is missing or expired
        """
        cache = self._spaces.get(space)
        if cache is None:
            return None
        return cache.get(key)

    def set(
            self,
            space: str,
            key: str,
            value: bytes,
            expired_at: Optional[datetime] = None,
    ) -> ValueMeta:
        """
        Insert or update a value, creating the space if needed.

        See SpaceCache.set() for the versioning rules.

        Args:
            space: Space name
            key: Key inside the space
            value: Raw bytes
            expired_at: Absolute expiration time (None = never expires)

        Returns:
            Metadata of the stored entry
        """
        return self.with_space(space, creating=True).set(key, value, expired_at)

    def set_value(self, request: SetValueRequest) -> ValueMeta:
        """Apply a SetValueRequest. Same as set()."""
        return self.set(request.space, request.key, request.value, request.expired_at)

    def prolong(self, space: str, key: str, expired_at: Optional[datetime]) -> ValueMeta:
        """
        Replace the expiration time of a live entry.

        Returns:
            Metadata of the updated entry

        Raises:
            SpaceNotFoundError: If the space does not exist
            KeyNotFoundError: If the key is missing or expired
        """
        return self.with_space(space).prolong(key, expired_at)

    def delete(self, space: str, key: str) -> None:
        """Remove a key. Missing spaces and keys are ignored."""
        cache = self._spaces.get(space)
        if cache is not None:
            cache.invalidate(key)

    def clear(self) -> None:
        """Remove all spaces."""
        self._spaces.clear()

    def cleanup_expired(self) -> int:
        """
        Remove expired entries from every space.

        Returns:
            Number of entries removed
        """
        return sum(cache.cleanup_expired() for cache in self._spaces.copy().values())

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the storage.

        Returns:
            Dictionary containing:
            - spaces: Number of spaces
            - total_keys, expired_keys, active_keys: Summed over all spaces
        """
        stats = {"spaces": 0, "total_keys": 0, "expired_keys": 0, "active_keys": 0}
        for cache in self._spaces.copy().values():
            stats["spaces"] += 1
            for name, count in cache.get_stats().items():
                stats[name] += count
        return stats
