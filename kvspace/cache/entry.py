"""
Entry and Value Metadata Definitions

This module defines the records stored in and returned by the storage:

- Entry: the stored value plus its metadata (internal, immutable)
- ValueMeta: the metadata returned to callers
- ValueHolder: a value together with its metadata, returned by reads
- SetValueRequest: a request to write a value into a space

Entries are never mutated in place. Every change builds a new Entry,
so the value and its metadata always change together.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Default clock: the current time, timezone-aware in UTC."""
    return datetime.now(timezone.utc)


def to_bytes(value) -> bytes:
    """
    Copy a bytes-like value into an immutable bytes object.

    Raises:
        TypeError: If value is not bytes, bytearray or memoryview
    """
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"value must be bytes-like, got {type(value).__name__}")
    return bytes(value)


def check_expired_at(expired_at: Optional[datetime]) -> Optional[datetime]:
    """
    Validate an absolute expiration time.

    Raises:
        TypeError: If expired_at is neither None nor a datetime
        ValueError: If expired_at is a naive datetime
    """
    if expired_at is None:
        return None
    if not isinstance(expired_at, datetime):
        raise TypeError(f"expired_at must be a datetime, got {type(expired_at).__name__}")
    if expired_at.tzinfo is None:
        raise ValueError("expired_at must be a timezone-aware datetime")
    return expired_at


@dataclass(frozen=True)
class ValueMeta:
    """
    Metadata of a stored value.

    Attributes:
        version: Modification version, starts at 0
        created_at: Date-time of creation
        modified_at: Date-time of last value modification
        expired_at: Date-time of expiration (None = never expires)
    """
    version: int
    created_at: datetime
    modified_at: datetime
    expired_at: Optional[datetime] = None


@dataclass(frozen=True)
class ValueHolder:
    """A stored value together with its metadata."""
    value: bytes
    meta: ValueMeta


@dataclass(frozen=True)
class SetValueRequest:
    """
    Request to write a value.

    Attributes:
        space: Target space name (created on demand)
        key: Key inside the space
        value: Raw bytes to store
        expired_at: Optional absolute expiration time
    """
    space: str
    key: str
    value: bytes
    expired_at: Optional[datetime] = None


@dataclass(frozen=True)
class Entry:
    """A value and its metadata, owned by exactly one SpaceCache."""
    value: bytes
    version: int
    created_at: datetime
    modified_at: datetime
    expired_at: Optional[datetime] = None

    @classmethod
    def create(cls, value: bytes, expired_at: Optional[datetime], now: datetime) -> "Entry":
        """Build a fresh entry with version 0."""
        return cls(
            value=value,
            version=0,
            created_at=now,
            modified_at=now,
            expired_at=expired_at,
        )

    def is_expired(self, now: datetime) -> bool:
        """An entry is live only while expired_at is strictly in the future."""
        return self.expired_at is not None and self.expired_at <= now

    def modify(self, value: bytes, expired_at: Optional[datetime], now: datetime) -> "Entry":
        """New value: bump version, keep created_at."""
        return replace(
            self,
            value=value,
            version=self.version + 1,
            modified_at=now,
            expired_at=expired_at,
        )

    def prolong(self, expired_at: Optional[datetime]) -> "Entry":
        """Same value, new expiration time. Nothing else changes."""
        return replace(self, expired_at=expired_at)

    def meta(self) -> ValueMeta:
        return ValueMeta(
            version=self.version,
            created_at=self.created_at,
            modified_at=self.modified_at,
            expired_at=self.expired_at,
        )

    def holder(self) -> ValueHolder:
        return ValueHolder(value=self.value, meta=self.meta())
