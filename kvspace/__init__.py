"""
KV-Space: Namespaced In-Memory Key-Value Storage

An embedded, thread-safe key-value storage partitioned into spaces,
with per-entry expiration and version tracking.
"""

from .cache import (
    ExpiryReaper,
    SetValueRequest,
    SpaceCache,
    SpaceRegistry,
    ValueHolder,
    ValueMeta,
)
from .embedded import open_storage
from .exceptions import (
    KeyNotFoundError,
    NotFoundError,
    SpaceNotFoundError,
    StorageError,
    UnexpectedError,
)

__version__ = "1.0.0"

__all__ = [
    "ExpiryReaper",
    "KeyNotFoundError",
    "NotFoundError",
    "SetValueRequest",
    "SpaceCache",
    "SpaceNotFoundError",
    "SpaceRegistry",
    "StorageError",
    "UnexpectedError",
    "ValueHolder",
    "ValueMeta",
    "open_storage",
]
