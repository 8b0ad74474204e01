"""Cache module for KV-Space."""

from .entry import SetValueRequest, ValueHolder, ValueMeta
from .reaper import ExpiryReaper
from .registry import SpaceRegistry
from .space import SpaceCache

__all__ = [
    "ExpiryReaper",
    "SetValueRequest",
    "SpaceCache",
    "SpaceRegistry",
    "ValueHolder",
    "ValueMeta",
]
