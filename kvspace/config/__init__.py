"""Configuration module for KV-Space."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
