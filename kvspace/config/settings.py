"""
KV-Space Configuration Settings

This module contains all configuration constants for the embedded storage.
Values can be overridden through environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Storage configuration settings."""

    # Expiry settings
    CLEANUP_INTERVAL: float = float(os.environ.get("KV_SPACE_CLEANUP_INTERVAL", "60"))
    REAPER_ENABLED: bool = os.environ.get("KV_SPACE_REAPER_ENABLED", "true").lower() == "true"

    # Concurrency settings
    LOCK_STRIPES: int = int(os.environ.get("KV_SPACE_LOCK_STRIPES", "16"))

    # Logging settings
    DEBUG: bool = os.environ.get("KV_SPACE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KV_SPACE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
