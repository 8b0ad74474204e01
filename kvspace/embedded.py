"""
Embedded Storage Wiring

Helpers for a hosting process: logging setup and a context manager that
builds a SpaceRegistry and keeps the expiry reaper running while the
storage is in use.

Usage:
    from kvspace.embedded import open_storage, setup_logging

    setup_logging(debug=True)
    with open_storage() as storage:
        storage.set("sessions", "user:1", b"payload")

Environment Variables:
    KV_SPACE_CLEANUP_INTERVAL - Seconds between expiry sweeps
    KV_SPACE_REAPER_ENABLED   - Run the expiry reaper (true/false)
    KV_SPACE_LOCK_STRIPES     - Key lock stripes per space
    KV_SPACE_DEBUG            - Enable debug logging (true/false)
    KV_SPACE_LOG_LEVEL        - Log level when not in debug mode
"""

import logging
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from .cache.entry import Clock
from .cache.reaper import ExpiryReaper
from .cache.registry import SpaceRegistry
from .config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = None, level: str = None) -> None:
    """Configure logging based on debug flag or explicit level."""
    debug = debug if debug is not None else default_settings.DEBUG
    if debug:
        level = logging.DEBUG
    else:
        level = level or default_settings.LOG_LEVEL

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )


@contextmanager
def open_storage(
        config: Optional[Settings] = None,
        clock: Optional[Clock] = None,
) -> Iterator[SpaceRegistry]:
    """
    Create a storage and run its expiry reaper for the duration of the block.

    Args:
        config: Settings to use (default: the global settings)
        clock: Clock for the registry (default UTC now)

    Yields:
        The SpaceRegistry
    """
    config = config if config is not None else default_settings
    storage = SpaceRegistry(clock=clock, lock_stripes=config.LOCK_STRIPES)

    reaper = None
    if config.REAPER_ENABLED:
        reaper = ExpiryReaper(storage, interval=config.CLEANUP_INTERVAL)
        reaper.start()

    logger.info("Embedded key-value storage opened")
    logger.info(f"  Lock stripes: {config.LOCK_STRIPES}")
    logger.info(f"  Expiry reaper: {'on' if reaper else 'off'}")

    try:
        yield storage
    finally:
        if reaper is not None:
            reaper.stop()
        storage.clear()
        logger.info("Embedded key-value storage closed")
