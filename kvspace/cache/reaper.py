"""
Expiry Reaper Module

Background thread that periodically removes expired entries from every
space of a registry. Reads and listings already treat expired entries as
absent, so the reaper only bounds memory taken by entries nobody reads.
"""

import logging
import threading
from typing import Optional

from ..config.settings import settings
from .registry import SpaceRegistry

logger = logging.getLogger(__name__)


class ExpiryReaper:
    """
    Periodic sweep of expired entries.

    Usage:
        reaper = ExpiryReaper(registry, interval=30)
        reaper.start()
        ...
        reaper.stop()

    Attributes:
        registry: The registry to sweep
        interval: Seconds between sweeps
    """

    def __init__(self, registry: SpaceRegistry, interval: float = None):
        """
        Initialize the reaper.

        Args:
            registry: The registry to sweep
            interval: Seconds between sweeps (default from settings.CLEANUP_INTERVAL)

        Raises:
            ValueError: If interval is not positive
        """
        self.registry = registry
        self.interval = interval if interval is not None else settings.CLEANUP_INTERVAL
        if self.interval <= 0:
            raise ValueError("interval must be positive")

        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self._total_removed = 0

    def start(self) -> None:
        """Start the background sweep thread."""
        if self.is_running():
            return

        # Each run gets its own event so a thread outliving stop() still exits
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            daemon=True,
            name="kvspace-expiry-reaper",
        )
        self._thread.start()
        logger.info(f"Expiry reaper started (interval {self.interval}s)")

    def stop(self, timeout: float = 2.0) -> None:
        """Stop the sweep thread and wait for it to finish."""
        if self._thread is None:
            return

        self._stop_event.set()
        self._thread.join(timeout=timeout)
        self._thread = None
        logger.info(f"Expiry reaper stopped ({self._total_removed} entries removed)")

    def is_running(self) -> bool:
        """Check if the sweep thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        """
        Sweep all spaces once.

        Returns:
            Number of entries removed
        """
        removed = self.registry.cleanup_expired()
        self._total_removed += removed
        if removed:
            logger.debug(f"Expiry reaper removed {removed} entries")
        return removed

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            try:
                self.run_once()
            except Exception as exc:  # Log unexpected errors but keep sweeping
                logger.exception(f"Expiry sweep failed: {exc}")
