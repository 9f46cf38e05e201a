from __future__ import annotations

from datetime import timedelta
import logging
import threading

LOGGER = logging.getLogger(__name__)


class Waiter:
    """Blocking wait that a stop request can cut short."""

    def __init__(self) -> None:
        self._stop = threading.Event()

    def wait(self, duration: timedelta) -> bool:
        """Block for ``duration``; return False if stopped before it elapsed."""
        seconds = max(0.0, duration.total_seconds())
        return not self._stop.wait(seconds)

    def stop(self) -> None:
        LOGGER.info("Stop requested")
        self._stop.set()
