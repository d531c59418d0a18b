"""Utility classes for inspecting generator fibers."""

import logging
import threading
import time
from typing import List, Optional, Set

from ..config import get_runtime_config
from .protocols import LoggerProtocol


class FiberMonitor:
    """
    Tracks fiber threads to verify that generators do not leak them.

    Single Responsibility: Snapshot and compare live fiber threads.
    """

    def __init__(self, prefix: Optional[str] = None, logger: Optional[LoggerProtocol] = None):
        """
        Initialize fiber monitor.

        Args:
            prefix: Thread name prefix of fibers (defaults to configuration)
            logger: Logger instance
        """
        self.prefix = prefix or get_runtime_config().thread_prefix
        self._logger = logger or logging.getLogger(__name__)
        self._baseline: Set[int] = set()

    def live_fibers(self) -> List[threading.Thread]:
        """Return the fiber threads that are currently alive."""
        return [
            thread
            for thread in threading.enumerate()
            if thread.name.startswith(self.prefix) and thread.is_alive()
        ]

    def snapshot(self) -> int:
        """Remember the fibers alive now; return how many there are."""
        fibers = self.live_fibers()
        self._baseline = {id(thread) for thread in fibers}
        return len(fibers)

    def leaked(self, timeout: float = 1.0, interval: float = 0.01) -> List[threading.Thread]:
        """
        Return fibers started since the snapshot that are still alive.

        Fibers that are already unwinding get up to ``timeout`` seconds to exit.
        """
        deadline = time.monotonic() + timeout
        while True:
            new = [t for t in self.live_fibers() if id(t) not in self._baseline]
            if not new or time.monotonic() >= deadline:
                break
            time.sleep(interval)

        if new:
            self._logger.warning(
                f"{len(new)} fiber(s) leaked: {', '.join(t.name for t in new)}"
            )
        return new
