# shutdown.py
"""Shutdown flag shared by the signal handler and the server loop."""
from __future__ import annotations

import signal
import threading
from typing import Iterable, Optional

__all__ = ["ShutdownCoordinator"]


class ShutdownCoordinator:
    """
    Cancellation token for the server loop.

    The signal handler only records the signal number and sets the event;
    logging and teardown are left to whoever polls is_set().
    """

    def __init__(self):
        self._event = threading.Event()
        self.signum: Optional[int] = None

    def install(self, signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM)) -> None:
        for sig in signals:
            signal.signal(sig, self._handler)

    def _handler(self, signum, frame):
        if self.signum is None:
            self.signum = signum
        self._event.set()

    def request(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)
