# server.py
"""
RumbleServer – single-threaded TCP accept loop.

    BINDING -> LISTENING -> (WAITING <-> ACCEPTING) -> DRAINING -> CLOSED

- WAITING is a select() with a 1 s timeout so the shutdown flag is seen
  at least once per second even without traffic
- every accepted connection is served to the end before the next accept
  (one rumble at a time for the whole daemon)
"""
from __future__ import annotations

import enum
import logging
import select
import socket
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Tuple

from .client_handler import handle_connection
from .shutdown import ShutdownCoordinator

__all__ = [
    "BACKLOG",
    "WAIT_TIMEOUT_SEC",
    "Registry",
    "ServerContext",
    "ServerState",
    "RumbleServer",
]

log = logging.getLogger("rumble.server")

BACKLOG = 5
WAIT_TIMEOUT_SEC = 1.0


class Registry(Protocol):
    def count(self) -> int: ...
    def actuate(self, index: int, low: int, high: int, duration_ms: int) -> None: ...
    def stop(self, index: int) -> None: ...


@dataclass
class ServerContext:
    registry: Registry
    shutdown: ShutdownCoordinator = field(default_factory=ShutdownCoordinator)
    read_timeout_s: float = 5.0
    sleep: Callable[[float], None] = time.sleep


class ServerState(enum.Enum):
    BINDING = "BINDING"
    LISTENING = "LISTENING"
    WAITING = "WAITING"
    ACCEPTING = "ACCEPTING"
    DRAINING = "DRAINING"
    CLOSED = "CLOSED"


class RumbleServer:

    def __init__(self, ctx: ServerContext, host: str = "0.0.0.0", port: int = 9011):
        self.ctx = ctx
        self.host = host
        self.port = port
        self.state = ServerState.BINDING
        self._sock: Optional[socket.socket] = None

    # ---------- lifecycle ----------
    def bind(self) -> None:
        """Create, bind and listen. Raises OSError, leaving nothing open."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            log.info("Socket binding successful on port %d", sock.getsockname()[1])
            sock.listen(BACKLOG)
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self.state = ServerState.LISTENING
        log.info("Listening for connections...")

    @property
    def address(self) -> Tuple[str, int]:
        if self._sock is None:
            raise RuntimeError("server is not bound")
        return self._sock.getsockname()

    def serve_forever(self) -> None:
        if self._sock is None:
            self.bind()
        shutdown = self.ctx.shutdown
        try:
            while not shutdown.is_set():
                self.state = ServerState.WAITING
                try:
                    ready, _, _ = select.select([self._sock], [], [], WAIT_TIMEOUT_SEC)
                except (OSError, ValueError) as e:
                    if not shutdown.is_set():
                        log.error("Error on select: %s", e)
                    break
                if not ready:
                    continue

                self.state = ServerState.ACCEPTING
                try:
                    conn, addr = self._sock.accept()
                except OSError as e:
                    if not shutdown.is_set():
                        log.error("Error on accept: %s", e)
                    continue

                log.info("Accepted a new connection from %s:%s", addr[0], addr[1])
                handle_connection(conn, addr, self.ctx)
        finally:
            if shutdown.signum is not None:
                log.info("Interrupt signal (%d) received. Shutting down...", shutdown.signum)
            self.state = ServerState.DRAINING
            self.close()

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None
        self.state = ServerState.CLOSED
