"""client_handler.py – one request cycle on an accepted connection.

Protocol (fire-and-forget, no response):
  <deviceIndex> <low> <high> <durationMs>   -> rumble, wait, stop, close

The server never writes to the client; every outcome ends in close().
"""
from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Tuple

from .devices import ActuationError
from .parser import ParseError, parse_command

if TYPE_CHECKING:
    from .server import ServerContext

__all__ = ["MAX_COMMAND_BYTES", "handle_connection"]

log = logging.getLogger("rumble.client")

MAX_COMMAND_BYTES = 255


def handle_connection(conn: socket.socket, addr: Tuple[str, int], ctx: ServerContext) -> None:
    """Read one command from conn, run it against ctx.registry, close conn."""
    try:
        _serve_one(conn, addr, ctx)
    except Exception:
        # nothing from one connection reaches the server loop
        log.exception("Unexpected error while serving %s", _peer(addr))
    finally:
        try:
            conn.close()
        except OSError:
            pass
        log.info("Connection closed")


def _serve_one(conn: socket.socket, addr, ctx: ServerContext) -> None:
    conn.settimeout(ctx.read_timeout_s)
    try:
        data = conn.recv(MAX_COMMAND_BYTES)
    except OSError as e:
        log.error("Error reading from socket %s: %s", _peer(addr), e)
        return

    text = data.decode("ascii", errors="replace").rstrip("\r\n\0")
    log.info("Received command: %s", text)

    try:
        cmd = parse_command(data)
    except ParseError as e:
        log.error("Invalid command format: %s", e)
        return

    count = ctx.registry.count()
    if not 0 <= cmd.device_index < count:
        log.error("Invalid controller index: %d (have %d)", cmd.device_index, count)
        return

    _rumble(ctx, cmd.device_index, cmd.low, cmd.high, cmd.duration_ms)


def _rumble(ctx: ServerContext, index: int, low: int, high: int, duration_ms: int) -> None:
    try:
        ctx.registry.actuate(index, low, high, duration_ms)
    except ActuationError as e:
        log.error("Controller %d: %s", index, e)
        return

    log.info("Rumble started: controller=%d, low_freq=%d, high_freq=%d, duration=%d ms",
             index, low, high, duration_ms)
    # uninterruptible: the whole daemon is busy until the rumble is over
    ctx.sleep(duration_ms / 1000.0)
    try:
        ctx.registry.stop(index)
    except ActuationError as e:
        log.error("Controller %d: %s", index, e)
        return
    log.info("Rumble stopped")


def _peer(addr) -> str:
    try:
        return f"{addr[0]}:{addr[1]}"
    except (TypeError, IndexError):
        return str(addr)
