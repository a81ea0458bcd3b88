# client.py
"""Send one rumble command to a running rumble server.

    rumble-send 0 30000 30000 500 --host 127.0.0.1 --port 9011
"""
from __future__ import annotations

import argparse
import socket
import sys
from typing import Optional, Sequence

from .config import DEFAULT_PORT
from .parser import Command, ParseError, format_command, parse_command

__all__ = ["send_command", "main"]


def send_command(host: str, port: int, cmd: Command, timeout: Optional[float] = None) -> None:
    """Send cmd and wait until the server closes the connection.

    The server answers nothing; with timeout=None this returns only after the
    rumble has finished on the server side.
    """
    line = format_command(cmd) + "\n"
    with socket.create_connection((host, port), timeout=timeout) as sock:
        sock.sendall(line.encode("ascii"))
        sock.shutdown(socket.SHUT_WR)
        while sock.recv(1024):
            pass


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="rumble-send", description="Send a rumble command.")
    ap.add_argument("index")
    ap.add_argument("low")
    ap.add_argument("high")
    ap.add_argument("duration_ms")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=DEFAULT_PORT)
    ap.add_argument("--timeout", type=float, default=None)
    args = ap.parse_args(argv)

    try:
        cmd = parse_command(f"{args.index} {args.low} {args.high} {args.duration_ms}".encode("ascii", errors="replace"))
    except ParseError as e:
        print(f"[RUMBLE CLIENT] {e}", file=sys.stderr)
        return 2

    try:
        send_command(args.host, args.port, cmd, args.timeout)
    except OSError as e:
        print(f"[RUMBLE CLIENT] {args.host}:{args.port}: {e}", file=sys.stderr)
        return 1
    print(f"[RUMBLE CLIENT] sent: {format_command(cmd)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
