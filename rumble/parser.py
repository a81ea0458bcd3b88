# parser.py
"""
Parser for the one-line rumble command.

Format (ASCII, whitespace separated):
    <deviceIndex:int> <low:uint16> <high:uint16> <durationMs:uint32>

- anything after the first NUL byte is ignored (buffer from the socket)
- tokens after the first four are accepted and ignored
- index range against the registry is NOT checked here

Example:
    b"0 30000 30000 500"  ->  Command(0, 30000, 30000, 500)
"""
from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["Command", "ParseError", "parse_command", "format_command"]


INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")


class ParseError(ValueError):
    """Input is not a valid rumble command."""


@dataclass(frozen=True, slots=True)
class Command:
    device_index: int
    low: int
    high: int
    duration_ms: int


def _field(token: str, name: str, pattern: re.Pattern, lo: int, hi: int) -> int:
    if not pattern.fullmatch(token):
        raise ParseError(f"{name}: not a number: {token!r}")
    value = int(token)
    if value < lo or value > hi:
        raise ParseError(f"{name}: {value} out of range {lo}..{hi}")
    return value


def parse_command(data: bytes) -> Command:
    """Parse raw bytes into a Command, raise ParseError on any other shape."""
    data = bytes(data).split(b"\0", 1)[0]
    raw = data.split(None, 4)[:4]
    if len(raw) < 4:
        raise ParseError(f"expected 4 fields, got {len(raw)}")
    try:
        tokens = [t.decode("ascii") for t in raw]
    except UnicodeDecodeError:
        raise ParseError("command field is not ASCII") from None

    return Command(
        device_index=_field(tokens[0], "deviceIndex", _SIGNED, INT_MIN, INT_MAX),
        low=_field(tokens[1], "lowIntensity", _UNSIGNED, 0, UINT16_MAX),
        high=_field(tokens[2], "highIntensity", _UNSIGNED, 0, UINT16_MAX),
        duration_ms=_field(tokens[3], "durationMs", _UNSIGNED, 0, UINT32_MAX),
    )


def format_command(cmd: Command) -> str:
    return f"{cmd.device_index} {cmd.low} {cmd.high} {cmd.duration_ms}"
