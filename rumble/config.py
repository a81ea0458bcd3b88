# config.py
"""
ServerConfig – defaults < .env / environment < command line.

Environment:
  RUMBLE_HOST, RUMBLE_PORT, RUMBLE_READ_TIMEOUT, RUMBLE_LOG_LEVEL, RUMBLE_LOG_FILE
"""
from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

__all__ = ["ConfigError", "ServerConfig", "load_config", "build_arg_parser"]

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 9011
DEFAULT_READ_TIMEOUT_S = 5.0
DEFAULT_ENV_FILE = ".env"


class ConfigError(ValueError):
    """Invalid configuration value."""


@dataclass(slots=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    read_timeout_s: float = DEFAULT_READ_TIMEOUT_S  # max wait for the command bytes
    log_level: str = "INFO"
    log_file: Optional[str] = None


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rumble-server",
        description="Rumble game controllers on command from TCP clients.",
    )
    ap.add_argument("--host", help=f"listen address (default {DEFAULT_HOST})")
    ap.add_argument("--port", help=f"listen port (default {DEFAULT_PORT})")
    ap.add_argument("--read-timeout", help="seconds to wait for a command after accept")
    ap.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR")
    ap.add_argument("--log-file", help="also write the log to this file")
    ap.add_argument("--env-file", default=DEFAULT_ENV_FILE, help="dotenv file to load")
    return ap


def _port(value: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"port must be an integer, got {value!r}") from None
    if port < 0 or port > 65535:
        raise ConfigError(f"port {port} out of range 0..65535")
    return port


def _timeout(value: str) -> float:
    try:
        t = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"read timeout must be a number, got {value!r}") from None
    if t <= 0:
        raise ConfigError(f"read timeout must be positive, got {t}")
    return t


def load_config(argv: Optional[Sequence[str]] = None,
                environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    args = build_arg_parser().parse_args(argv)

    if environ is None:
        env_path = Path(args.env_file)
        if env_path.is_file():
            load_dotenv(env_path)
        environ = os.environ

    cfg = ServerConfig()

    host = args.host or environ.get("RUMBLE_HOST")
    if host:
        cfg.host = host

    port = args.port if args.port is not None else environ.get("RUMBLE_PORT")
    if port is not None:
        cfg.port = _port(port)

    timeout = args.read_timeout if args.read_timeout is not None else environ.get("RUMBLE_READ_TIMEOUT")
    if timeout is not None:
        cfg.read_timeout_s = _timeout(timeout)

    level = args.log_level or environ.get("RUMBLE_LOG_LEVEL")
    if level:
        level = level.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"unknown log level {level!r}")
        cfg.log_level = level

    cfg.log_file = args.log_file or environ.get("RUMBLE_LOG_FILE") or None
    return cfg
