# main.py
from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .config import ConfigError, ServerConfig, load_config
from .devices import ControllerRegistry, DeviceError
from .server import RumbleServer, ServerContext
from .shutdown import ShutdownCoordinator

log = logging.getLogger("rumble")


def setup_logging(cfg: ServerConfig) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if cfg.log_file:
        handlers.append(logging.FileHandler(cfg.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )


def run(cfg: ServerConfig, registry=None, shutdown: Optional[ShutdownCoordinator] = None) -> int:
    """Open controllers, serve until shutdown, release everything. Returns exit code."""
    registry = registry if registry is not None else ControllerRegistry()
    if shutdown is None:
        shutdown = ShutdownCoordinator()
        shutdown.install()

    try:
        try:
            registry.open_all()
        except DeviceError as e:
            log.error("%s", e)
            return 1
        for index, name in enumerate(registry.names()):
            log.info("Controller index %d: %s", index, name)

        ctx = ServerContext(registry, shutdown, read_timeout_s=cfg.read_timeout_s)
        server = RumbleServer(ctx, cfg.host, cfg.port)
        try:
            server.bind()
        except OSError as e:
            log.error("Socket setup failed on %s:%d: %s", cfg.host, cfg.port, e)
            return 1

        server.serve_forever()
        return 0
    finally:
        registry.close_all()
        log.info("Application closed.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        cfg = load_config(argv)
    except ConfigError as e:
        print(f"[RUMBLE] Config error: {e}", file=sys.stderr)
        return 1
    setup_logging(cfg)
    return run(cfg)


if __name__ == "__main__":
    sys.exit(main())
