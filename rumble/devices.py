# devices.py
"""
ControllerRegistry – opened game controllers behind stable indices.

pygame (SDL GameController API) is the actual haptics layer:
  - controller.is_controller(i)               joystick has a controller mapping
  - Controller.rumble(low, high, duration_ms)  low/high as 0.0..1.0
  - Controller.stop_rumble()

Joysticks without a game-controller mapping are reported and skipped.
The registry is filled once by open_all() and stays read-only until
close_all(); index = position in the list of successfully opened devices.
"""
from __future__ import annotations

import logging
import os
from typing import List

import pygame
from pygame._sdl2 import controller

__all__ = ["ControllerRegistry", "DeviceError", "ActuationError"]

log = logging.getLogger("rumble.devices")

UINT16_MAX = 0xFFFF


class DeviceError(RuntimeError):
    """Haptics subsystem could not provide any usable controller."""


class ActuationError(RuntimeError):
    """A controller refused to start or stop rumble."""


def _magnitude(value: int) -> float:
    # uint16 intensity -> 0.0..1.0 for pygame
    return max(0, min(UINT16_MAX, int(value))) / UINT16_MAX


class ControllerRegistry:

    def __init__(self):
        self._devices: List[controller.Controller] = []
        self._initialized = False

    # ---------- lifecycle ----------
    def open_all(self) -> int:
        """Init SDL game-controller support and open every connected controller.

        Non-controller joysticks and controllers that fail to open are
        reported and skipped. Raises DeviceError when nothing usable is left.
        """
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")  # headless
        os.environ.setdefault("SDL_JOYSTICK_HIDAPI_PS4_RUMBLE", "1")
        try:
            pygame.joystick.init()
            controller.init()
        except pygame.error as e:
            raise DeviceError(f"SDL init error: {e}") from e
        self._initialized = True

        count = pygame.joystick.get_count()
        if count < 1:
            raise DeviceError("No joysticks connected.")

        for i in range(count):
            if not controller.is_controller(i):
                log.warning("Joystick %d is not a game controller.", i)
                continue
            try:
                pad = controller.Controller(i)
            except pygame.error as e:
                log.error("Open error for controller %d: %s", i, e)
                continue
            self._devices.append(pad)
            log.info("Controller %d (%s) opened successfully.", i, pad.name)

        if not self._devices:
            raise DeviceError("No game controllers could be opened.")
        return len(self._devices)

    def close_all(self) -> None:
        for index, pad in enumerate(self._devices):
            try:
                pad.quit()
            except pygame.error as e:
                log.warning("Close error for controller %d: %s", index, e)
        self._devices = []
        if self._initialized:
            controller.quit()
            pygame.joystick.quit()
            self._initialized = False

    # ---------- API ----------
    def count(self) -> int:
        return len(self._devices)

    def names(self) -> List[str]:
        return [pad.name for pad in self._devices]

    def actuate(self, index: int, low: int, high: int, duration_ms: int) -> None:
        pad = self._devices[index]
        try:
            ok = pad.rumble(_magnitude(low), _magnitude(high), int(duration_ms))
        except pygame.error as e:
            raise ActuationError(f"Unable to start rumble: {e}") from e
        if not ok:
            raise ActuationError(f"Unable to start rumble: {pygame.get_error() or 'not supported'}")

    def stop(self, index: int) -> None:
        pad = self._devices[index]
        try:
            pad.stop_rumble()
        except pygame.error as e:
            raise ActuationError(f"Unable to stop rumble: {e}") from e
