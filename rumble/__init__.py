"""rumble – TCP control daemon for game-controller rumble."""

__version__ = "0.1.0"
