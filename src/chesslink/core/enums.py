"""Core enumerations shared by players and engine adapters."""

from __future__ import annotations

from enum import IntEnum, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PlayerState(IntEnum):
    """Lifecycle states of a player or engine adapter."""

    NOT_STARTED = auto()
    STARTING = auto()
    IDLE = auto()
    OBSERVING = auto()
    THINKING = auto()
    FINISHING_GAME = auto()
    DISCONNECTED = auto()

    @property
    def in_game(self) -> bool:
        return self in (PlayerState.OBSERVING, PlayerState.THINKING)

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
