"""Abstract interfaces for the player layer.

The game controller depends on these protocols, not on concrete engine
adapters, so human players and engines are interchangeable seats.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chesslink.core.enums import Color, PlayerState
    from chesslink.core.result import GameResult


# ── Time control ─────────────────────────────────────────────────────────────


class TimeControl:
    """Immutable time-control definition.

    Args:
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
        moves_per_tc: Moves per period for repeating controls, ``0`` for
            sudden death.
        per_move_seconds: Fixed time per move; overrides the other fields.
    """

    __slots__ = (
        "initial_seconds",
        "increment_seconds",
        "moves_per_tc",
        "per_move_seconds",
    )

    def __init__(
        self,
        initial_seconds: float,
        increment_seconds: float = 0.0,
        moves_per_tc: int = 0,
        per_move_seconds: float | None = None,
    ) -> None:
        self.initial_seconds = initial_seconds
        self.increment_seconds = increment_seconds
        self.moves_per_tc = moves_per_tc
        self.per_move_seconds = per_move_seconds

    # Common presets
    @classmethod
    def blitz_5m3s(cls) -> TimeControl:
        return cls(300, 3)

    @classmethod
    def rapid_15m10s(cls) -> TimeControl:
        return cls(900, 10)

    @classmethod
    def classical_40_in_90m(cls) -> TimeControl:
        return cls(5400, 0, moves_per_tc=40)

    @classmethod
    def fixed_per_move(cls, seconds: float) -> TimeControl:
        return cls(0, 0, per_move_seconds=seconds)

    @classmethod
    def unlimited(cls) -> TimeControl:
        """No time limit."""
        return cls(float("inf"), 0)

    @property
    def is_valid(self) -> bool:
        if self.per_move_seconds is not None:
            return self.per_move_seconds > 0
        return self.initial_seconds > 0 and self.increment_seconds >= 0 and self.moves_per_tc >= 0

    @property
    def is_unlimited(self) -> bool:
        return self.per_move_seconds is None and self.initial_seconds == float("inf")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeControl):
            return NotImplemented
        return (
            self.initial_seconds,
            self.increment_seconds,
            self.moves_per_tc,
            self.per_move_seconds,
        ) == (
            other.initial_seconds,
            other.increment_seconds,
            other.moves_per_tc,
            other.per_move_seconds,
        )

    def __hash__(self) -> int:
        return hash(
            (
                self.initial_seconds,
                self.increment_seconds,
                self.moves_per_tc,
                self.per_move_seconds,
            )
        )

    def __repr__(self) -> str:
        if self.per_move_seconds is not None:
            return f"TimeControl({self.per_move_seconds:g}s/move)"
        mins = self.initial_seconds / 60
        text = f"{mins:.0f}m"
        if self.moves_per_tc:
            text = f"{self.moves_per_tc}/{text}"
        if self.increment_seconds:
            text += f"+{self.increment_seconds:g}s"
        return f"TimeControl({text})"


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IPlayer(Protocol):
    """Interface for a game participant (human or engine)."""

    @property
    def name(self) -> str: ...

    @property
    def state(self) -> PlayerState: ...

    @property
    def side(self) -> Color | None: ...

    @property
    def is_human(self) -> bool: ...

    def is_ready(self) -> bool:
        """Can the player accept the next request right now?"""

    def new_game(self, side: Color, opponent: IPlayer | None = None) -> None:
        """Seat the player on *side* for a new game."""

    def make_move(self, move: str) -> None:
        """Tell the player about the opponent's *move*."""

    def go(self) -> None:
        """Ask the player to start thinking about its own move."""

    def end_game(self, result: GameResult) -> None:
        """Tell the player that the game has ended with *result*."""

    def close_connection(self) -> None:
        """Drop the player; no further requests will be honoured."""

    def supports_variant(self, variant: str) -> bool:
        """Can the player play *variant*?"""
