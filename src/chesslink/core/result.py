"""Game result model used for game endings and forfeits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from chesslink.core.enums import Color


class ResultType(StrEnum):
    """How a game ended."""

    NORMAL = "normal"
    WIN_BY_ADJUDICATION = "adjudication"
    WIN_BY_RESIGNATION = "resignation"
    WIN_BY_TIMEOUT = "timeout"
    WIN_BY_DISCONNECTION = "disconnection"
    WIN_BY_STALLED_CONNECTION = "stalled connection"
    WIN_BY_ILLEGAL_MOVE = "illegal move"
    DRAW = "draw"
    NO_RESULT = "no result"

    @property
    def is_forfeit(self) -> bool:
        """True for results that one side loses by misbehaving."""
        return self in _FORFEIT_TYPES


_FORFEIT_TYPES = frozenset(
    {
        ResultType.WIN_BY_TIMEOUT,
        ResultType.WIN_BY_DISCONNECTION,
        ResultType.WIN_BY_STALLED_CONNECTION,
        ResultType.WIN_BY_ILLEGAL_MOVE,
    }
)


@dataclass(slots=True, frozen=True)
class GameResult:
    """Outcome of a game.

    ``winner`` is ``None`` for draws, aborted games and forfeits by a
    player that was not seated in a game yet.
    """

    type: ResultType = ResultType.NO_RESULT
    winner: Color | None = None
    description: str = ""

    @classmethod
    def forfeit(cls, result_type: ResultType, loser: Color | None) -> GameResult:
        """Build a forfeit result against *loser*."""
        winner = loser.opposite if loser is not None else None
        return cls(result_type, winner, str(result_type))

    @property
    def is_draw(self) -> bool:
        return self.type == ResultType.DRAW

    @property
    def is_none(self) -> bool:
        return self.type == ResultType.NO_RESULT

    def to_pgn(self) -> str:
        """PGN result token (``1-0``, ``0-1``, ``1/2-1/2`` or ``*``)."""
        if self.is_draw:
            return "1/2-1/2"
        if self.winner == Color.WHITE:
            return "1-0"
        if self.winner == Color.BLACK:
            return "0-1"
        return "*"

    def __str__(self) -> str:
        text = self.to_pgn()
        if self.description:
            text += f" {{{self.description}}}"
        return text
