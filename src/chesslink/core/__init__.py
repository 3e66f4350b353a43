"""Core domain layer: sides, player states and game results.

Board representation and move legality live outside this package; moves
are passed around as opaque protocol strings.
"""

from chesslink.core.enums import Color, PlayerState
from chesslink.core.result import GameResult, ResultType

__all__ = [
    "Color",
    "GameResult",
    "PlayerState",
    "ResultType",
]
