"""Shared protocol-driver models and protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chesslink.core.enums import Color
    from chesslink.core.result import GameResult
    from chesslink.engine.events import ProtocolEvent
    from chesslink.engine.options import EngineOption, OptionValue


@dataclass(slots=True, frozen=True)
class SearchRequest:
    """Everything a driver needs to ask the engine for a move.

    Times are in milliseconds; ``-1`` means unlimited.
    """

    side: Color
    moves: tuple[str, ...] = ()
    start_fen: str | None = None
    time_left_ms: int = -1
    opponent_time_left_ms: int = -1
    increment_ms: int = 0
    moves_to_go: int = 0
    move_time_ms: int | None = None


class ProtocolDriver(Protocol):
    """Wire-format encoder/decoder used by :class:`ChessEngine`.

    Drivers are stateless with respect to the adapter's lifecycle; they
    only track what they need to parse the engine's own output.
    """

    name: str

    def start_session(self) -> list[str]: ...

    def encode_ping(self) -> str | None:
        """Ping line, or ``None`` when the protocol has no keepalive."""
        ...

    def encode_option(self, option: EngineOption, value: OptionValue) -> str: ...

    def encode_quit(self) -> str: ...

    def encode_new_game(self, side: Color, variant: str, fen: str | None) -> list[str]: ...

    def encode_move(self, move: str) -> list[str]: ...

    def encode_go(self, request: SearchRequest) -> list[str]: ...

    def encode_stop(self) -> list[str]: ...

    def encode_end_game(self, result: GameResult) -> list[str]: ...

    def decode_line(self, line: str) -> list[ProtocolEvent]: ...
