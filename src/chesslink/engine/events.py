"""Semantic events decoded from engine output lines."""

from __future__ import annotations

from dataclasses import dataclass

from chesslink.engine.options import EngineOption


@dataclass(frozen=True, slots=True)
class SessionStarted:
    """The engine finished its start-up handshake."""


@dataclass(frozen=True, slots=True)
class Pong:
    """Answer to the last ping."""


@dataclass(frozen=True, slots=True)
class OptionDeclared:
    option: EngineOption


@dataclass(frozen=True, slots=True)
class NameDeclared:
    name: str


@dataclass(frozen=True, slots=True)
class VariantsDeclared:
    variants: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MoveReceived:
    """A move produced by the engine, in protocol notation."""

    move: str


@dataclass(frozen=True, slots=True)
class EngineError:
    message: str


@dataclass(frozen=True, slots=True)
class InfoReceived:
    """Any line the driver has no meaning for."""

    text: str


@dataclass(frozen=True, slots=True)
class EvaluationReported:
    """Search progress; the score is from the engine's point of view."""

    score_cp: int
    depth: int
    is_mate: bool = False


@dataclass(frozen=True, slots=True)
class Reply:
    """A line the driver needs sent back, e.g. feature acknowledgements."""

    line: str


ProtocolEvent = (
    SessionStarted
    | Pong
    | OptionDeclared
    | NameDeclared
    | VariantsDeclared
    | MoveReceived
    | EngineError
    | InfoReceived
    | EvaluationReported
    | Reply
)
