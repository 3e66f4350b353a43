"""Xboard / Chess Engine Communication Protocol (CECP v2) driver."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from chesslink.engine.events import (
    EngineError,
    EvaluationReported,
    InfoReceived,
    MoveReceived,
    NameDeclared,
    OptionDeclared,
    Pong,
    ProtocolEvent,
    Reply,
    SessionStarted,
    VariantsDeclared,
)
from chesslink.engine.options import EngineOption, OptionType, OptionValue

if TYPE_CHECKING:
    from chesslink.core.enums import Color
    from chesslink.core.result import GameResult
    from chesslink.engine.driver import SearchRequest

_FEATURE_RE = re.compile(r'([A-Za-z_]+)=("[^"]*"|\S+)')
_THINKING_RE = re.compile(r"^(\d+)[.&]?\s+(-?\d+)\s+\d+\s+\d+")

_ACCEPTED_FEATURES = frozenset(
    {
        "analyze",
        "colors",
        "done",
        "draw",
        "memory",
        "myname",
        "name",
        "option",
        "ping",
        "reuse",
        "setboard",
        "sigint",
        "sigterm",
        "smp",
        "time",
        "usermove",
        "variants",
    }
)

_OPTION_KINDS: dict[str, OptionType] = {
    "-check": OptionType.CHECK,
    "-spin": OptionType.SPIN,
    "-slider": OptionType.SPIN,
    "-combo": OptionType.COMBO,
    "-button": OptionType.BUTTON,
    "-save": OptionType.BUTTON,
    "-reset": OptionType.BUTTON,
    "-string": OptionType.STRING,
    "-file": OptionType.STRING,
    "-path": OptionType.STRING,
}


def parse_option_feature(text: str) -> EngineOption | None:
    """Parse an ``option`` feature value such as ``Hash -spin 64 1 1024``."""
    words = text.split(" ")
    kind_index = next((i for i, word in enumerate(words) if word in _OPTION_KINDS), None)
    if not kind_index:
        return None

    name = " ".join(words[:kind_index])
    option_type = _OPTION_KINDS[words[kind_index]]
    args = words[kind_index + 1 :]

    if option_type == OptionType.SPIN:
        if len(args) < 3:
            return None
        try:
            minimum, maximum = int(args[1]), int(args[2])
        except ValueError:
            return None
        return EngineOption(name, option_type, args[0], minimum, maximum)
    if option_type == OptionType.COMBO:
        choices = [choice.strip() for choice in " ".join(args).split("///")]
        default = next((c[1:] for c in choices if c.startswith("*")), None)
        choices = [c.removeprefix("*") for c in choices if c]
        if default is None and choices:
            default = choices[0]
        return EngineOption(name, option_type, default, choices=tuple(choices))
    if option_type == OptionType.CHECK:
        return EngineOption(name, option_type, args[0] if args else "0")
    if option_type == OptionType.BUTTON:
        return EngineOption(name, option_type)
    return EngineOption(name, option_type, " ".join(args))


def _level_base(ms: int) -> str:
    seconds = max(0, ms // 1000)
    minutes, rest = divmod(seconds, 60)
    return f"{minutes}:{rest:02d}" if rest else str(minutes)


class XboardDriver:
    """Encodes commands for, and decodes output of, a CECP engine.

    Pings are only available once the engine announced ``ping=1``.
    """

    name = "xboard"

    __slots__ = (
        "_ping_supported",
        "_last_ping",
        "_usermove",
        "_level_sent",
    )

    def __init__(self) -> None:
        self._ping_supported = False
        self._last_ping = 0
        self._usermove = False
        self._level_sent = False

    @property
    def supports_ping(self) -> bool:
        return self._ping_supported

    # ── Encoding ─────────────────────────────────────────────────────────

    def start_session(self) -> list[str]:
        return ["xboard", "protover 2"]

    def encode_ping(self) -> str | None:
        if not self._ping_supported:
            return None
        self._last_ping += 1
        return f"ping {self._last_ping}"

    def encode_option(self, option: EngineOption, value: OptionValue) -> str:
        if option.type == OptionType.BUTTON:
            return f"option {option.name}"
        if option.type == OptionType.CHECK:
            return f"option {option.name}={1 if value else 0}"
        return f"option {option.name}={option.to_text(value)}"

    def encode_quit(self) -> str:
        return "quit"

    def encode_new_game(self, side: Color, variant: str, fen: str | None) -> list[str]:
        self._level_sent = False
        lines = ["new"]
        if variant != "standard":
            lines.append(f"variant {variant}")
        lines.append("force")
        if fen:
            lines.append(f"setboard {fen}")
        return lines

    def encode_move(self, move: str) -> list[str]:
        return ["force", f"usermove {move}" if self._usermove else move]

    def encode_go(self, request: SearchRequest) -> list[str]:
        lines: list[str] = []
        if not self._level_sent:
            self._level_sent = True
            if request.move_time_ms is not None:
                lines.append(f"st {max(1, request.move_time_ms // 1000)}")
            elif request.time_left_ms >= 0:
                increment = request.increment_ms / 1000
                lines.append(
                    f"level {request.moves_to_go} {_level_base(request.time_left_ms)} {increment:g}"
                )

        if request.move_time_ms is None and request.time_left_ms >= 0:
            lines.append(f"time {request.time_left_ms // 10}")
            if request.opponent_time_left_ms >= 0:
                lines.append(f"otim {request.opponent_time_left_ms // 10}")
        lines.append("go")
        return lines

    def encode_stop(self) -> list[str]:
        return ["?"]

    def encode_end_game(self, result: GameResult) -> list[str]:
        return [f"result {result.to_pgn()} {{{result.description}}}", "force"]

    # ── Decoding ─────────────────────────────────────────────────────────

    def decode_line(self, line: str) -> list[ProtocolEvent]:
        command, _, rest = line.partition(" ")
        if command == "feature":
            return self._decode_features(rest)
        if command == "pong":
            if rest.strip() == str(self._last_ping):
                return [Pong()]
            return [InfoReceived(line)]
        if command == "move" and rest:
            return [MoveReceived(rest.split(" ", 1)[0])]
        if command.startswith("Error") or line.startswith("Illegal move"):
            return [EngineError(line)]

        match = _THINKING_RE.match(line)
        if match is not None:
            return [EvaluationReported(int(match.group(2)), int(match.group(1)))]
        return [InfoReceived(line)]

    def _decode_features(self, text: str) -> list[ProtocolEvent]:
        events: list[ProtocolEvent] = []
        started = False
        for name, raw in _FEATURE_RE.findall(text):
            value = raw[1:-1] if raw.startswith('"') else raw
            if name not in _ACCEPTED_FEATURES:
                events.append(Reply(f"rejected {name}"))
                continue
            events.append(Reply(f"accepted {name}"))

            if name == "ping":
                self._ping_supported = value == "1"
            elif name == "usermove":
                self._usermove = value == "1"
            elif name == "myname":
                events.append(NameDeclared(value))
            elif name == "variants":
                variants = [v.strip() for v in value.split(",") if v.strip()]
                events.append(
                    VariantsDeclared(
                        tuple("standard" if v == "normal" else v for v in variants)
                    )
                )
            elif name == "option":
                option = parse_option_feature(value)
                if option is not None:
                    events.append(OptionDeclared(option))
            elif name == "done":
                started = value == "1"

        if started:
            events.append(SessionStarted())
        return events
