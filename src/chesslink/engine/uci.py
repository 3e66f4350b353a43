"""Universal Chess Interface (UCI) driver."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chesslink.core.enums import Color
from chesslink.engine.events import (
    EngineError,
    EvaluationReported,
    InfoReceived,
    MoveReceived,
    NameDeclared,
    OptionDeclared,
    Pong,
    ProtocolEvent,
    SessionStarted,
    VariantsDeclared,
)
from chesslink.engine.options import EngineOption, OptionType, OptionValue

if TYPE_CHECKING:
    from chesslink.core.result import GameResult
    from chesslink.engine.driver import SearchRequest

MATE_SCORE = 100_000

_OPTION_KEYWORDS = frozenset({"name", "type", "default", "min", "max", "var"})
_STANDARD_ALIASES = frozenset({"chess", "normal", "standard"})
_NO_MOVE = frozenset({"(none)", "0000", "null"})


def parse_option(text: str) -> EngineOption | None:
    """Parse the part of an ``option`` line after the keyword.

    Returns ``None`` for declarations without a name or a known type.
    """
    fields: dict[str, list[str]] = {}
    choices: list[list[str]] = []
    key: str | None = None
    for token in text.split(" "):
        if token in _OPTION_KEYWORDS:
            key = token
            if key == "var":
                choices.append([])
            else:
                fields[key] = []
            continue
        if key == "var":
            choices[-1].append(token)
        elif key is not None:
            fields[key].append(token)

    name = " ".join(fields.get("name", []))
    type_name = " ".join(fields.get("type", []))
    if not name:
        return None
    try:
        option_type = OptionType(type_name)
    except ValueError:
        return None

    default: str | None = None
    if "default" in fields:
        default = " ".join(fields["default"])
        if default == "<empty>":
            default = ""

    return EngineOption(
        name=name,
        type=option_type,
        default=default if option_type != OptionType.BUTTON else None,
        minimum=_to_int(fields.get("min")),
        maximum=_to_int(fields.get("max")),
        choices=tuple(" ".join(words) for words in choices),
    )


def _to_int(words: list[str] | None) -> int | None:
    if not words:
        return None
    try:
        return int(words[0])
    except ValueError:
        return None


def _variant_name(value: str) -> str:
    value = value.lower()
    return "standard" if value in _STANDARD_ALIASES else value


class UciDriver:
    """Encodes commands for, and decodes output of, a UCI engine."""

    name = "uci"

    __slots__ = ("_variants",)

    def __init__(self) -> None:
        self._variants: list[str] = ["standard"]

    # ── Encoding ─────────────────────────────────────────────────────────

    def start_session(self) -> list[str]:
        return ["uci"]

    def encode_ping(self) -> str | None:
        return "isready"

    def encode_option(self, option: EngineOption, value: OptionValue) -> str:
        if option.type == OptionType.BUTTON:
            return f"setoption name {option.name}"
        return f"setoption name {option.name} value {option.to_text(value)}"

    def encode_quit(self) -> str:
        return "quit"

    def encode_new_game(self, side: Color, variant: str, fen: str | None) -> list[str]:
        lines: list[str] = []
        if variant == "fischerandom":
            lines.append("setoption name UCI_Chess960 value true")
        elif variant != "standard":
            lines.append(f"setoption name UCI_Variant value {variant}")
        lines.append("ucinewgame")
        return lines

    def encode_move(self, move: str) -> list[str]:
        # UCI sends the whole game with every search request.
        return []

    def encode_go(self, request: SearchRequest) -> list[str]:
        position = f"position fen {request.start_fen}" if request.start_fen else "position startpos"
        if request.moves:
            position += " moves " + " ".join(request.moves)

        if request.move_time_ms is not None:
            return [position, f"go movetime {request.move_time_ms}"]
        if request.time_left_ms < 0:
            return [position, "go infinite"]

        own, other = request.time_left_ms, request.opponent_time_left_ms
        if other < 0:
            other = own
        white, black = (own, other) if request.side == Color.WHITE else (other, own)
        go = f"go wtime {white} btime {black}"
        if request.increment_ms > 0:
            go += f" winc {request.increment_ms} binc {request.increment_ms}"
        if request.moves_to_go > 0:
            go += f" movestogo {request.moves_to_go}"
        return [position, go]

    def encode_stop(self) -> list[str]:
        return ["stop"]

    def encode_end_game(self, result: GameResult) -> list[str]:
        return []

    # ── Decoding ─────────────────────────────────────────────────────────

    def decode_line(self, line: str) -> list[ProtocolEvent]:
        command, _, rest = line.partition(" ")
        if command == "readyok":
            return [Pong()]
        if command == "uciok":
            return [SessionStarted()]
        if command == "bestmove":
            move = rest.split(" ", 1)[0] if rest else ""
            if not move or move in _NO_MOVE:
                return [EngineError("engine did not return a move")]
            return [MoveReceived(move)]
        if command == "info":
            return self._decode_info(rest, line)
        if command == "id":
            key, _, value = rest.partition(" ")
            if key == "name" and value:
                return [NameDeclared(value)]
            return [InfoReceived(line)]
        if command == "option":
            return self._decode_option(rest, line)
        return [InfoReceived(line)]

    def _decode_option(self, rest: str, line: str) -> list[ProtocolEvent]:
        option = parse_option(rest)
        if option is None:
            return [InfoReceived(line)]

        events: list[ProtocolEvent] = [OptionDeclared(option)]
        if option.name == "UCI_Variant" and option.type == OptionType.COMBO:
            for choice in option.choices:
                self._add_variant(_variant_name(choice))
            events.append(VariantsDeclared(tuple(self._variants)))
        elif option.name == "UCI_Chess960" and option.type == OptionType.CHECK:
            self._add_variant("fischerandom")
            events.append(VariantsDeclared(tuple(self._variants)))
        return events

    def _decode_info(self, rest: str, line: str) -> list[ProtocolEvent]:
        tokens = rest.split(" ")
        depth: int | None = None
        score: int | None = None
        is_mate = False
        i = 0
        try:
            while i < len(tokens):
                token = tokens[i]
                if token == "depth":
                    depth = int(tokens[i + 1])
                    i += 2
                elif token == "score" and i + 2 < len(tokens):
                    kind, value = tokens[i + 1], int(tokens[i + 2])
                    if kind == "cp":
                        score = value
                    elif kind == "mate":
                        is_mate = True
                        score = MATE_SCORE - abs(value)
                        if value < 0:
                            score = -score
                    i += 3
                elif token in ("pv", "string"):
                    break
                else:
                    i += 1
        except (IndexError, ValueError):
            return [InfoReceived(line)]

        if score is None:
            return [InfoReceived(line)]
        return [EvaluationReported(score, depth or 0, is_mate)]

    def _add_variant(self, variant: str) -> None:
        if variant not in self._variants:
            self._variants.append(variant)
