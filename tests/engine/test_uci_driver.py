"""Tests for the UCI protocol driver."""

from __future__ import annotations

import pytest

from chesslink.core.enums import Color
from chesslink.engine.driver import SearchRequest
from chesslink.engine.events import (
    EngineError,
    EvaluationReported,
    InfoReceived,
    MoveReceived,
    NameDeclared,
    OptionDeclared,
    Pong,
    SessionStarted,
    VariantsDeclared,
)
from chesslink.engine.options import OptionType
from chesslink.engine.uci import MATE_SCORE, UciDriver, parse_option


class TestParseOption:
    def test_spin(self) -> None:
        option = parse_option("name Hash type spin default 16 min 1 max 1024")
        assert option is not None
        assert option.name == "Hash"
        assert option.type == OptionType.SPIN
        assert option.default == 16
        assert (option.minimum, option.maximum) == (1, 1024)

    def test_multi_word_name_and_choices(self) -> None:
        option = parse_option(
            "name Playing Style type combo default Very Solid var Very Solid var Risky"
        )
        assert option is not None
        assert option.name == "Playing Style"
        assert option.choices == ("Very Solid", "Risky")
        assert option.value == "Very Solid"

    def test_empty_string_default(self) -> None:
        option = parse_option("name SyzygyPath type string default <empty>")
        assert option is not None
        assert option.value == ""

    def test_button_has_no_value(self) -> None:
        option = parse_option("name Clear Hash type button")
        assert option is not None
        assert option.type == OptionType.BUTTON
        assert option.value is None

    @pytest.mark.parametrize(
        "text",
        ["type spin default 1 min 0 max 2", "name Foo type slider default 1"],
    )
    def test_rejects_incomplete_declarations(self, text: str) -> None:
        assert parse_option(text) is None


class TestDecode:
    def setup_method(self) -> None:
        self.driver = UciDriver()

    def test_handshake_lines(self) -> None:
        assert self.driver.decode_line("uciok") == [SessionStarted()]
        assert self.driver.decode_line("readyok") == [Pong()]
        assert self.driver.decode_line("id name Stockfish 16") == [NameDeclared("Stockfish 16")]
        assert self.driver.decode_line("id author someone") == [
            InfoReceived("id author someone")
        ]

    def test_bestmove(self) -> None:
        assert self.driver.decode_line("bestmove e2e4 ponder e7e5") == [MoveReceived("e2e4")]

    @pytest.mark.parametrize("line", ["bestmove (none)", "bestmove 0000", "bestmove"])
    def test_bestmove_without_move_is_an_error(self, line: str) -> None:
        (event,) = self.driver.decode_line(line)
        assert isinstance(event, EngineError)

    def test_info_centipawns(self) -> None:
        events = self.driver.decode_line("info depth 20 seldepth 28 score cp -42 nodes 1 pv e2e4")
        assert events == [EvaluationReported(-42, 20)]

    def test_info_mate(self) -> None:
        assert self.driver.decode_line("info depth 9 score mate 3") == [
            EvaluationReported(MATE_SCORE - 3, 9, True)
        ]
        assert self.driver.decode_line("info depth 9 score mate -2") == [
            EvaluationReported(-(MATE_SCORE - 2), 9, True)
        ]

    def test_info_without_score(self) -> None:
        line = "info string NNUE evaluation enabled"
        assert self.driver.decode_line(line) == [InfoReceived(line)]

    def test_variant_options(self) -> None:
        events = self.driver.decode_line(
            "option name UCI_Variant type combo default chess var chess var atomic"
        )
        assert isinstance(events[0], OptionDeclared)
        assert events[1] == VariantsDeclared(("standard", "atomic"))

        events = self.driver.decode_line("option name UCI_Chess960 type check default false")
        assert events[1] == VariantsDeclared(("standard", "atomic", "fischerandom"))

    def test_unknown_line(self) -> None:
        assert self.driver.decode_line("Stockfish by the team") == [
            InfoReceived("Stockfish by the team")
        ]


class TestEncode:
    def setup_method(self) -> None:
        self.driver = UciDriver()

    def test_fixed_commands(self) -> None:
        assert self.driver.start_session() == ["uci"]
        assert self.driver.encode_ping() == "isready"
        assert self.driver.encode_quit() == "quit"
        assert self.driver.encode_stop() == ["stop"]
        assert self.driver.encode_move("e2e4") == []

    def test_option(self) -> None:
        option = parse_option("name Ponder type check default false")
        assert option is not None
        assert self.driver.encode_option(option, True) == "setoption name Ponder value true"

    def test_new_game(self) -> None:
        assert self.driver.encode_new_game(Color.WHITE, "standard", None) == ["ucinewgame"]
        assert self.driver.encode_new_game(Color.WHITE, "fischerandom", None) == [
            "setoption name UCI_Chess960 value true",
            "ucinewgame",
        ]
        assert self.driver.encode_new_game(Color.BLACK, "atomic", None)[0] == (
            "setoption name UCI_Variant value atomic"
        )

    def test_go_infinite(self) -> None:
        request = SearchRequest(side=Color.WHITE, moves=(), start_fen=None)
        assert self.driver.encode_go(request) == ["position startpos", "go infinite"]

    def test_go_with_clock(self) -> None:
        request = SearchRequest(
            side=Color.BLACK,
            moves=("e2e4",),
            start_fen=None,
            time_left_ms=30_000,
            opponent_time_left_ms=45_000,
            increment_ms=500,
            moves_to_go=12,
        )
        assert self.driver.encode_go(request) == [
            "position startpos moves e2e4",
            "go wtime 45000 btime 30000 winc 500 binc 500 movestogo 12",
        ]

    def test_go_movetime_from_fen(self) -> None:
        fen = "8/8/8/8/8/8/8/K1k5 w - - 0 1"
        request = SearchRequest(
            side=Color.WHITE, moves=(), start_fen=fen, move_time_ms=2000
        )
        assert self.driver.encode_go(request) == [f"position fen {fen}", "go movetime 2000"]
