"""Tests for the ChessPlayer base class."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from chesslink.core.enums import Color, PlayerState
from chesslink.core.result import GameResult, ResultType
from chesslink.game.interfaces import IPlayer, TimeControl
from chesslink.game.player import ChessPlayer


class _RecordingPlayer(ChessPlayer):
    """Player that is ready immediately and records hook calls."""

    def __init__(self, name: str = "Recorder") -> None:
        super().__init__(name)
        self.calls: list[str] = []
        self._set_state(PlayerState.IDLE)

    def _start_game(self) -> None:
        self.calls.append("start")

    def _send_move(self, move: str) -> None:
        self.calls.append(f"move {move}")

    def _start_thinking(self) -> None:
        self.calls.append("think")

    def _finish_game(self, result: GameResult) -> None:
        self.calls.append(f"finish {result.to_pgn()}")


class TestChessPlayer:
    def test_initial_state(self) -> None:
        p = ChessPlayer("Alice")
        assert p.name == "Alice"
        assert p.state == PlayerState.NOT_STARTED
        assert p.side is None
        assert p.is_human is False
        assert not p.is_ready()

    def test_satisfies_player_protocol(self) -> None:
        p: IPlayer = ChessPlayer()
        assert p.supports_variant("standard")
        assert not p.supports_variant("atomic")

    def test_new_game_only_from_idle(self) -> None:
        p = ChessPlayer()
        p.new_game(Color.WHITE)
        assert p.state == PlayerState.NOT_STARTED
        assert p.side is None

    def test_game_flow(self) -> None:
        p = _RecordingPlayer()
        states = QSignalSpy(p.state_changed)

        p.new_game(Color.BLACK)
        p.make_move("e2e4")
        p.go()
        p._on_own_move("e7e5")
        p.end_game(GameResult(ResultType.DRAW))

        assert p.calls == ["start", "move e2e4", "think", "finish 1/2-1/2"]
        assert p.moves == ("e2e4", "e7e5")
        assert p.state == PlayerState.FINISHING_GAME
        assert [states[i][0] for i in range(len(states))] == [
            PlayerState.OBSERVING,
            PlayerState.THINKING,
            PlayerState.OBSERVING,
            PlayerState.FINISHING_GAME,
        ]

    def test_own_move_is_announced(self) -> None:
        p = _RecordingPlayer()
        moves = QSignalSpy(p.move_made)
        p.new_game(Color.WHITE)
        p.go()
        p._on_own_move("g1f3")
        assert len(moves) == 1
        assert moves[0][0] == "g1f3"

    def test_requests_outside_game_are_ignored(self) -> None:
        p = _RecordingPlayer()
        p.make_move("e2e4")
        p.go()
        p.end_game(GameResult())
        assert p.calls == []
        assert p.state == PlayerState.IDLE

    def test_timeout_forfeits(self) -> None:
        p = _RecordingPlayer()
        forfeits = QSignalSpy(p.forfeit)
        p.new_game(Color.WHITE)
        p._on_timeout()
        result = forfeits[0][0]
        assert result.type == ResultType.WIN_BY_TIMEOUT
        assert result.winner == Color.BLACK

    def test_disconnected_is_final(self) -> None:
        p = _RecordingPlayer()
        p.close_connection()
        assert p.state == PlayerState.DISCONNECTED
        assert p.is_ready()
        p._set_state(PlayerState.IDLE)
        assert p.state == PlayerState.DISCONNECTED

    def test_time_control_arms_clock(self) -> None:
        p = _RecordingPlayer()
        p.set_time_control(TimeControl(60, 2))
        assert p.time_control == TimeControl(60, 2)
        p.new_game(Color.WHITE)
        p.go()
        snapshot = p.clock_snapshot()
        assert snapshot is not None
        assert snapshot.increment_ms == 2000
        assert 0 < snapshot.remaining_ms <= 60_000

    def test_no_clock_without_time_control(self) -> None:
        assert ChessPlayer().clock_snapshot() is None
