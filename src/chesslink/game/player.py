"""Base player shared by every seat in a game.

``ChessPlayer`` keeps the bookkeeping that does not depend on how moves
are produced: lifecycle state, side, move history, the move-time clock and
forfeits.  Engine adapters extend it and fill in the protected hooks.
"""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from chesslink.core.enums import Color, PlayerState
from chesslink.core.result import GameResult, ResultType
from chesslink.game.clock import ClockSnapshot, PlayerClock
from chesslink.game.interfaces import TimeControl

_LOGGER = logging.getLogger(__name__)

_READY_STATES = frozenset(
    {
        PlayerState.IDLE,
        PlayerState.OBSERVING,
        PlayerState.THINKING,
        PlayerState.DISCONNECTED,
    }
)


class ChessPlayer(QObject):
    """A game participant with a lifecycle and a move clock.

    Signals:
        ready: The player can accept the next request.
        forfeit: ``GameResult`` against this player.
        move_made: The player's own move (protocol notation).
        state_changed: New ``PlayerState`` value.
        disconnected: The player's connection is gone.
    """

    ready = pyqtSignal()
    forfeit = pyqtSignal(object)
    move_made = pyqtSignal(str)
    state_changed = pyqtSignal(int)
    disconnected = pyqtSignal()

    def __init__(self, name: str = "", parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._name = name
        self._state = PlayerState.NOT_STARTED
        self._side: Color | None = None
        self._opponent: ChessPlayer | None = None
        self._variant = "standard"
        self._start_fen: str | None = None
        self._moves: list[str] = []
        self._clock: PlayerClock | None = None

        self._move_timer = QTimer(self)
        self._move_timer.setSingleShot(True)
        self._move_timer.timeout.connect(self._on_timeout)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        self._name = name

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def side(self) -> Color | None:
        return self._side

    @property
    def opponent(self) -> ChessPlayer | None:
        return self._opponent

    @property
    def variant(self) -> str:
        return self._variant

    @property
    def moves(self) -> tuple[str, ...]:
        """Moves of the current game, both sides, in play order."""
        return tuple(self._moves)

    @property
    def is_human(self) -> bool:
        return False

    @property
    def time_control(self) -> TimeControl | None:
        return self._clock.time_control if self._clock is not None else None

    def set_time_control(self, time_control: TimeControl) -> None:
        self._clock = PlayerClock(time_control)

    def clock_snapshot(self) -> ClockSnapshot | None:
        return self._clock.snapshot() if self._clock is not None else None

    def is_ready(self) -> bool:
        return self._state in _READY_STATES

    def supports_variant(self, variant: str) -> bool:
        return variant == "standard"

    # ── Game flow ────────────────────────────────────────────────────────

    def new_game(
        self,
        side: Color,
        opponent: ChessPlayer | None = None,
        *,
        variant: str = "standard",
        fen: str | None = None,
    ) -> None:
        """Seat the player on *side*; only valid while idle."""
        if self._state != PlayerState.IDLE:
            _LOGGER.warning("%s cannot start a game while %s", self._name, self._state)
            return

        self._side = side
        self._opponent = opponent
        self._variant = variant
        self._start_fen = fen
        self._moves = []
        if self._clock is not None:
            self._clock.reset()

        self._set_state(PlayerState.OBSERVING)
        self._start_game()

    def make_move(self, move: str) -> None:
        """Forward the opponent's *move*."""
        if not self._state.in_game:
            return
        self._moves.append(move)
        self._send_move(move)

    def go(self) -> None:
        """Start thinking; arms the move timer when the clock is limited."""
        if not self._state.in_game:
            return

        self._set_state(PlayerState.THINKING)
        if self._clock is not None and not self._clock.is_unlimited:
            self._move_timer.start(max(0, self._clock.remaining_ms()))
            self._clock.start()
        self._start_thinking()

    def end_game(self, result: GameResult) -> None:
        if not self._state.in_game:
            return

        self._move_timer.stop()
        if self._clock is not None:
            self._clock.stop()
        self._set_state(PlayerState.FINISHING_GAME)
        self._finish_game(result)

    def close_connection(self) -> None:
        if self._state == PlayerState.DISCONNECTED:
            return

        self._move_timer.stop()
        if self._clock is not None:
            self._clock.stop()
        self._set_state(PlayerState.DISCONNECTED)

    def emit_forfeit(self, result_type: ResultType) -> None:
        """Report that this player lost the game by *result_type*."""
        self._move_timer.stop()
        result = GameResult.forfeit(result_type, self._side)
        _LOGGER.info("%s forfeits: %s", self._name, result)
        self.forfeit.emit(result)

    # ── Hooks for subclasses ─────────────────────────────────────────────

    def _start_game(self) -> None:
        pass

    def _send_move(self, move: str) -> None:
        pass

    def _start_thinking(self) -> None:
        pass

    def _finish_game(self, result: GameResult) -> None:
        pass

    def _on_timeout(self) -> None:
        self.emit_forfeit(ResultType.WIN_BY_TIMEOUT)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _set_state(self, state: PlayerState) -> None:
        if state == self._state or self._state == PlayerState.DISCONNECTED:
            return
        self._state = state
        self.state_changed.emit(int(state))

    def _on_own_move(self, move: str) -> None:
        """Record a move produced by this player and hand the turn back."""
        self._move_timer.stop()
        if self._clock is not None:
            self._clock.finish_move()
        self._moves.append(move)
        self._set_state(PlayerState.OBSERVING)
        self.move_made.emit(move)
