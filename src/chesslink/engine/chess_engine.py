"""Engine adapter: lifecycle, liveness, buffering and options for one engine.

``ChessEngine`` is the only component that changes an engine's
``PlayerState``.  Everything runs on the owning thread's event loop:
inbound lines, the ping deadline and the move timer are all Qt signals,
so no handler ever blocks or runs concurrently with another.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PyQt6.QtCore import QObject, pyqtSignal

from chesslink.core.enums import Color, PlayerState
from chesslink.core.result import GameResult, ResultType
from chesslink.engine.dispatcher import EngineTransport, LineDispatcher
from chesslink.engine.driver import ProtocolDriver, SearchRequest
from chesslink.engine.events import (
    EngineError,
    EvaluationReported,
    MoveReceived,
    NameDeclared,
    OptionDeclared,
    Pong,
    ProtocolEvent,
    Reply,
    SessionStarted,
    VariantsDeclared,
)
from chesslink.engine.liveness import LivenessMonitor, PendingPing
from chesslink.engine.options import EngineOption, OptionError, OptionRegistry, OptionValue
from chesslink.engine.write_buffer import WriteBuffer
from chesslink.game.player import ChessPlayer

if TYPE_CHECKING:
    from chesslink.engine.settings import EngineSettings

_LOGGER = logging.getLogger(__name__)

_ID_LOCK = threading.Lock()
_ID_COUNTER = itertools.count()


def next_engine_id() -> int:
    """Process-wide engine id; never reused within a run."""
    with _ID_LOCK:
        return next(_ID_COUNTER)


@dataclass(frozen=True, slots=True)
class DebugLine:
    """One line of engine traffic, for logs and debug consoles."""

    direction: str  # ">" sent, "<" received
    label: str
    engine_id: int
    text: str

    def __str__(self) -> str:
        return f"{self.direction}{self.label}({self.engine_id}): {self.text}"


class ChessEngine(ChessPlayer):
    """A chess engine reached through a line-oriented byte stream.

    Args:
        device: Open transport to the engine, usually a ``QProcess``.
        driver: Protocol encoder/decoder, e.g. ``UciDriver``.
        name: Display name; the engine's self-reported name is used when
            this is empty.

    Signals:
        debug_message: ``DebugLine`` for every line sent or received.
        evaluation: ``(score_cp, depth)`` search progress.
        option_rejected: ``(name, reason)`` for refused option requests.
        engine_error: Error text reported by the engine.
    """

    debug_message = pyqtSignal(object)
    evaluation = pyqtSignal(int, int)
    option_rejected = pyqtSignal(str, str)
    engine_error = pyqtSignal(str)

    # Consecutive re-probes while finishing a game before settling anyway.
    _MAX_SETTLE_REPROBES = 3

    def __init__(
        self,
        device: EngineTransport,
        driver: ProtocolDriver,
        name: str = "",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(name, parent)
        self._device = device
        self._driver = driver
        self._id = next_engine_id()
        self._options = OptionRegistry()
        self._write_buffer = WriteBuffer()
        self._variants: frozenset[str] = frozenset({"standard"})
        self._white_eval_pov = False
        self._settle_reprobes = 0

        self._liveness = LivenessMonitor(self)
        self._liveness.timed_out.connect(self._on_ping_timeout)

        self._dispatcher = LineDispatcher(device, self)
        self._dispatcher.line_received.connect(self._on_line)
        self._dispatcher.transport_closed.connect(self._on_disconnect)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def engine_id(self) -> int:
        return self._id

    @property
    def driver(self) -> ProtocolDriver:
        return self._driver

    @property
    def options(self) -> OptionRegistry:
        return self._options

    @property
    def variants(self) -> frozenset[str]:
        return self._variants

    @property
    def white_eval_pov(self) -> bool:
        return self._white_eval_pov

    @property
    def pending_ping(self) -> PendingPing | None:
        return self._liveness.pending

    @property
    def buffered_lines(self) -> tuple[str, ...]:
        return tuple(self._write_buffer)

    @property
    def is_human(self) -> bool:
        return False

    def is_ready(self) -> bool:
        if self._liveness.is_pending:
            return False
        return super().is_ready()

    def supports_variant(self, variant: str) -> bool:
        return variant in self._variants

    # ── Lifecycle ────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin the protocol handshake; only valid before the first start."""
        if self._state != PlayerState.NOT_STARTED:
            return

        self._liveness.disarm()
        self._set_state(PlayerState.STARTING)
        self.flush_write_buffer()

        for line in self._driver.start_session():
            self.write(line)
        # Hold everything else until the engine reports start-up complete.
        self._liveness.hold(PlayerState.STARTING)

    def go(self) -> None:
        # An observing engine may have died silently; probe before resuming.
        if self._state == PlayerState.OBSERVING:
            self.ping()
        super().go()

    def end_game(self, result: GameResult) -> None:
        super().end_game(result)
        if not self.ping() and self._state == PlayerState.FINISHING_GAME:
            # No keepalive in this protocol: nothing to wait for.
            self._settle_idle()
            self.ready.emit()

    def stop_thinking(self) -> None:
        """Ask the engine to move now."""
        if self._state != PlayerState.THINKING:
            return
        for line in self._driver.encode_stop():
            self.write(line)

    def close_connection(self) -> None:
        if self._state == PlayerState.DISCONNECTED:
            return
        super().close_connection()

        self._liveness.disarm()
        self._write_buffer.clear()
        self.ready.emit()

        self._dispatcher.detach_close_notification()
        self._device.close()
        self.disconnected.emit()

    def quit(self) -> None:
        """Send the quit command; the engine is unusable afterwards."""
        if not self._device.isOpen() or self._state == PlayerState.DISCONNECTED:
            return

        self._dispatcher.detach_close_notification()
        self._liveness.disarm()
        self._write_buffer.clear()
        self._move_timer.stop()
        self._send(self._driver.encode_quit())
        self._set_state(PlayerState.DISCONNECTED)
        _LOGGER.info("%s quit", self._label())
        self.disconnected.emit()

    # ── Liveness ─────────────────────────────────────────────────────────

    def ping(self) -> bool:
        """Probe the engine.

        Returns ``True`` when a probe is outstanding afterwards, ``False``
        when the engine cannot be probed right now or ever.
        """
        if self._liveness.is_pending:
            return True
        if self._state in (PlayerState.NOT_STARTED, PlayerState.DISCONNECTED):
            return False
        line = self._driver.encode_ping()
        if line is None:
            return False

        self._liveness.arm(self._state)
        # Never queued behind other traffic: the point is to detect staleness.
        self._send(line)
        return True

    def pong(self) -> None:
        pending = self._liveness.pending
        if pending is None or pending.deadline is None:
            return
        self._liveness.disarm()
        self.flush_write_buffer()

        if self._state == PlayerState.FINISHING_GAME:
            if pending.state_at_ping == PlayerState.FINISHING_GAME:
                self._settle_idle()
            elif self._settle_reprobes < self._MAX_SETTLE_REPROBES:
                # State changed while waiting; probe again before moving on.
                self._settle_reprobes += 1
                self.ping()
                return
            else:
                _LOGGER.warning(
                    "%s: settling after %d re-probes", self._label(), self._settle_reprobes
                )
                self._settle_idle()

        self.ready.emit()

    # ── Options ──────────────────────────────────────────────────────────

    def get_option(self, name: str) -> EngineOption | None:
        return self._options.get(name)

    def set_option(self, name: str, value: OptionValue) -> None:
        """Validate and send an option, or defer it until start-up is done."""
        if self._state in (PlayerState.NOT_STARTED, PlayerState.STARTING):
            self._options.defer(name, value)
            return
        if self._state == PlayerState.DISCONNECTED:
            return

        try:
            option = self._options.apply(name, value)
        except OptionError as exc:
            _LOGGER.warning("%s: %s", self._label(), exc)
            self.option_rejected.emit(exc.name, str(exc))
            return
        self.write(self._driver.encode_option(option, option.value))

    def apply_settings(self, settings: EngineSettings) -> None:
        for line in settings.init_strings:
            self.write(line)
        for setting in settings.custom_settings:
            self.set_option(setting.name, setting.value)
        if settings.time_control is not None and settings.time_control.is_valid:
            self.set_time_control(settings.time_control)
        self._white_eval_pov = settings.white_eval_pov

    # ── Output ───────────────────────────────────────────────────────────

    def write(self, line: str) -> None:
        """Send *line*, or queue it while the engine cannot accept it."""
        if self._state == PlayerState.DISCONNECTED:
            return
        if self._state == PlayerState.NOT_STARTED or self._liveness.is_pending:
            self._write_buffer.append(line)
            return
        self._send(line)

    def flush_write_buffer(self) -> None:
        if self._liveness.is_pending or self._state == PlayerState.NOT_STARTED:
            return
        for line in self._write_buffer.take_all():
            self.write(line)

    def _send(self, line: str) -> None:
        self._audit(">", line)
        self._device.write(f"{line}\n".encode())

    # ── Player hooks ─────────────────────────────────────────────────────

    def _start_game(self) -> None:
        assert self._side is not None
        for line in self._driver.encode_new_game(self._side, self._variant, self._start_fen):
            self.write(line)

    def _send_move(self, move: str) -> None:
        for line in self._driver.encode_move(move):
            self.write(line)

    def _start_thinking(self) -> None:
        for line in self._driver.encode_go(self._search_request()):
            self.write(line)

    def _finish_game(self, result: GameResult) -> None:
        self._settle_reprobes = 0
        for line in self._driver.encode_end_game(result):
            self.write(line)

    def _on_timeout(self) -> None:
        self.stop_thinking()

    # ── Input ────────────────────────────────────────────────────────────

    def _on_line(self, line: str) -> None:
        self._audit("<", line)
        for event in self._driver.decode_line(line):
            self._handle_event(event)

    def _handle_event(self, event: ProtocolEvent) -> None:
        if isinstance(event, Pong):
            self.pong()
        elif isinstance(event, SessionStarted):
            self._on_session_started()
        elif isinstance(event, OptionDeclared):
            self._options.declare(event.option)
        elif isinstance(event, NameDeclared):
            if not self._name:
                self.set_name(event.name)
        elif isinstance(event, VariantsDeclared):
            self._variants = frozenset(event.variants)
        elif isinstance(event, MoveReceived):
            self._on_engine_move(event.move)
        elif isinstance(event, EvaluationReported):
            score = event.score_cp
            if self._white_eval_pov and self._side == Color.BLACK:
                score = -score
            self.evaluation.emit(score, event.depth)
        elif isinstance(event, Reply):
            # Handshake acknowledgements are never held back.
            if self._state != PlayerState.DISCONNECTED:
                self._send(event.line)
        elif isinstance(event, EngineError):
            _LOGGER.warning("%s reported an error: %s", self._label(), event.message)
            self.engine_error.emit(event.message)

    def _on_session_started(self) -> None:
        if self._state != PlayerState.STARTING:
            return

        self._liveness.disarm()
        self._set_state(PlayerState.IDLE)
        self.flush_write_buffer()

        for request in self._options.take_pending():
            self.set_option(request.name, request.value)

        _LOGGER.info("%s started (%d options)", self._label(), len(self._options))
        self.ready.emit()

    def _on_engine_move(self, move: str) -> None:
        if self._state != PlayerState.THINKING:
            _LOGGER.warning("%s sent a move while %s: %s", self._label(), self._state, move)
            return
        self._on_own_move(move)

    def _on_ping_timeout(self) -> None:
        _LOGGER.warning("Engine %s failed to respond to ping", self._label())
        self._write_buffer.clear()
        self.close_connection()
        self.emit_forfeit(ResultType.WIN_BY_STALLED_CONNECTION)

    def _on_disconnect(self) -> None:
        if self._state == PlayerState.DISCONNECTED:
            return

        was_in_game = self._state.in_game
        _LOGGER.warning("%s closed its connection", self._label())
        super().close_connection()
        self._liveness.disarm()
        self._write_buffer.clear()
        if was_in_game:
            self.emit_forfeit(ResultType.WIN_BY_DISCONNECTION)
        self.ready.emit()
        self.disconnected.emit()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _settle_idle(self) -> None:
        self._settle_reprobes = 0
        self._set_state(PlayerState.IDLE)

    def _search_request(self) -> SearchRequest:
        assert self._side is not None
        own = self.clock_snapshot()
        opponent = self._opponent.clock_snapshot() if self._opponent is not None else None
        if opponent is None:
            opponent = own
        time_control = self.time_control
        move_time_ms = None
        if time_control is not None and time_control.per_move_seconds is not None:
            move_time_ms = int(time_control.per_move_seconds * 1000)

        return SearchRequest(
            side=self._side,
            moves=tuple(self._moves),
            start_fen=self._start_fen,
            time_left_ms=own.remaining_ms if own is not None else -1,
            opponent_time_left_ms=opponent.remaining_ms if opponent is not None else -1,
            increment_ms=own.increment_ms if own is not None else 0,
            moves_to_go=own.moves_to_go if own is not None else 0,
            move_time_ms=move_time_ms,
        )

    def _label(self) -> str:
        return f"{self._name or 'engine'}({self._id})"

    def _audit(self, direction: str, text: str) -> None:
        entry = DebugLine(direction, self._name, self._id, text)
        _LOGGER.debug("%s", entry)
        self.debug_message.emit(entry)
