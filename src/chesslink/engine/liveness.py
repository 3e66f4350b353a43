"""Ping/pong bookkeeping with a single deadline timer."""

from __future__ import annotations

import time
from dataclasses import dataclass

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from chesslink.core.enums import PlayerState

PING_TIMEOUT_MS = 10_000


@dataclass(frozen=True, slots=True)
class PendingPing:
    """An outstanding liveness probe.

    ``deadline`` is a ``time.monotonic()`` value, or ``None`` for the
    implicit probe held during engine start-up.
    """

    state_at_ping: PlayerState
    deadline: float | None


class LivenessMonitor(QObject):
    """Tracks at most one outstanding probe and fires ``timed_out`` once.

    The monitor owns no protocol knowledge: the engine sends the ping line
    and reports the answer through :meth:`disarm`.
    """

    timed_out = pyqtSignal()

    def __init__(self, parent: QObject | None = None, timeout_ms: int = PING_TIMEOUT_MS) -> None:
        super().__init__(parent)
        self._timeout_ms = timeout_ms
        self._pending: PendingPing | None = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timer)

    @property
    def pending(self) -> PendingPing | None:
        return self._pending

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    def arm(self, state: PlayerState) -> PendingPing:
        """Record a probe issued in *state* and start the deadline."""
        if self._pending is not None:
            raise RuntimeError("a liveness probe is already outstanding")
        deadline = time.monotonic() + self._timeout_ms / 1000
        self._pending = PendingPing(state, deadline)
        self._timer.start(self._timeout_ms)
        return self._pending

    def hold(self, state: PlayerState) -> None:
        """Block the engine like a probe would, without a deadline."""
        self._timer.stop()
        self._pending = PendingPing(state, None)

    def disarm(self) -> PendingPing | None:
        """Cancel the outstanding probe and return it."""
        self._timer.stop()
        pending, self._pending = self._pending, None
        return pending

    def _on_timer(self) -> None:
        if self._pending is None:
            return
        self._pending = None
        self.timed_out.emit()
