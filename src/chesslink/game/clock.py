"""Per-player clock with Fischer increment and repeating periods."""

from __future__ import annotations

import time
from dataclasses import dataclass

from chesslink.game.interfaces import TimeControl


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Clock state reported to engines when they are asked to move."""

    remaining_ms: int
    increment_ms: int
    moves_to_go: int


class PlayerClock:
    """Countdown clock for a single player.

    Uses monotonic time for accuracy. Supports Fischer increment,
    repeating ``moves/time`` periods and fixed time per move.
    """

    __slots__ = (
        "_time_control",
        "_remaining",
        "_moves_left",
        "_last_tick",
        "_running",
    )

    def __init__(self, time_control: TimeControl) -> None:
        self._time_control = time_control
        self._remaining: float = 0.0
        self._moves_left = 0
        self._last_tick: float = 0.0
        self._running: bool = False
        self.reset()

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_unlimited(self) -> bool:
        return self._time_control.is_unlimited

    @property
    def moves_to_go(self) -> int:
        """Moves left in the current period, ``0`` for sudden death."""
        return self._moves_left

    def reset(self) -> None:
        """Restore the full budget for a new game."""
        tc = self._time_control
        self._running = False
        if tc.per_move_seconds is not None:
            self._remaining = tc.per_move_seconds
        else:
            self._remaining = tc.initial_seconds
        self._moves_left = tc.moves_per_tc

    def start(self) -> None:
        if self._time_control.per_move_seconds is not None:
            self._remaining = self._time_control.per_move_seconds
        self._last_tick = time.monotonic()
        self._running = True

    def stop(self) -> None:
        if self._running:
            self._consume_elapsed()
            self._running = False

    def finish_move(self) -> None:
        """Stop the clock and credit increment and period time."""
        self.stop()
        tc = self._time_control
        if tc.per_move_seconds is not None:
            return
        self._remaining += tc.increment_seconds
        if tc.moves_per_tc > 0:
            self._moves_left -= 1
            if self._moves_left <= 0:
                self._remaining += tc.initial_seconds
                self._moves_left = tc.moves_per_tc

    def remaining(self) -> float:
        """Seconds remaining."""
        if self._running:
            elapsed = time.monotonic() - self._last_tick
            return max(0.0, self._remaining - elapsed)
        return max(0.0, self._remaining)

    def remaining_ms(self) -> int:
        remaining = self.remaining()
        if remaining == float("inf"):
            return -1
        return int(remaining * 1000)

    def is_flag_fallen(self) -> bool:
        return self.remaining() <= 0.0

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            remaining_ms=self.remaining_ms(),
            increment_ms=int(self._time_control.increment_seconds * 1000),
            moves_to_go=self._moves_left,
        )

    def _consume_elapsed(self) -> None:
        now = time.monotonic()
        elapsed = now - self._last_tick
        self._remaining = max(0.0, self._remaining - elapsed)
        self._last_tick = now
