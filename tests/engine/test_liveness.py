"""Tests for LivenessMonitor."""

from __future__ import annotations

import time

import pytest
from PyQt6.QtTest import QSignalSpy

from chesslink.core.enums import PlayerState
from chesslink.engine.liveness import PING_TIMEOUT_MS, LivenessMonitor


class TestLivenessMonitor:
    def test_default_timeout(self) -> None:
        assert PING_TIMEOUT_MS == 10_000
        assert LivenessMonitor().timeout_ms == PING_TIMEOUT_MS

    def test_arm_records_state_and_deadline(self) -> None:
        monitor = LivenessMonitor()
        before = time.monotonic()
        pending = monitor.arm(PlayerState.OBSERVING)
        assert monitor.is_pending
        assert pending.state_at_ping == PlayerState.OBSERVING
        assert pending.deadline is not None
        assert pending.deadline >= before + 10

    def test_only_one_probe(self) -> None:
        monitor = LivenessMonitor()
        monitor.arm(PlayerState.IDLE)
        with pytest.raises(RuntimeError):
            monitor.arm(PlayerState.IDLE)

    def test_disarm_returns_probe(self) -> None:
        monitor = LivenessMonitor()
        monitor.arm(PlayerState.IDLE)
        pending = monitor.disarm()
        assert pending is not None
        assert pending.state_at_ping == PlayerState.IDLE
        assert monitor.pending is None
        assert monitor.disarm() is None

    def test_hold_has_no_deadline(self) -> None:
        monitor = LivenessMonitor()
        monitor.hold(PlayerState.STARTING)
        assert monitor.is_pending
        assert monitor.pending.deadline is None

    def test_timeout_fires_once(self) -> None:
        monitor = LivenessMonitor()
        spy = QSignalSpy(monitor.timed_out)
        monitor.arm(PlayerState.THINKING)
        monitor._on_timer()
        monitor._on_timer()
        assert len(spy) == 1
        assert not monitor.is_pending

    def test_timer_expires(self) -> None:
        monitor = LivenessMonitor(timeout_ms=10)
        spy = QSignalSpy(monitor.timed_out)
        monitor.arm(PlayerState.IDLE)
        assert spy.wait(1000)
        assert not monitor.is_pending
