"""Tests for LineDispatcher."""

from __future__ import annotations

from PyQt6.QtTest import QSignalSpy

from chesslink.engine.dispatcher import LineDispatcher, simplify


def _lines(spy: QSignalSpy) -> list[str]:
    return [spy[i][0] for i in range(len(spy))]


class TestSimplify:
    def test_collapses_whitespace(self) -> None:
        assert simplify("  info   depth\t3 \r\n") == "info depth 3"
        assert simplify("\n") == ""


class TestLineDispatcher:
    def test_emits_complete_lines_in_order(self, transport) -> None:
        dispatcher = LineDispatcher(transport)
        spy = QSignalSpy(dispatcher.line_received)
        transport.feed("id name Stub", "uciok")
        assert _lines(spy) == ["id name Stub", "uciok"]

    def test_partial_line_waits_for_terminator(self, transport) -> None:
        dispatcher = LineDispatcher(transport)
        spy = QSignalSpy(dispatcher.line_received)
        transport.feed_raw("best")
        assert len(spy) == 0
        transport.feed_raw("move e2e4\r\nread")
        assert _lines(spy) == ["bestmove e2e4"]
        transport.feed_raw("yok\n")
        assert _lines(spy) == ["bestmove e2e4", "readyok"]

    def test_invalid_utf8_is_replaced(self, transport) -> None:
        dispatcher = LineDispatcher(transport)
        spy = QSignalSpy(dispatcher.line_received)
        transport._inbound.extend(b"id name \xffStub\n")
        transport.readyRead.emit()
        assert _lines(spy) == ["id name \ufffdStub"]

    def test_close_reported_once(self, transport) -> None:
        dispatcher = LineDispatcher(transport)
        spy = QSignalSpy(dispatcher.transport_closed)
        transport.finish()
        transport.readChannelFinished.emit()
        assert len(spy) == 1
        assert not dispatcher.is_watching_close

    def test_detached_close_is_silent(self, transport) -> None:
        dispatcher = LineDispatcher(transport)
        spy = QSignalSpy(dispatcher.transport_closed)
        dispatcher.detach_close_notification()
        dispatcher.detach_close_notification()
        transport.finish()
        assert len(spy) == 0
