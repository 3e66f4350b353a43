"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from PyQt6.QtCore import QObject, pyqtSignal

from chesslink.engine.chess_engine import ChessEngine
from chesslink.engine.driver import ProtocolDriver
from chesslink.engine.uci import UciDriver


@pytest.fixture(scope="session", autouse=True)
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication so timers can be armed."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


class FakeTransport(QObject):
    """In-memory stand-in for the ``QIODevice`` an engine talks through."""

    readyRead = pyqtSignal()
    readChannelFinished = pyqtSignal()

    def __init__(self) -> None:
        super().__init__()
        self._inbound = bytearray()
        self._open = True
        self.sent: list[str] = []

    # QIODevice surface

    def isOpen(self) -> bool:
        return self._open

    def isReadable(self) -> bool:
        return self._open

    def isWritable(self) -> bool:
        return self._open

    def canReadLine(self) -> bool:
        return b"\n" in self._inbound

    def readLine(self) -> bytes:
        end = self._inbound.index(b"\n") + 1
        line = bytes(self._inbound[:end])
        del self._inbound[:end]
        return line

    def write(self, data: bytes) -> int:
        assert self._open, "write on a closed transport"
        self.sent.extend(data.decode().splitlines())
        return len(data)

    def close(self) -> None:
        self._open = False

    # Test helpers

    def feed(self, *lines: str) -> None:
        """Deliver complete lines from the engine."""
        self.feed_raw("".join(f"{line}\n" for line in lines))

    def feed_raw(self, data: str) -> None:
        self._inbound.extend(data.encode())
        self.readyRead.emit()

    def finish(self) -> None:
        """Simulate the engine closing its output."""
        self._open = False
        self.readChannelFinished.emit()

    def take_sent(self) -> list[str]:
        sent, self.sent = self.sent, []
        return sent


class NoPingUciDriver(UciDriver):
    """UCI driver for a protocol variant without a keepalive command."""

    __slots__ = ()

    def encode_ping(self) -> str | None:
        return None


UCI_HANDSHAKE = (
    "id name Stubfish 1.0",
    "id author Tests",
    "option name Hash type spin default 16 min 1 max 1024",
    "option name Ponder type check default false",
    "option name Style type combo default Normal var Solid var Normal var Risky",
    "option name Clear Hash type button",
    "uciok",
)


@pytest.fixture
def uci_handshake() -> tuple[str, ...]:
    return UCI_HANDSHAKE


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_engine(transport: FakeTransport) -> Callable[..., ChessEngine]:
    """Factory for an engine on the shared ``transport`` fixture."""

    def _make(
        driver: ProtocolDriver | None = None,
        name: str = "Stub",
        *,
        keepalive: bool = True,
    ) -> ChessEngine:
        if driver is None:
            driver = UciDriver() if keepalive else NoPingUciDriver()
        return ChessEngine(transport, driver, name)

    return _make


@pytest.fixture
def started_engine(
    make_engine: Callable[..., ChessEngine], transport: FakeTransport
) -> ChessEngine:
    """A UCI engine that finished its handshake; the sent log is cleared."""
    engine = make_engine()
    engine.start()
    transport.feed(*UCI_HANDSHAKE)
    transport.take_sent()
    return engine
