"""Line-oriented reader for an engine's byte stream."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from PyQt6.QtCore import QByteArray, QObject, pyqtSignal


class BoundSignal(Protocol):
    """Minimal signal interface the dispatcher connects to."""

    def connect(self, slot: Callable[..., object]) -> object: ...

    def disconnect(self, slot: Callable[..., object]) -> object: ...


class EngineTransport(Protocol):
    """The subset of ``QIODevice`` an engine adapter relies on.

    ``QProcess`` and ``QTcpSocket`` satisfy it; tests use a fake.
    """

    readyRead: BoundSignal
    readChannelFinished: BoundSignal

    def isOpen(self) -> bool: ...

    def isReadable(self) -> bool: ...

    def isWritable(self) -> bool: ...

    def canReadLine(self) -> bool: ...

    def readLine(self) -> QByteArray | bytes: ...

    def write(self, data: bytes) -> int: ...

    def close(self) -> None: ...


def simplify(text: str) -> str:
    """Strip line terminators and collapse runs of whitespace."""
    return " ".join(text.split())


class LineDispatcher(QObject):
    """Turns ``readyRead`` notifications into complete, normalized lines.

    Every available complete line is emitted through ``line_received`` in
    arrival order.  A partial line stays in the device until its
    terminator arrives.  The end of the read channel is reported once
    through ``transport_closed`` unless the owner detached from it first.
    """

    line_received = pyqtSignal(str)
    transport_closed = pyqtSignal()

    def __init__(self, device: EngineTransport, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._device = device
        self._watching_close = True
        device.readyRead.connect(self.read_available)
        device.readChannelFinished.connect(self._on_read_channel_finished)

    @property
    def device(self) -> EngineTransport:
        return self._device

    @property
    def is_watching_close(self) -> bool:
        return self._watching_close

    def read_available(self) -> None:
        """Emit every complete line currently buffered in the device."""
        device = self._device
        while device.isReadable() and device.canReadLine():
            data = device.readLine()
            if isinstance(data, QByteArray):
                data = data.data()
            line = simplify(data.decode("utf-8", errors="replace"))
            self.line_received.emit(line)

    def detach_close_notification(self) -> None:
        """Stop reporting the end of the read channel."""
        if not self._watching_close:
            return
        self._watching_close = False
        self._device.readChannelFinished.disconnect(self._on_read_channel_finished)

    def _on_read_channel_finished(self) -> None:
        if not self._watching_close:
            return
        self._watching_close = False
        self.transport_closed.emit()
