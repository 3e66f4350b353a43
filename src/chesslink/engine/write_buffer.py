"""FIFO of outbound lines held back while the engine cannot accept them."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator


class WriteBuffer:
    """Ordered queue of raw command lines.

    The owner decides when lines are held; the buffer only guarantees
    that they come out in the order they went in.
    """

    __slots__ = ("_lines",)

    def __init__(self) -> None:
        self._lines: deque[str] = deque()

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def append(self, line: str) -> None:
        self._lines.append(line)

    def clear(self) -> None:
        self._lines.clear()

    def take_all(self) -> list[str]:
        """Detach and return every queued line.

        The buffer is empty before the caller sends anything, so lines
        written while draining are never mixed into this batch.
        """
        lines = list(self._lines)
        self._lines.clear()
        return lines
