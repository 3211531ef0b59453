"""
Run queue for a single MLFQ priority tier.

Insertion is always at the tail. Removal takes either the tail (LIFO,
the default dispatch order) or the head (FIFO).
"""

from __future__ import annotations

from collections import deque
from typing import Iterator

from .constants import DispatchOrder
from .process import Process


class Tier:
    """Ordered collection of processes sharing one priority level."""

    __slots__ = ("index", "_queue")

    def __init__(self, index: int) -> None:
        self.index = index
        self._queue: deque[Process] = deque()

    def enqueue(self, process: Process) -> None:
        self._queue.append(process)

    def dequeue(self, order: DispatchOrder = DispatchOrder.LIFO) -> Process | None:
        """Remove and return the next process per ``order``, or None when empty."""
        if not self._queue:
            return None
        if order is DispatchOrder.FIFO:
            return self._queue.popleft()
        return self._queue.pop()

    def peek(self, order: DispatchOrder = DispatchOrder.LIFO) -> Process | None:
        """Return the process dequeue() would pick, without removing it."""
        if not self._queue:
            return None
        if order is DispatchOrder.FIFO:
            return self._queue[0]
        return self._queue[-1]

    def drain(self) -> list[Process]:
        """Remove every process, tail first."""
        drained: list[Process] = []
        while self._queue:
            drained.append(self._queue.pop())
        return drained

    def empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[Process]:
        return iter(self._queue)

    def __getitem__(self, index: int) -> Process:
        return self._queue[index]

    def __repr__(self) -> str:
        return f"Tier({self.index}, {list(self._queue)!r})"
