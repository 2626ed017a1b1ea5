# site_mapper/crawler/frontier.py
"""
Visited set and frontier for the crawl orchestrator.
"""
from __future__ import annotations

import asyncio
import threading
from typing import Iterable, Iterator, Literal, Set, Tuple

__all__ = ("VisitedSet", "Frontier", "Strategy")

Strategy = Literal["dfs", "bfs"]


class VisitedSet:
    """Normalized URLs already dispatched to the renderer."""

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = threading.Lock()

    def mark_visited(self, url: str) -> bool:
        """Add *url*; return False if it was already present."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._urls))


class Frontier:
    """
    Work list of ``(url, depth)`` pairs waiting to be visited.

    ``dfs`` pops the most recently pushed entry; siblings given to
    :meth:`extend` are pushed in reverse so they come out in their original
    order. ``bfs`` is a plain FIFO. Both support ``task_done``/``join`` like
    :class:`asyncio.Queue`.
    """

    def __init__(self, strategy: Strategy = "dfs") -> None:
        if strategy not in ("dfs", "bfs"):
            raise ValueError(f"unknown crawl strategy: {strategy!r}")
        self.strategy = strategy
        self._queue: asyncio.Queue[Tuple[str, int]] = (
            asyncio.LifoQueue() if strategy == "dfs" else asyncio.Queue()
        )

    def push(self, url: str, depth: int) -> None:
        self._queue.put_nowait((url, depth))

    def extend(self, urls: Iterable[str], depth: int) -> None:
        items = list(urls)
        if self.strategy == "dfs":
            items.reverse()
        for url in items:
            self.push(url, depth)

    async def pop(self) -> Tuple[str, int]:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def drain(self) -> int:
        """Discard every pending entry; return how many were dropped."""
        dropped = 0
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return dropped
            self._queue.task_done()
            dropped += 1

    def __len__(self) -> int:
        return self._queue.qsize()
