"""Bounded FIFO admission for external calls."""

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from contextlib import suppress
from typing import Any, TypeVar

T = TypeVar("T")


class ConcurrencyGate:
    """Lets at most `limit` coroutines run at once; the rest wait in FIFO order.

    A finishing task hands its slot directly to the oldest live waiter, so a
    later arrival can never overtake an earlier one.
    """

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be >= 1, got {limit}")
        self._limit = limit
        self._active = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        return self._active

    @property
    def waiting(self) -> int:
        return sum(1 for waiter in self._waiters if not waiter.done())

    async def run(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Run `func(*args)` once a slot is free and release it afterwards."""
        await self._acquire()
        try:
            return await func(*args)
        finally:
            self._release()

    async def _acquire(self) -> None:
        if self._active < self._limit and not self._waiters:
            self._active += 1
            return
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # slot was already handed over
                self._release()
            with suppress(ValueError):
                self._waiters.remove(waiter)
            raise

    def _release(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._active -= 1
