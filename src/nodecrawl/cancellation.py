"""Cooperative cancellation token threaded through every invocation."""

from __future__ import annotations

import asyncio

from nodecrawl.errors import ProcessCancelledError


class CancellationToken:
    """Explicit cancellation signal for one process call."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None

    @classmethod
    def cancelled_token(cls) -> CancellationToken:
        token = cls()
        token.cancel()
        return token

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise ProcessCancelledError()

    async def wait(self) -> None:
        """Suspend until ``cancel`` is called."""

        if self._cancelled:
            return
        if self._event is None:
            self._event = asyncio.Event()
        await self._event.wait()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
