"""Two-phase crawl loop: middleware pass, then node-graph walk."""

from __future__ import annotations

import inspect
from typing import Any

from loguru import logger

from nodecrawl.cancellation import CancellationToken
from nodecrawl.errors import CrawlLimitExceededError, InvalidNodeResultError, ProcessCancelledError, UnitNotFoundError
from nodecrawl.nodes import Middleware
from nodecrawl.registry import Resolver
from nodecrawl.trace import ExecutionChain
from nodecrawl.types import Buffer, Completed, Output, Passthrough, Prolonged, UnitRef, unit_key


class Crawler:
    """Drive one buffer through middleware and units until a unit completes.

    The crawler holds no per-call state; the buffer, token and chain are
    passed to ``crawl`` so concurrent calls stay independent. A step is
    appended to the chain before it runs, so the chain also names the step
    that raised.
    """

    def __init__(self, resolver: Resolver, *, max_hops: int | None = None) -> None:
        self._resolver = resolver
        self._max_hops = max_hops

    async def crawl(
        self,
        start: UnitRef,
        buffer: Buffer,
        token: CancellationToken,
        chain: ExecutionChain,
    ) -> Output:
        current: UnitRef = start
        for entry in self._resolver.middlewares():
            token.raise_if_cancelled()
            key, middleware = _middleware_entry(entry)
            if not await _maybe_await(middleware.should_run(buffer)):
                continue
            chain.append(key)
            result = await _invoke(key, middleware, buffer, token, chain)
            logger.debug("crawl.middleware.run key={} result={}", key, type(result).__name__)
            if isinstance(result, Completed):
                return result.output
            if isinstance(result, Prolonged):
                current = result.next
                buffer = result.buffer
                break
            if isinstance(result, Passthrough):
                buffer = result.buffer
                continue
            raise InvalidNodeResultError(key, result)

        return await self._walk(current, buffer, token, chain)

    async def _walk(
        self,
        current: UnitRef,
        buffer: Buffer,
        token: CancellationToken,
        chain: ExecutionChain,
    ) -> Output:
        hops = 0
        while True:
            if self._max_hops is not None and hops >= self._max_hops:
                raise CrawlLimitExceededError(self._max_hops)
            token.raise_if_cancelled()
            key = unit_key(current)
            node = self._resolver.resolve(current)
            if node is None:
                raise UnitNotFoundError(key)
            chain.append(key)
            result = await _invoke(key, node, buffer, token, chain)
            hops += 1
            logger.debug("crawl.unit.run key={} result={}", key, type(result).__name__)
            if isinstance(result, Completed):
                return result.output
            if isinstance(result, Prolonged):
                current = result.next
                buffer = result.buffer
                continue
            # Passthrough is middleware-only.
            raise InvalidNodeResultError(key, result)


async def _invoke(key: str, step: Any, buffer: Buffer, token: CancellationToken, chain: ExecutionChain) -> Any:
    try:
        return await _maybe_await(step.invoke(buffer, token))
    except ProcessCancelledError:
        raise
    except Exception:
        chain.fail(key)
        raise


def _middleware_entry(entry: tuple[str, Middleware] | Middleware) -> tuple[str, Middleware]:
    if isinstance(entry, tuple):
        return entry
    return unit_key(type(entry)), entry


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
