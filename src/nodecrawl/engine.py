"""Process orchestrator: the public entry point of nodecrawl."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

import pluggy
from loguru import logger

from nodecrawl.cancellation import CancellationToken
from nodecrawl.config import EngineSettings, load_settings
from nodecrawl.crawler import Crawler
from nodecrawl.errors import ConfigurationError, EndpointNotFoundError, InvalidInputError, ProcessCancelledError
from nodecrawl.hook_runtime import HookRuntime
from nodecrawl.hookspecs import NODECRAWL_HOOK_NAMESPACE, NodeCrawlHookSpecs
from nodecrawl.recorder import RECORDER_PLUGIN_NAME, LoguruSummaryRecorder
from nodecrawl.registry import MiddlewareFactory, NodeFactory, Resolver, UnitRegistry
from nodecrawl.trace import ExecutionChain
from nodecrawl.types import Buffer, EngineInput, ExecutionSummary, Output, ProcessOutcome, UnitRef, unit_key

InputMapper = Callable[[Any], tuple[UnitRef, Buffer]]
OutputMapper = Callable[[Output], Any]

UNMAPPED_ENDPOINT = "<unmapped>"


class Engine:
    """Route a buffer from an endpoint through middleware and units.

    The engine is long-lived and may be shared by concurrent callers; every
    piece of per-call state lives inside ``run``.
    """

    def __init__(
        self,
        resolver: Resolver | None = None,
        *,
        input_mapper: InputMapper | None = None,
        output_mapper: OutputMapper | None = None,
        settings: EngineSettings | None = None,
        plugins: Iterable[object] = (),
    ) -> None:
        self.settings = settings or load_settings()
        self._resolver: Resolver = resolver if resolver is not None else UnitRegistry()
        self._input_mapper = input_mapper
        self._output_mapper = output_mapper
        self._crawler = Crawler(self._resolver, max_hops=self.settings.max_hops)
        self._plugin_manager = pluggy.PluginManager(NODECRAWL_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(NodeCrawlHookSpecs)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        if self.settings.record_summaries:
            self._plugin_manager.register(LoguruSummaryRecorder(), name=RECORDER_PLUGIN_NAME)
        for plugin in plugins:
            self.register_plugin(plugin)

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        self._plugin_manager.register(plugin, name=name)

    def add_unit(self, ref: UnitRef, factory: NodeFactory | None = None) -> Engine:
        self._registry().add_unit(ref, factory)
        return self

    def add_endpoint(self, ref: UnitRef, endpoint_id: str | None = None, factory: NodeFactory | None = None) -> Engine:
        self._registry().add_endpoint(ref, endpoint_id, factory)
        return self

    def add_middleware(self, ref: UnitRef, factory: MiddlewareFactory | None = None) -> Engine:
        self._registry().add_middleware(ref, factory)
        return self

    async def process(self, request: Any, token: CancellationToken | None = None) -> Output | None:
        """Run one process and return its output, or None on a contained failure."""

        outcome = await self.run(request, token)
        return outcome.output

    async def run(self, request: Any, token: CancellationToken | None = None) -> ProcessOutcome:
        """Run one process and return the output together with its summary.

        Configuration errors (including an unmappable request) and
        cancellation propagate. Any other exception, from the input mapper
        onwards, is logged with the execution trace and reported as
        ``has_output=False``. A summary is recorded either way.
        """

        active_token = token or CancellationToken()
        endpoint = UNMAPPED_ENDPOINT
        chain = ExecutionChain()
        started_at = datetime.now(UTC)
        started = time.perf_counter()
        output: Output = None
        success = False
        cancelled = False
        error: str | None = None
        failure: Exception | None = None
        summary: ExecutionSummary | None = None

        try:
            endpoint_id, buffer = self._map_input(request)
            endpoint = unit_key(endpoint_id)
            with logger.contextualize(endpoint=endpoint):
                active_token.raise_if_cancelled()
                start = self._resolver.resolve_endpoint(endpoint_id)
                if start is None:
                    raise EndpointNotFoundError(endpoint)
                output = await self._crawler.crawl(start, buffer, active_token, chain)
                if self._output_mapper is not None:
                    output = self._output_mapper(output)
            success = True
        except ConfigurationError as exc:
            error = str(exc)
            raise
        except ProcessCancelledError as exc:
            cancelled = True
            error = str(exc)
            raise
        except asyncio.CancelledError:
            cancelled = True
            error = "task cancelled"
            raise
        except Exception as exc:
            output = None
            failure = exc
            error = f"{type(exc).__name__}: {exc}"
            logger.opt(exception=exc).error(
                "engine.process.failed endpoint={} failed_at={} trace={}",
                endpoint,
                chain.failed_at or "-",
                chain.render(),
            )
        finally:
            chain.close()
            summary = ExecutionSummary(
                endpoint=endpoint,
                started_at=started_at,
                duration_ms=(time.perf_counter() - started) * 1000,
                success=success,
                cancelled=cancelled,
                trace=list(chain.entries),
                error=error,
                failed_at=chain.failed_at,
            )
            await self._hook_runtime.notify("record_summary", summary=summary)

        if failure is not None:
            await self._hook_runtime.notify("on_error", stage="process", error=failure, summary=summary)

        return ProcessOutcome(output=output, has_output=success, summary=summary)

    def hook_report(self) -> dict[str, list[str]]:
        """Return hook implementation summary for diagnostics."""

        return self._hook_runtime.hook_report()

    def _registry(self) -> UnitRegistry:
        if not isinstance(self._resolver, UnitRegistry):
            raise TypeError(f"Registration needs a UnitRegistry, got {type(self._resolver).__name__}")
        return self._resolver

    def _map_input(self, request: Any) -> tuple[UnitRef, Buffer]:
        if self._input_mapper is not None:
            return self._input_mapper(request)
        if isinstance(request, EngineInput):
            return request.endpoint_id, request.buffer
        raise InvalidInputError(request)
