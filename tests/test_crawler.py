from __future__ import annotations

import pytest

from flow_nodes import (
    Exploding,
    Failing,
    FlowBuffer,
    Ping,
    RedirectLow,
    ShortCircuit,
    Start,
    Threshold,
    Tripling,
    build_registry,
)
from nodecrawl import (
    CancellationToken,
    CrawlLimitExceededError,
    ExecutionChain,
    InvalidNodeResultError,
    Middleware,
    UnitNotFoundError,
)
from nodecrawl.crawler import Crawler


@pytest.mark.asyncio
async def test_crawl_walks_from_start_unit() -> None:
    crawler = Crawler(build_registry())
    chain = ExecutionChain()

    output = await crawler.crawl(Start, FlowBuffer(value=5), CancellationToken(), chain)

    assert output == 30
    assert chain.entries == ("Start", "Double", "Final")


@pytest.mark.asyncio
async def test_crawl_passes_middleware_buffer_to_nodes() -> None:
    crawler = Crawler(build_registry(Threshold, Tripling))
    chain = ExecutionChain()

    output = await crawler.crawl("Start", FlowBuffer(value=5), CancellationToken(), chain)

    assert output == (((5 + 5) * 3) + 10) * 2
    assert chain.entries == ("Threshold", "Tripling", "Start", "Double", "Final")


@pytest.mark.asyncio
async def test_crawl_short_circuit_returns_middleware_output() -> None:
    crawler = Crawler(build_registry(ShortCircuit))
    chain = ExecutionChain()

    output = await crawler.crawl("Start", FlowBuffer(value=4), CancellationToken(), chain)

    assert output.status == "ShortCircuited"
    assert chain.entries == ("ShortCircuit",)


@pytest.mark.asyncio
async def test_crawl_redirect_skips_remaining_middleware() -> None:
    crawler = Crawler(build_registry(RedirectLow, Threshold))
    buffer = FlowBuffer(value=40)
    chain = ExecutionChain()

    output = await crawler.crawl("Start", buffer, CancellationToken(), chain)

    assert output.final_value == 30
    assert chain.entries == ("RedirectLow", "LowValue")
    assert "[MW] Threshold" not in buffer.history


@pytest.mark.asyncio
async def test_crawl_uses_buffer_carried_by_result() -> None:
    class Replacing(Middleware):
        async def invoke(self, buffer, token):
            return self.passthrough(FlowBuffer(value=100))

    registry = build_registry()
    registry.add_middleware(Replacing)
    original = FlowBuffer(value=1)

    output = await Crawler(registry).crawl("Start", original, CancellationToken(), ExecutionChain())

    assert output == (100 + 10) * 2
    assert original.history == []


@pytest.mark.asyncio
async def test_crawl_rejects_unknown_middleware_result() -> None:
    class Confused(Middleware):
        def invoke(self, buffer, token):
            return "not a result"

    registry = build_registry()
    registry.add_middleware(Confused)

    with pytest.raises(InvalidNodeResultError) as excinfo:
        await Crawler(registry).crawl("Start", FlowBuffer(value=1), CancellationToken(), ExecutionChain())

    assert excinfo.value.unit_key == "Confused"


@pytest.mark.asyncio
async def test_crawl_unknown_start_raises_unit_not_found() -> None:
    with pytest.raises(UnitNotFoundError):
        await Crawler(build_registry()).crawl("Nope", FlowBuffer(value=1), CancellationToken(), ExecutionChain())


@pytest.mark.asyncio
async def test_crawl_hop_limit_stops_cycles() -> None:
    crawler = Crawler(build_registry(), max_hops=6)
    buffer = FlowBuffer(value=0)
    chain = ExecutionChain()

    with pytest.raises(CrawlLimitExceededError) as excinfo:
        await crawler.crawl(Ping, buffer, CancellationToken(), chain)

    assert excinfo.value.max_hops == 6
    assert buffer.value == 6
    assert chain.entries == ("Ping", "Pong") * 3


@pytest.mark.asyncio
async def test_crawl_hop_limit_allows_exact_length_chain() -> None:
    crawler = Crawler(build_registry(), max_hops=3)

    assert await crawler.crawl(Start, FlowBuffer(value=5), CancellationToken(), ExecutionChain()) == 30


@pytest.mark.asyncio
async def test_crawl_short_circuit_does_not_build_later_middleware() -> None:
    built: list[str] = []

    def counting_threshold() -> Threshold:
        built.append("Threshold")
        return Threshold()

    registry = build_registry(ShortCircuit)
    registry.add_middleware(Threshold, counting_threshold)

    output = await Crawler(registry).crawl("Start", FlowBuffer(value=4), CancellationToken(), ExecutionChain())

    assert output.status == "ShortCircuited"
    assert built == []


@pytest.mark.asyncio
async def test_crawl_records_failing_unit_before_raising() -> None:
    chain = ExecutionChain()

    with pytest.raises(RuntimeError, match="simulated unit failure"):
        await Crawler(build_registry(Tripling)).crawl(Failing, FlowBuffer(value=1), CancellationToken(), chain)

    assert chain.entries == ("Tripling", "Failing")
    assert chain.failed_at == "Failing"


@pytest.mark.asyncio
async def test_crawl_records_failing_middleware_before_raising() -> None:
    chain = ExecutionChain()

    with pytest.raises(ValueError, match="middleware blew up"):
        await Crawler(build_registry(Exploding, Tripling)).crawl("Start", FlowBuffer(value=1), CancellationToken(), chain)

    assert chain.entries == ("Exploding",)
    assert chain.failed_at == "Exploding"
