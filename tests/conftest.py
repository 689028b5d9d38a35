from __future__ import annotations

from typing import Any

import pytest

from nodecrawl import Engine, EngineSettings, ExecutionSummary, hookimpl
from flow_nodes import build_registry


class SummaryCollector:
    def __init__(self) -> None:
        self.summaries: list[ExecutionSummary] = []
        self.errors: list[tuple[str, Exception]] = []

    @hookimpl
    def record_summary(self, summary: ExecutionSummary) -> None:
        self.summaries.append(summary)

    @hookimpl
    def on_error(self, stage: str, error: Exception) -> None:
        self.errors.append((stage, error))


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(_env_file=None)


@pytest.fixture
def collector() -> SummaryCollector:
    return SummaryCollector()


@pytest.fixture
def make_engine(settings: EngineSettings, collector: SummaryCollector):
    def _make(*middlewares: Any, **kwargs: Any) -> Engine:
        kwargs.setdefault("settings", settings)
        return Engine(build_registry(*middlewares), plugins=[collector], **kwargs)

    return _make
