"""Pluggy hook namespace and engine observer specifications."""

from __future__ import annotations

import pluggy

from nodecrawl.types import ExecutionSummary

NODECRAWL_HOOK_NAMESPACE = "nodecrawl"
hookspec = pluggy.HookspecMarker(NODECRAWL_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(NODECRAWL_HOOK_NAMESPACE)


class NodeCrawlHookSpecs:
    """Observer contract for engine diagnostics."""

    @hookspec
    def record_summary(self, summary: ExecutionSummary) -> None:
        """Record the execution summary of one process call."""

    @hookspec
    def on_error(self, stage: str, error: Exception, summary: ExecutionSummary) -> None:
        """Observe a runtime failure contained by the engine."""
