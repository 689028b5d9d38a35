"""Default summary recorder: writes execution summaries to loguru."""

from __future__ import annotations

from loguru import logger

from nodecrawl.hookspecs import hookimpl
from nodecrawl.types import ExecutionSummary

RECORDER_PLUGIN_NAME = "builtin:loguru-recorder"


class LoguruSummaryRecorder:
    @hookimpl
    def record_summary(self, summary: ExecutionSummary) -> None:
        trace = " -> ".join(summary.trace) or "<empty>"
        if summary.success:
            logger.info(
                "engine.process.end endpoint={} success=True duration={:.3f}ms trace={}",
                summary.endpoint,
                summary.duration_ms,
                trace,
            )
            return
        logger.warning(
            "engine.process.end endpoint={} success=False cancelled={} duration={:.3f}ms trace={} failed_at={} error={}",
            summary.endpoint,
            summary.cancelled,
            summary.duration_ms,
            trace,
            summary.failed_at or "-",
            summary.error,
        )
