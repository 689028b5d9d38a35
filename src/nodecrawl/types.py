"""Result variants and framework-neutral data types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

Buffer = Any
Output = Any
UnitRef = str | Enum | type


def unit_key(ref: UnitRef) -> str:
    """Normalize a unit reference to its registry key.

    Classes use a ``unit_id`` declared on the class itself, else the class
    name; subclasses do not inherit the parent's id.
    """

    if isinstance(ref, type):
        explicit = vars(ref).get("unit_id")
        return str(explicit) if explicit else ref.__name__
    if isinstance(ref, Enum):
        return str(ref.value)
    return str(ref)


@dataclass(frozen=True)
class Completed:
    """Terminal result carrying the final output."""

    output: Output


@dataclass(frozen=True)
class Prolonged:
    """Non-terminal result naming the next unit to run."""

    next: UnitRef
    buffer: Buffer


@dataclass(frozen=True)
class Passthrough:
    """Middleware-only result: continue with the updated buffer."""

    buffer: Buffer


NodeResult = Completed | Prolonged | Passthrough


@runtime_checkable
class EngineInput(Protocol):
    """Input shape accepted by ``Engine.process`` without a custom mapper."""

    @property
    def endpoint_id(self) -> UnitRef: ...

    @property
    def buffer(self) -> Buffer: ...


@dataclass(frozen=True)
class StartRequest:
    """Plain ``EngineInput`` implementation."""

    endpoint_id: UnitRef
    buffer: Buffer


class ExecutionSummary(BaseModel):
    """Diagnostic record of one process call."""

    endpoint: str
    started_at: datetime
    duration_ms: float = 0.0
    success: bool = False
    cancelled: bool = False
    trace: list[str] = Field(default_factory=list)
    error: str | None = None
    failed_at: str | None = None


@dataclass(frozen=True)
class ProcessOutcome:
    """Result of ``Engine.run``.

    ``has_output`` is False when a runtime failure was contained, which keeps
    a failed process apart from one that completed with ``None``.
    """

    output: Output
    has_output: bool
    summary: ExecutionSummary
