"""Unit, endpoint and middleware contracts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import ClassVar

from nodecrawl.cancellation import CancellationToken
from nodecrawl.types import Buffer, Completed, NodeResult, Output, Passthrough, Prolonged, UnitRef


class _ResultHelpers:
    @staticmethod
    def move_to(ref: UnitRef, buffer: Buffer) -> Prolonged:
        """Continue the walk at ``ref`` with ``buffer``."""
        return Prolonged(next=ref, buffer=buffer)

    @staticmethod
    def complete(output: Output) -> Completed:
        """Finish the whole process with ``output``."""
        return Completed(output=output)


class Node(_ResultHelpers, ABC):
    """One processing step.

    ``invoke`` may be a coroutine function or a plain function. Instances are
    created by the resolver for every invocation, so keep per-call state on
    the buffer.
    """

    unit_id: ClassVar[str | None] = None

    @abstractmethod
    def invoke(self, buffer: Buffer, token: CancellationToken) -> NodeResult | Awaitable[NodeResult]:
        """Consume the buffer and decide Completed or Prolonged."""


class EndpointNode(Node):
    """Node that external callers may use as an entry point."""

    endpoint_id: ClassVar[str | None] = None


class Middleware(_ResultHelpers, ABC):
    """Guarded pre-processing step run before the node walk."""

    unit_id: ClassVar[str | None] = None

    def should_run(self, buffer: Buffer) -> bool | Awaitable[bool]:
        return True

    @staticmethod
    def passthrough(buffer: Buffer) -> Passthrough:
        """Hand the buffer to the next middleware."""
        return Passthrough(buffer=buffer)

    @abstractmethod
    def invoke(self, buffer: Buffer, token: CancellationToken) -> NodeResult | Awaitable[NodeResult]:
        """Process the buffer; Completed short-circuits, Prolonged redirects."""
