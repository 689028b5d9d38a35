"""Exception types raised by the nodecrawl engine."""

from __future__ import annotations

from typing import Any


class NodeCrawlError(Exception):
    """Base exception for nodecrawl."""


class ConfigurationError(NodeCrawlError):
    """Base exception for registration and wiring defects.

    These always propagate out of ``Engine.process``; the registered graph
    does not match what is being requested.
    """


class EndpointNotFoundError(ConfigurationError):
    """Raised when the requested entry point is not a registered endpoint."""

    def __init__(self, endpoint_id: str) -> None:
        super().__init__(f"Endpoint '{endpoint_id}' not found or not registered")
        self.endpoint_id = endpoint_id


class UnitNotFoundError(ConfigurationError):
    """Raised when a unit reference cannot be resolved."""

    def __init__(self, unit_key: str) -> None:
        super().__init__(f"Unit '{unit_key}' not found or not registered")
        self.unit_key = unit_key


class NodeAlreadyExistsError(ConfigurationError):
    """Raised when a unit key or endpoint id is registered twice."""

    def __init__(self, key: str) -> None:
        super().__init__(f"'{key}' was already added to this registry")
        self.key = key


class CrawlLimitExceededError(ConfigurationError):
    """Raised when a node walk exceeds the configured hop limit."""

    def __init__(self, max_hops: int) -> None:
        super().__init__(f"Node walk exceeded {max_hops} hops; the unit graph likely has a cycle")
        self.max_hops = max_hops


class ProcessCancelledError(NodeCrawlError):
    """Raised when a process observes a cancelled token."""

    def __init__(self, message: str = "Cancellation was requested for this process") -> None:
        super().__init__(message)


class InvalidNodeResultError(NodeCrawlError):
    """Raised when a unit returns something other than Completed or Prolonged."""

    def __init__(self, unit_key: str, result: Any) -> None:
        super().__init__(f"Unit '{unit_key}' returned an invalid result: {type(result).__name__}")
        self.unit_key = unit_key
        self.result = result


class InvalidInputError(ConfigurationError):
    """Raised when a request cannot be mapped to an endpoint and buffer."""

    def __init__(self, request: Any) -> None:
        super().__init__(f"Cannot map {type(request).__name__} to an endpoint and buffer; pass input_mapper")
        self.request = request
