"""nodecrawl - route a buffer through middleware and units until one completes."""

from nodecrawl.cancellation import CancellationToken
from nodecrawl.config import EngineSettings, load_settings
from nodecrawl.engine import Engine
from nodecrawl.errors import (
    ConfigurationError,
    CrawlLimitExceededError,
    EndpointNotFoundError,
    InvalidInputError,
    InvalidNodeResultError,
    NodeAlreadyExistsError,
    NodeCrawlError,
    ProcessCancelledError,
    UnitNotFoundError,
)
from nodecrawl.hookspecs import hookimpl
from nodecrawl.logging_utils import configure_logging
from nodecrawl.nodes import EndpointNode, Middleware, Node
from nodecrawl.registry import Resolver, UnitRegistry
from nodecrawl.trace import ExecutionChain
from nodecrawl.types import (
    Completed,
    EngineInput,
    ExecutionSummary,
    NodeResult,
    Passthrough,
    ProcessOutcome,
    Prolonged,
    StartRequest,
)

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "Completed",
    "ConfigurationError",
    "CrawlLimitExceededError",
    "EndpointNode",
    "EndpointNotFoundError",
    "Engine",
    "EngineInput",
    "EngineSettings",
    "ExecutionChain",
    "ExecutionSummary",
    "InvalidInputError",
    "InvalidNodeResultError",
    "Middleware",
    "Node",
    "NodeAlreadyExistsError",
    "NodeCrawlError",
    "NodeResult",
    "Passthrough",
    "ProcessCancelledError",
    "ProcessOutcome",
    "Prolonged",
    "Resolver",
    "StartRequest",
    "UnitNotFoundError",
    "UnitRegistry",
    "configure_logging",
    "hookimpl",
    "load_settings",
]
