"""Unit registry: the default resolver for the crawl loop."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from nodecrawl.errors import NodeAlreadyExistsError
from nodecrawl.nodes import Middleware, Node
from nodecrawl.types import UnitRef, unit_key

NodeFactory = Callable[[], Node]
MiddlewareFactory = Callable[[], Middleware]


class Resolver(Protocol):
    """Collaborator that turns unit references into runnable instances.

    ``middlewares`` may yield ``(key, instance)`` pairs or bare instances; a
    bare instance is keyed by its class.
    """

    def resolve(self, ref: UnitRef) -> Node | None: ...

    def resolve_endpoint(self, endpoint_id: UnitRef) -> str | None: ...

    def middlewares(self) -> Iterable[tuple[str, Middleware] | Middleware]: ...


@dataclass(frozen=True)
class UnitDescriptor:
    """Registered unit metadata and factory."""

    key: str
    factory: NodeFactory
    kind: str = "unit"


class UnitRegistry:
    """Explicit key-to-factory registry with transient instance lifetime."""

    def __init__(self) -> None:
        self._units: dict[str, UnitDescriptor] = {}
        self._endpoints: dict[str, str] = {}
        self._middlewares: list[tuple[str, MiddlewareFactory]] = []

    def add_unit(self, ref: UnitRef, factory: NodeFactory | None = None) -> UnitRegistry:
        key = unit_key(ref)
        if key in self._units:
            raise NodeAlreadyExistsError(key)
        self._units[key] = UnitDescriptor(key=key, factory=_factory_for(ref, factory))
        logger.debug("registry.unit.added key={}", key)
        return self

    def add_endpoint(
        self,
        ref: UnitRef,
        endpoint_id: str | None = None,
        factory: NodeFactory | None = None,
    ) -> UnitRegistry:
        """Register ``ref`` as an entry point.

        A unit that is already registered is only marked as an endpoint,
        unless a new factory is supplied for it.
        """

        key = unit_key(ref)
        external_id = endpoint_id or _declared_endpoint_id(ref) or key
        if external_id in self._endpoints:
            raise NodeAlreadyExistsError(external_id)
        if key in self._units:
            if factory is not None:
                raise NodeAlreadyExistsError(key)
            existing = self._units[key]
            self._units[key] = UnitDescriptor(key=key, factory=existing.factory, kind="endpoint")
        else:
            self._units[key] = UnitDescriptor(key=key, factory=_factory_for(ref, factory), kind="endpoint")
        self._endpoints[external_id] = key
        logger.debug("registry.endpoint.added key={} endpoint_id={}", key, external_id)
        return self

    def add_middleware(self, ref: UnitRef, factory: MiddlewareFactory | None = None) -> UnitRegistry:
        key = unit_key(ref)
        if any(existing == key for existing, _ in self._middlewares):
            raise NodeAlreadyExistsError(key)
        self._middlewares.append((key, _factory_for(ref, factory)))
        logger.debug("registry.middleware.added key={} position={}", key, len(self._middlewares) - 1)
        return self

    def has(self, ref: UnitRef) -> bool:
        return unit_key(ref) in self._units

    def resolve(self, ref: UnitRef) -> Node | None:
        descriptor = self._units.get(unit_key(ref))
        if descriptor is None:
            return None
        return descriptor.factory()

    def resolve_endpoint(self, endpoint_id: UnitRef) -> str | None:
        """Map an external id, or the key of an endpoint unit, to its unit key."""

        key = unit_key(endpoint_id)
        if key in self._endpoints:
            return self._endpoints[key]
        descriptor = self._units.get(key)
        if descriptor is not None and descriptor.kind == "endpoint":
            return key
        return None

    def middlewares(self) -> Iterator[tuple[str, Middleware]]:
        """Yield ``(key, instance)`` in registration order, building each on demand."""

        for key, factory in tuple(self._middlewares):
            yield key, factory()

    def unit_keys(self) -> list[str]:
        return sorted(self._units)

    def endpoint_ids(self) -> list[str]:
        return sorted(self._endpoints)

    def registration_report(self) -> dict[str, list[str]]:
        """Build a kind->keys mapping for diagnostics; middleware keep their order."""

        return {
            "endpoints": self.endpoint_ids(),
            "units": [key for key in self.unit_keys() if self._units[key].kind == "unit"],
            "middlewares": [key for key, _ in self._middlewares],
        }


def _factory_for(ref: UnitRef, factory: Callable[[], object] | None) -> Callable[[], object]:
    if factory is not None:
        return factory
    if isinstance(ref, type):
        return ref
    raise TypeError(f"A factory is required when registering '{unit_key(ref)}' by key")


def _declared_endpoint_id(ref: UnitRef) -> str | None:
    if isinstance(ref, type):
        declared = vars(ref).get("endpoint_id")
        return str(declared) if declared else None
    return None
