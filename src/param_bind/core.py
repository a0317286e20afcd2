"""Core abstractions: bind context, dispatch registry and the Binder.

This module owns every *interface* of the dispatcher.  Concrete matchers live
in ``matchers``, concrete handlers in the ``handlers`` sub-package, and the
default wiring in ``factory``.

Execution flow (``Binder.bind`` entry point)::

    (destination, request)
      │
      ▼
    BindRegistry.resolve(request)          ← first match by priority
      │
      ▼
    handler.execute(ctx)
        ├─ ctx.binder.populator.populate(ctx.dest, params)   query / form
        └─ codec.decode(ctx.request.body, ctx.dest)          json / xml
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .errors import DispatchError
from .populator import StructPopulator, ValueSource
from .request import RequestContext


# ─────────────────────────────────────────────────────────────────────────────
# BindContext
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class BindContext:
    """State of one ``bind`` call.

    Attributes:
        request:  The request being bound from.
        dest:     The destination record; mutated in place by the handler.
        binder:   Back-reference to the owning Binder (gives access to
                  ``binder.populator``).
        metadata: Arbitrary dict for passing side-channel data between
                  matchers and handlers within one call.
    """

    request: RequestContext
    dest: Any
    binder: 'Binder'
    metadata: dict[str, Any] = field(default_factory=dict)


# ─────────────────────────────────────────────────────────────────────────────
# Dispatch — matcher / handler tree
# ─────────────────────────────────────────────────────────────────────────────


class BindMatcher(ABC):
    """Predicate: should this node handle *request*?

    Examples::

        MethodMatcher({"GET"})                  → request.method in {"GET"}
        MediaTypeMatcher("application/json")    → Content-Type prefix check
        AlwaysMatcher()                         → True
    """

    @abstractmethod
    def matches(self, request: RequestContext) -> bool: ...


class BindHandler(ABC):
    """Populate ``ctx.dest`` from ``ctx.request`` (or reject the request)."""

    @abstractmethod
    def execute(self, ctx: BindContext) -> None: ...


@dataclass
class BindNode:
    name: str
    priority: int
    matcher: BindMatcher
    handler: BindHandler


class BindRegistry:
    """Flat, priority-ordered registry with first-match dispatch.

    ::

        handler = registry.resolve(request)
    """

    def __init__(self) -> None:
        self._nodes: List[BindNode] = []

    def register(self, node: BindNode) -> None:
        """Add a node."""
        self._nodes.append(node)

    def resolve(self, request: RequestContext) -> Optional[BindHandler]:
        """Return the handler of the highest-priority matching node, if any."""
        for node in self.nodes():
            if node.matcher.matches(request):
                return node.handler
        return None

    def nodes(self) -> List[BindNode]:
        """Return nodes sorted by descending priority (stable for ties)."""
        return sorted(self._nodes, key=lambda n: n.priority, reverse=True)


# ─────────────────────────────────────────────────────────────────────────────
# Binder — public entry point
# ─────────────────────────────────────────────────────────────────────────────


class Binder:
    """Top-level orchestrator.

    * ``bind``        – dispatch on method / content type, then populate or
                        decode into the destination.
    * ``bind_values`` – populate directly from a value source, skipping
                        dispatch.

    Neither method keeps a reference to the destination after returning.
    """

    def __init__(self, *, registry: BindRegistry, populator: StructPopulator) -> None:
        self.registry = registry
        self.populator = populator

    def bind(self, dest: Any, request: RequestContext) -> None:
        handler = self.registry.resolve(request)
        if handler is None:
            raise DispatchError(request.method)
        handler.execute(BindContext(request=request, dest=dest, binder=self))

    def bind_values(self, dest: Any, values: ValueSource) -> None:
        self.populator.populate(dest, values)
