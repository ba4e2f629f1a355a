"""
Per-build state for lazy reference resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import TypeAdapter

logger = structlog.get_logger(__name__)


@dataclass
class BuildContext:
    """Registry of built annotations, keyed by node id.

    One context belongs to exactly one ``build`` call. Lazy validators keep
    a reference to it, so lookups made while validating data see the
    registry as it was when the whole tree finished building.
    """

    registry: dict[str, Any] = field(default_factory=dict)
    # Lazy node id -> id it refers to
    links: dict[str, str] = field(default_factory=dict)
    _adapters: dict[str, TypeAdapter] = field(default_factory=dict)

    def register(self, item_id: str, annotation: Any, lazy_ref: str | None = None) -> None:
        """Record the annotation built for ``item_id``; the first registration wins."""
        if item_id in self.registry:
            return
        self.registry[item_id] = annotation
        if lazy_ref:
            self.links[item_id] = lazy_ref

    def target_of(self, item_id: str) -> str | None:
        """Follow lazy links from ``item_id`` to a concrete node id; None on a cycle."""
        seen = set()
        while item_id in self.links:
            if item_id in seen:
                return None
            seen.add(item_id)
            item_id = self.links[item_id]
        return item_id

    def resolve(self, item_id: str) -> TypeAdapter | None:
        """Return a validator for ``item_id``, or None if it leads nowhere."""
        adapter = self._adapters.get(item_id)
        if adapter is not None:
            return adapter
        target = self.target_of(item_id)
        if target is None:
            logger.debug("lazy reference cycle", ref_id=item_id)
            return None
        if target not in self.registry:
            return None
        adapter = TypeAdapter(self.registry[target])
        self._adapters[item_id] = adapter
        return adapter


class LazyReference:
    """Validator that defers to another node's schema at validation time."""

    def __init__(self, context: BuildContext, ref_id: str):
        self.context = context
        self.ref_id = ref_id

    def validate(self, value: Any) -> Any:
        adapter = self.context.resolve(self.ref_id)
        if adapter is None:
            logger.debug("lazy reference unresolved, accepting value", ref_id=self.ref_id)
            return value
        return adapter.validate_python(value)

    def __repr__(self) -> str:
        return f"LazyReference({self.ref_id!r})"
