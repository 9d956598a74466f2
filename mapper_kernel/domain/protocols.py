"""
Capability protocols consumed by the mapping engine.

Contract:
    The engine never checks concrete types of its collaborators. Each
    capability below is tested once with ``isinstance`` against a
    runtime-checkable Protocol:

    - ExportsAll      -- structured payload; checked once at construction.
    - RecordFillable  -- record/model-like target; checked once per fill.
    - NamedMapper     -- resolved mapper object; checked once per dispatch.
    - Instantiator    -- builds a target (or mapper) from a type or name.

Architecture: mapper_kernel/domain. ZERO I/O, no imports from mapping/.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ExportsAll(Protocol):
    """A source that can export all of its fields as one flat mapping."""

    def export_all(self) -> Mapping[str, Any]:
        """Return every input field as a flat key -> value mapping."""
        ...


@runtime_checkable
class RecordFillable(Protocol):
    """A target that performs its own bulk attribute assignment."""

    def fill_from(self, attributes: Mapping[str, Any]) -> Any:
        """Assign attributes from a flat mapping and return self."""
        ...


@runtime_checkable
class NamedMapper(Protocol):
    """A custom mapper resolved from a type or name."""

    def map(self, item: Any, target_type: Any) -> Any:
        """Produce the mapped result for one source item."""
        ...


@runtime_checkable
class Instantiator(Protocol):
    """Constructs instances of named types, resolving their dependencies."""

    def construct(self, target: Any) -> Any:
        """Return a new (or shared) instance of ``target``."""
        ...
