"""
Default fill algorithm: copy a flat mapping onto a freshly built target.

Record-like targets (RecordFillable) receive the whole mapping through
fill_from() and own whatever filtering they do. Every other target gets
one setattr per key it declares; undeclared keys are dropped silently.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mapper_kernel.domain.fields import assignable_fields
from mapper_kernel.domain.protocols import RecordFillable


@dataclass(frozen=True)
class FillReport:
    """What one fill did, for logging and tests."""

    delegated: bool
    assigned: tuple[str, ...] = ()
    dropped: tuple[str, ...] = ()


def fill_target(target: Any, attributes: Mapping[str, Any]) -> tuple[Any, FillReport]:
    """
    Fill ``target`` from ``attributes``.

    Postconditions:
        - RecordFillable targets: fill_from() result (or the target when it
          returns None); report.delegated is True.
        - Other targets: each declared key overwrites whatever the
          constructor set; undeclared keys are listed in report.dropped.
    """
    if isinstance(target, RecordFillable):
        result = target.fill_from(attributes)
        return (target if result is None else result), FillReport(delegated=True)

    declared = assignable_fields(target)
    assigned: list[str] = []
    dropped: list[str] = []
    for key, value in attributes.items():
        if isinstance(key, str) and key in declared:
            setattr(target, key, value)
            assigned.append(key)
        else:
            dropped.append(str(key))
    return target, FillReport(
        delegated=False,
        assigned=tuple(assigned),
        dropped=tuple(dropped),
    )
