"""
Custom mapper chain: entry resolution and dispatch.

An entry is one of:
    - a class, bound alias or dotted path ("named"): built by the
      Instantiator, must expose map(item, target_type);
    - an object already exposing map(item, target_type) ("resolved");
    - any other callable ("inline"): called as fn(engine, item).

Entries are validated only when dispatched, never when configured.

Two policies decide what a chain of several entries returns:
    LAST_WINS  -- every entry runs, in order; the last result is returned.
    FIRST_WINS -- the first entry's result is returned; later entries never run.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

from mapper_kernel.container import type_name
from mapper_kernel.domain.protocols import Instantiator, NamedMapper
from mapper_kernel.exceptions import ConfigurationError, MapperContractError
from mapper_kernel.logging_config import get_logger

logger = get_logger("mapping.chain")


class ChainPolicy(str, Enum):
    """Result policy for a chain of more than one mapper."""

    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"

    @classmethod
    def parse(cls, value: ChainPolicy | str) -> ChainPolicy:
        """Accept a member or its value; anything else is a ConfigurationError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                value, f"unknown chain policy, expected one of {[p.value for p in cls]}"
            ) from None


def _has_map(obj: Any) -> bool:
    return isinstance(obj, NamedMapper) and callable(obj.map)


def resolve_entry(
    entry: Any,
    instantiator: Instantiator,
) -> Callable[[Any, Any, Any], Any]:
    """
    Turn a chain entry into ``call(engine, item, target_type)``.

    Raises:
        MapperContractError: a named entry resolved to an object without map().
        ConfigurationError: the entry is neither named, resolved nor callable.
        InstantiationError: propagated from the Instantiator.
    """
    if isinstance(entry, (type, str)):
        mapper = instantiator.construct(entry)
        if not _has_map(mapper):
            raise MapperContractError(type_name(entry))
        return lambda engine, item, target_type: mapper.map(item, target_type)
    if _has_map(entry):
        return lambda engine, item, target_type: entry.map(item, target_type)
    if callable(entry):
        return lambda engine, item, target_type: entry(engine, item)
    raise ConfigurationError(
        entry, "a mapper must be a class, a name, an object with map() or a callable"
    )


def apply_chain(
    entries: Sequence[Any],
    policy: ChainPolicy,
    *,
    engine: Any,
    item: Any,
    target_type: Any,
    instantiator: Instantiator,
) -> Any:
    """Run ``entries`` against one item and return the result ``policy`` selects."""
    result: Any = None
    ran = 0
    for entry in entries:
        call = resolve_entry(entry, instantiator)
        result = call(engine, item, target_type)
        ran += 1
        if policy is ChainPolicy.FIRST_WINS:
            break
    logger.debug(
        "mapper_chain_applied",
        extra={"policy": policy.value, "configured": len(entries), "ran": ran},
    )
    return result
