"""
JSON codec for the export paths. ZERO I/O.

encode_json() is strict: anything the encoder cannot represent raises
SerializationError instead of being stringified or dropped. Besides JSON's
native types it accepts the values the kernel's log encoder accepts (UUID,
date/datetime/time, Decimal, Enum).

parse_json_text() decodes a text source and reports where it broke.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from mapper_kernel.exceptions import MalformedSourceError, SerializationError


class _StrictJSONEncoder(json.JSONEncoder):
    """Extended types only; everything else is a hard failure."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, (datetime, date, time)):
            return obj.isoformat()
        if isinstance(obj, Decimal):
            if not obj.is_finite():
                raise ValueError(f"Out of range Decimal value: {obj}")
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def _check_keys(data: Any, path: str = "$", active: set[int] | None = None) -> None:
    """
    Reject non-string mapping keys anywhere in ``data``.

    json.dumps would coerce int/float/bool/None keys to strings, which
    changes the exported data and can produce duplicate keys.
    """
    if not isinstance(data, (Mapping, list, tuple)):
        return
    active = set() if active is None else active
    marker = id(data)
    if marker in active:
        raise SerializationError(f"circular reference at {path}")
    active.add(marker)
    try:
        if isinstance(data, Mapping):
            for key, value in data.items():
                if not isinstance(key, str):
                    raise SerializationError(
                        f"key {key!r} at {path} is {type(key).__name__}, keys must be str"
                    )
                _check_keys(value, f"{path}.{key}", active)
        else:
            for index, value in enumerate(data):
                _check_keys(value, f"{path}[{index}]", active)
    finally:
        active.discard(marker)


def encode_json(
    data: Any,
    *,
    ensure_ascii: bool = False,
    sort_keys: bool = False,
    indent: int | None = None,
) -> str:
    """
    Serialize ``data`` to JSON text.

    Raises:
        SerializationError: unsupported value, non-string key, circular
            reference, NaN or Infinity.
    """
    try:
        _check_keys(data)
        return json.dumps(
            data,
            cls=_StrictJSONEncoder,
            ensure_ascii=ensure_ascii,
            sort_keys=sort_keys,
            indent=indent,
            allow_nan=False,
            check_circular=True,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(str(exc)) from exc


def parse_json_text(text: str | bytes | bytearray) -> Any:
    """
    Decode a JSON text source.

    Raises:
        MalformedSourceError: if the text is not valid JSON.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedSourceError(exc.msg, exc.lineno, exc.colno, exc.pos) from exc
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(exc.reason, 1, exc.start + 1, exc.start) from exc
