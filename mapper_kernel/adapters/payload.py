"""
Structured request payload adapter.

FormPayload collects the input of an HTTP-style request (query string, form
body, JSON body) and exposes it through export_all(), so the engine treats
it as a structured payload and normalizes it to a flat mapping.

Body fields win over query fields with the same name.
Repeated query/form keys keep their last value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlsplit

from mapper_kernel.mapping.serialization import parse_json_text

_FORM_TYPE = "application/x-www-form-urlencoded"
_JSON_TYPE = "application/json"


def _normalize_keys(data: Mapping[Any, Any]) -> dict[str, Any]:
    """Keys as stripped strings; non-string keys are dropped."""
    return {k.strip(): v for k, v in data.items() if isinstance(k, str) and k.strip()}


@dataclass(frozen=True)
class FormPayload:
    """Immutable snapshot of a request's input."""

    method: str = "GET"
    path: str = "/"
    query: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    content_type: str | None = None

    @classmethod
    def create(
        cls,
        uri: str,
        method: str = "GET",
        data: Mapping[str, Any] | None = None,
    ) -> FormPayload:
        """
        Build a payload the way request factories in tests do.

        For GET/HEAD ``data`` is merged into the query; otherwise it is the body.
        """
        parts = urlsplit(uri)
        query = dict(parse_qsl(parts.query, keep_blank_values=True))
        method = method.upper()
        body: dict[str, Any] = {}
        if data:
            if method in ("GET", "HEAD"):
                query.update(_normalize_keys(data))
            else:
                body = _normalize_keys(data)
        return cls(
            method=method,
            path=parts.path or "/",
            query=query,
            body=body,
            content_type=None if method in ("GET", "HEAD") else _FORM_TYPE,
        )

    @classmethod
    def from_raw(
        cls,
        uri: str,
        method: str,
        raw_body: str | bytes,
        content_type: str,
    ) -> FormPayload:
        """
        Parse a raw request body by content type.

        Raises:
            MalformedSourceError: JSON body is not valid JSON.
        """
        parts = urlsplit(uri)
        query = dict(parse_qsl(parts.query, keep_blank_values=True))
        media_type = content_type.split(";", 1)[0].strip().lower()
        body: dict[str, Any] = {}
        if media_type == _JSON_TYPE or media_type.endswith("+json"):
            parsed = parse_json_text(raw_body) if raw_body else {}
            if isinstance(parsed, Mapping):
                body = _normalize_keys(parsed)
        elif media_type == _FORM_TYPE:
            text = raw_body.decode("utf-8") if isinstance(raw_body, bytes) else raw_body
            body = dict(parse_qsl(text, keep_blank_values=True))
        return cls(
            method=method.upper(),
            path=parts.path or "/",
            query=query,
            body=body,
            content_type=media_type,
        )

    def export_all(self) -> dict[str, Any]:
        """All input fields as one flat mapping."""
        merged = dict(self.query)
        merged.update(self.body)
        return merged
