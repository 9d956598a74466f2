"""Tests for the structured logging system (mapper_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest

from mapper_kernel import Mapper
from mapper_kernel.exceptions import DependencyResolutionError
from mapper_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from tests.dummies import Airport


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state between tests."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def stream():
    out = StringIO()
    handler = logging.StreamHandler(out)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler, level=logging.DEBUG)
    return out


def _records(stream: StringIO) -> list[dict]:
    lines = stream.getvalue().strip().split("\n")
    return [json.loads(line) for line in lines if line]


# ---------------------------------------------------------------------------
# StructuredFormatter tests
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_one_json_object_per_line(self, stream):
        logger = get_logger("test")
        logger.info("first")
        logger.debug("second", extra={"items": 3})

        records = _records(stream)
        assert [r["message"] for r in records] == ["first", "second"]
        assert records[0]["logger"] == "mapper_kernel.test"
        assert records[1]["items"] == 3
        assert {"ts", "level", "logger", "message"} <= set(records[0])

    def test_context_fields_included(self, stream):
        LogContext.set(correlation_id="req-1", mapping_id="m-1")
        get_logger("test").info("with_context")

        record = _records(stream)[0]
        assert record["correlation_id"] == "req-1"
        assert record["mapping_id"] == "m-1"
        assert "target_type" not in record

    def test_extended_values_serialized(self, stream):
        uid = uuid4()
        get_logger("test").info("values", extra={"uid": uid, "fee": Decimal("1.50")})

        record = _records(stream)[0]
        assert record["uid"] == str(uid)
        assert record["fee"] == "1.50"

    def test_kernel_error_fields_extracted(self, stream):
        try:
            raise DependencyResolutionError("tests.dummies.Airport", "clock")
        except DependencyResolutionError:
            get_logger("test").error("construct_failed", exc_info=True)

        record = _records(stream)[0]
        assert record["exc_code"] == "DEPENDENCY_NOT_RESOLVABLE"
        assert record["exc_type"] == "DependencyResolutionError"
        assert record["exc_parameter"] == "clock"
        assert "traceback" in record


# ---------------------------------------------------------------------------
# LogContext tests
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_set_is_additive(self):
        LogContext.set(correlation_id="a")
        LogContext.set(target_type="tests.dummies.Airport")

        assert LogContext.get_all() == {
            "correlation_id": "a",
            "target_type": "tests.dummies.Airport",
        }

    def test_bind_restores_previous_values(self):
        LogContext.set(mapping_id="outer")
        with LogContext.bind(mapping_id="inner", target_type="T"):
            assert LogContext.get_all() == {"mapping_id": "inner", "target_type": "T"}
        assert LogContext.get_all() == {"mapping_id": "outer"}

    def test_clear(self):
        LogContext.set(correlation_id="x")
        LogContext.clear()

        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging tests
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_idempotent(self):
        first = logging.StreamHandler(StringIO())
        second = logging.StreamHandler(StringIO())
        configure_logging(handler=first)
        configure_logging(handler=second)

        handlers = logging.getLogger("mapper_kernel").handlers
        assert first in handlers
        assert second not in handlers

    def test_level_filters(self):
        out = StringIO()
        configure_logging(handler=logging.StreamHandler(out), level=logging.WARNING)
        get_logger("test").info("hidden")

        assert out.getvalue() == ""


# ---------------------------------------------------------------------------
# Engine log events
# ---------------------------------------------------------------------------


class TestEngineEvents:
    def test_mapping_events_carry_engine_context(self, stream):
        mapper = Mapper.map({"code": "LPK"})
        mapper.to(Airport)

        records = _records(stream)
        started = next(r for r in records if r["message"] == "mapping_started")
        completed = next(r for r in records if r["message"] == "mapping_completed")
        assert started["mapping_id"] == mapper.mapping_id
        assert started["target_type"] == "tests.dummies.Airport"
        assert completed["items"] == 1
        assert LogContext.get_all() == {}

    def test_context_bound_by_caller_is_kept(self, stream):
        with LogContext.bind(correlation_id="req-9"):
            Mapper.map({"code": "LPK"}).to(Airport)

        completed = next(r for r in _records(stream) if r["message"] == "mapping_completed")
        assert completed["correlation_id"] == "req-9"
