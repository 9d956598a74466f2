"""
Pytest fixtures for the mapper kernel test suite.

Provides:
- Structured logging configured for the whole session
- captured_logs: kernel log records as parsed JSON dicts
- session: in-memory SQLite ORM session for record-like targets
- container: a fresh Container per test
"""

import json
import logging
from io import StringIO

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from mapper_kernel.container import Container
from mapper_kernel.db.base import Base
from mapper_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

import tests.dummies  # noqa: F401  (registers ORM tables on Base.metadata)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture mapper_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            Mapper.map(data).to(Airport)
            logs = captured_logs()
            assert any(r["message"] == "mapping_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("mapper_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def session():
    """In-memory SQLite session with all test tables created."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


# =============================================================================
# Kernel fixtures
# =============================================================================


@pytest.fixture
def container():
    return Container()
