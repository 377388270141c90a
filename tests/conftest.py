"""
Pytest fixtures for the operations hub test suite.

Provides:
- Structured logging for the whole session and a ``captured_logs`` fixture
- A fresh SQLite database file per test (engine, tables, sessions)
- Deterministic clock, test actor id and the default configuration

Database tests run against a file in ``tmp_path`` so that concurrency tests
can open one session per thread against the same database.
"""

import json
import logging
from io import StringIO
from uuid import UUID

import pytest

from ops_config import get_active_config
from ops_kernel.db.engine import (
    create_tables,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from ops_kernel.domain.clock import DeterministicClock
from ops_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ops_kernel.services.document_lock import DocumentLockRegistry

# Test actor ID for all test operations
TEST_ACTOR_ID = UUID("00000000-0000-4000-a000-0000000000aa")


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
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
    Capture ops_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, invoice_service):
            invoice_service.record_payment(...)
            logs = captured_logs()
            assert any(r["message"] == "invoice_payment_recorded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ops_kernel")
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
def db_engine(tmp_path):
    """Engine bound to a fresh SQLite file with every table created."""
    eng = init_engine_from_url(f"sqlite:///{tmp_path / 'ops_hub.db'}")
    create_tables()
    yield eng
    reset_engine()


@pytest.fixture
def session(db_engine):
    """A session on the per-test database.  Services commit through it."""
    sess = get_session()
    yield sess
    sess.close()


@pytest.fixture
def session_factory(db_engine):
    """Session factory for tests that need one session per thread."""
    return get_session_factory()


# =============================================================================
# Common fixtures
# =============================================================================


@pytest.fixture
def test_actor_id() -> UUID:
    return TEST_ACTOR_ID


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    """Clock pinned to 2026-01-15 10:00 UTC."""
    return DeterministicClock()


@pytest.fixture
def hub_config():
    """The default configuration set shipped in ops_config/sets."""
    return get_active_config()


@pytest.fixture
def document_locks() -> DocumentLockRegistry:
    """A lock registry private to the test."""
    return DocumentLockRegistry(default_timeout=5)
