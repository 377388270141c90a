"""Tests for engine initialization and the transactional session scope."""

import pytest
from sqlalchemy import inspect, select

from ops_kernel.db.engine import (
    drop_tables,
    get_engine,
    get_session,
    init_engine_from_url,
    is_postgres,
    reset_engine,
    session_scope,
)
from ops_kernel.services.sequence_service import SequenceCounter


class TestEngineLifecycle:

    def test_uninitialized_engine_raises(self):
        reset_engine()

        with pytest.raises(RuntimeError, match="not initialized"):
            get_engine()
        with pytest.raises(RuntimeError, match="not initialized"):
            get_session()
        assert is_postgres() is False

    def test_sqlite_engine(self, db_engine):
        assert get_engine() is db_engine
        assert db_engine.dialect.name == "sqlite"
        assert not is_postgres()

    def test_tables_created(self, db_engine):
        tables = set(inspect(db_engine).get_table_names())

        assert {
            "sequence_counters",
            "quotations", "quotation_lines",
            "invoices", "invoice_lines", "invoice_payments",
            "purchase_orders", "purchase_order_lines",
            "inventory_items",
        } <= tables

    def test_drop_tables(self, db_engine):
        drop_tables()

        assert inspect(db_engine).get_table_names() == []

    def test_reinit_logs(self, tmp_path, captured_logs):
        init_engine_from_url(f"sqlite:///{tmp_path / 'other.db'}")
        try:
            records = [r for r in captured_logs() if r["message"] == "engine_initialized"]
            assert records[0]["dialect"] == "sqlite"
        finally:
            reset_engine()


class TestSessionScope:

    def test_commits_on_success(self, db_engine):
        with session_scope() as session:
            session.add(SequenceCounter(name="INV-2026", current_value=3))

        with session_scope() as session:
            counter = session.scalars(select(SequenceCounter)).one()
            assert counter.current_value == 3

    def test_rolls_back_on_error(self, db_engine, captured_logs):
        with pytest.raises(ValueError):
            with session_scope() as session:
                session.add(SequenceCounter(name="INV-2026", current_value=3))
                session.flush()
                raise ValueError("abort")

        with session_scope() as session:
            assert session.scalars(select(SequenceCounter)).all() == []
        assert any(r["message"] == "transaction_rolled_back" for r in captured_logs())
