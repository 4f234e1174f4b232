"""Tests for the engine lifecycle and schema setup."""

import pytest
from sqlalchemy import func, select

from src.core.currency import SUPPORTED_CURRENCIES
from src.core.database import (
    check_db_connection,
    close_db_connection,
    get_engine,
    session_scope,
)
from src.core.exceptions import PersistenceError
from src.core.models import ACTIVE_POINTER_ID, ActivePositionSet, Broker, Currency
from src.core.schema import DEFAULT_BROKERS, DEFAULT_CURRENCIES, setup_database


class TestDatabaseLifecycle:
    def test_database_file_created_at_configured_path(self, db):
        assert db.exists()
        assert str(get_engine().url.database) == str(db)

    def test_connection_check(self, db):
        assert check_db_connection() is True

    def test_close_and_reopen_switches_database(self, db, tmp_path, monkeypatch):
        other = tmp_path / "other.db"
        monkeypatch.setenv("DATABASE_PATH", str(other))
        close_db_connection()
        setup_database()
        assert other.exists()
        assert str(get_engine().url.database) == str(other)

    def test_session_scope_wraps_integrity_errors(self, db):
        with pytest.raises(PersistenceError):
            with session_scope() as session:
                session.add(Broker(name="rakuten", display_name="Dup"))

    def test_session_scope_rolls_back_on_error(self, db):
        with pytest.raises(RuntimeError):
            with session_scope() as session:
                session.add(Broker(name="temp_broker", display_name="Temp"))
                session.flush()
                raise RuntimeError("boom")
        with session_scope() as session:
            found = session.scalar(select(Broker).where(Broker.name == "temp_broker"))
        assert found is None


class TestSetupDatabase:
    def test_default_data_seeded(self, db):
        with session_scope() as session:
            currencies = session.scalar(select(func.count()).select_from(Currency))
            brokers = session.scalar(select(func.count()).select_from(Broker))
            jpy = session.get(Currency, "JPY")
            pointer = session.get(ActivePositionSet, ACTIVE_POINTER_ID)
        assert currencies == len(DEFAULT_CURRENCIES)
        assert brokers == len(DEFAULT_BROKERS)
        assert jpy.decimal_places == 0
        assert pointer is not None
        assert pointer.position_set_id is None

    def test_seeded_currencies_match_lookup_table(self, db):
        with session_scope() as session:
            rows = {c.code: c for c in session.scalars(select(Currency))}
        assert set(rows) == {c.code for c in SUPPORTED_CURRENCIES}
        assert rows["KRW"].decimal_places == 0
        assert rows["INR"].symbol == "₹"
        assert rows["USD"].decimal_places == 2

    def test_setup_is_idempotent(self, db):
        setup_database()
        setup_database()
        with session_scope() as session:
            brokers = session.scalar(select(func.count()).select_from(Broker))
        assert brokers == len(DEFAULT_BROKERS)
