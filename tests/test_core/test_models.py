"""Unit tests for the SQLAlchemy models.

Tests verify schema definitions (columns, primary keys, constraints)
without requiring a database connection. Uses sqlalchemy.inspect() to
introspect mapper metadata.
"""

from sqlalchemy import inspect as sa_inspect

from src.core.models import (
    ACTIVE_POINTER_ID,
    Account,
    ActivePositionSet,
    Base,
    Broker,
    FxRate,
    Position,
    PositionSet,
    Security,
    SecurityPrice,
)

# ── Helpers ──────────────────────────────────────────────────────────────


def _column_names(model_class):
    """Return set of column names for a model class."""
    mapper = sa_inspect(model_class)
    return {c.key for c in mapper.column_attrs}


def _constraint_names(model_class):
    return {c.name for c in model_class.__table__.constraints}


# ── Position sets ────────────────────────────────────────────────────────


class TestPositionSetModels:
    def test_position_set_columns(self):
        cols = _column_names(PositionSet)
        for field in ("id", "name", "display_name", "description", "info_type"):
            assert field in cols, f"Missing column: {field}"

    def test_position_set_has_no_active_flag(self):
        assert "is_active" not in _column_names(PositionSet)

    def test_active_pointer_is_singleton(self):
        assert ActivePositionSet.__tablename__ == "active_position_set"
        assert "ck_active_position_set_singleton" in _constraint_names(ActivePositionSet)
        assert ACTIVE_POINTER_ID == 1

    def test_active_pointer_fk_sets_null(self):
        fk = next(iter(ActivePositionSet.__table__.c.position_set_id.foreign_keys))
        assert fk.ondelete == "SET NULL"

    def test_position_fk_cascades(self):
        fk = next(iter(Position.__table__.c.position_set_id.foreign_keys))
        assert fk.ondelete == "CASCADE"
        assert fk.column.table.name == "position_sets"

    def test_position_natural_key(self):
        assert "uq_positions_natural_key" in _constraint_names(Position)


# ── Reference and history tables ─────────────────────────────────────────


class TestReferenceModels:
    def test_account_unique_per_broker(self):
        assert "uq_accounts_broker_name" in _constraint_names(Account)

    def test_broker_and_security_unique_names(self):
        assert Broker.__table__.c.name.unique
        assert Security.__table__.c.ticker.unique

    def test_history_natural_keys(self):
        assert "uq_securities_prices_natural_key" in _constraint_names(SecurityPrice)
        assert "uq_fx_rates_natural_key" in _constraint_names(FxRate)

    def test_all_tables_registered(self):
        expected = {
            "currencies",
            "brokers",
            "accounts",
            "securities",
            "position_sets",
            "active_position_set",
            "positions",
            "securities_prices",
            "fx_rates",
        }
        assert expected <= set(Base.metadata.tables)
