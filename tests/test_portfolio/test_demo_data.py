"""Tests for demo seeding, cache clearing, and startup initialization."""

from datetime import date

from sqlalchemy import func, select

from src.core.database import session_scope
from src.core.models import FxRate, Position, Security, SecurityPrice
from src.portfolio.demo_data import (
    DEMO_POSITIONS,
    DEMO_SET_NAME,
    clear_cached_data,
    initialize_database_on_startup,
    initialize_demo_positions,
)
from src.portfolio.position_sets import get_active_position_set, get_all_position_sets
from src.portfolio.positions import get_positions_for_active_set


class TestDemoSeeding:
    def test_demo_set_is_active_warning(self, db):
        set_id = initialize_demo_positions()
        with session_scope() as session:
            active = get_active_position_set(session)
            positions = get_positions_for_active_set(session)
        assert active["id"] == set_id
        assert active["name"] == DEMO_SET_NAME
        assert active["info_type"] == "warning"
        assert len(positions) == len(DEMO_POSITIONS)
        assert {p["broker"] for p in positions} == {"Credit Agricole"}

    def test_startup_seeds_fresh_database(self, db):
        assert initialize_database_on_startup() is True
        with session_scope() as session:
            assert len(get_all_position_sets(session)) == 1

    def test_startup_does_not_seed_twice(self, db):
        assert initialize_database_on_startup() is True
        assert initialize_database_on_startup() is False
        with session_scope() as session:
            assert len(get_all_position_sets(session)) == 1

    def test_startup_skips_when_sets_exist(self, make_position_set):
        make_position_set("empty")
        assert initialize_database_on_startup() is False
        with session_scope() as session:
            assert [s["name"] for s in get_all_position_sets(session)] == ["empty"]

    def test_startup_seeding_disabled(self, db):
        assert initialize_database_on_startup(seed_demo_data=False) is False
        with session_scope() as session:
            assert get_all_position_sets(session) == []


class TestClearCachedData:
    def test_clears_prices_but_keeps_positions(self, db):
        initialize_demo_positions()
        with session_scope() as session:
            security_id = session.scalar(select(Security.id).where(Security.ticker == "AAPL"))
            session.add(
                SecurityPrice(security_id=security_id, price_date=date(2025, 1, 3), close_price=1.0)
            )
            session.add(
                FxRate(from_currency="USD", to_currency="JPY", rate=150.0, rate_date=date(2025, 1, 3))
            )

        clear_cached_data()

        with session_scope() as session:
            assert session.scalar(select(func.count()).select_from(SecurityPrice)) == 0
            assert session.scalar(select(func.count()).select_from(FxRate)) == 0
            assert session.scalar(select(func.count()).select_from(Position)) == len(DEMO_POSITIONS)
