"""Tests for FX rate storage, nearest-date lookup, and the FX rates file."""

from __future__ import annotations

import json
from datetime import date

import pytest
from sqlalchemy import func, select

from src.core.database import session_scope
from src.core.exceptions import ValidationError
from src.core.models import FxRate
from src.portfolio.fx_rates import (
    get_all_fx_rates_for_pair,
    get_fx_rate,
    import_fx_rates,
    import_fx_rates_file,
    lookup_fx_rate,
    normalize_fx_pair,
    store_fx_rate,
    update_fx_rate,
)

USDJPY = {"2024-01-02": 141.0, "2024-01-05": 144.2, "2024-01-10": 146.0}


@pytest.fixture
def usdjpy(db):
    with session_scope() as session:
        import_fx_rates(session, {"USDJPY": USDJPY})


@pytest.fixture
def fx_file(tmp_path):
    path = tmp_path / "fxRates.json"
    path.write_text(json.dumps({"EURJPY": {"2024-01-05": 158.9}}), encoding="utf-8")
    return path


def _count_rates() -> int:
    with session_scope() as session:
        return session.scalar(select(func.count()).select_from(FxRate))


class TestNormalizePair:
    def test_splits_and_upper_cases(self):
        assert normalize_fx_pair(" usdjpy ") == ("USDJPY", "USD", "JPY")

    @pytest.mark.parametrize("pair", ["", None, "USD", "USDJPYX", "USD/JP", "123456"])
    def test_rejects_malformed_pairs(self, pair):
        with pytest.raises(ValidationError, match="FX pair must be 6 characters"):
            normalize_fx_pair(pair)


class TestLookup:
    def test_latest_without_date(self, usdjpy):
        with session_scope() as session:
            assert get_fx_rate(session, "USDJPY") == (146.0, date(2024, 1, 10))

    @pytest.mark.parametrize(
        "requested,expected",
        [
            (date(2024, 1, 5), date(2024, 1, 5)),
            (date(2024, 1, 4), date(2024, 1, 5)),
            (date(2024, 1, 1), date(2024, 1, 2)),
            (date(2024, 2, 1), date(2024, 1, 10)),
        ],
    )
    def test_nearest_date(self, usdjpy, requested, expected):
        with session_scope() as session:
            _, found_on = get_fx_rate(session, "USDJPY", requested)
        assert found_on == expected

    def test_tie_prefers_later_date(self, db):
        with session_scope() as session:
            import_fx_rates(session, {"USDJPY": {"2024-01-03": 1.0, "2024-01-05": 2.0}})
            assert get_fx_rate(session, "USDJPY", date(2024, 1, 4)) == (2.0, date(2024, 1, 5))

    def test_unknown_pair(self, usdjpy):
        with session_scope() as session:
            assert get_fx_rate(session, "EURUSD") is None
            assert get_all_fx_rates_for_pair(session, "EURUSD") == {}

    def test_all_rates_newest_first(self, usdjpy):
        with session_scope() as session:
            rates = get_all_fx_rates_for_pair(session, "usdjpy")
        assert list(rates) == ["2024-01-10", "2024-01-05", "2024-01-02"]
        assert rates["2024-01-05"] == 144.2


class TestStore:
    def test_store_overwrites_same_day(self, db):
        with session_scope() as session:
            store_fx_rate(session, "USDJPY", 150.0, date(2024, 3, 1))
            store_fx_rate(session, "USDJPY", 151.5, date(2024, 3, 1))
        assert _count_rates() == 1
        with session_scope() as session:
            assert get_fx_rate(session, "USDJPY") == (151.5, date(2024, 3, 1))

    def test_store_defaults_to_today(self, db):
        with session_scope() as session:
            assert store_fx_rate(session, "EURUSD", 1.09) == date.today()

    @pytest.mark.parametrize("rate", ["150", True, float("nan"), float("inf"), None])
    def test_rejects_bad_rates(self, db, rate):
        with pytest.raises(ValidationError):
            with session_scope() as session:
                store_fx_rate(session, "USDJPY", rate, date(2024, 3, 1))
        assert _count_rates() == 0

    def test_import_is_atomic(self, db):
        with pytest.raises(ValidationError, match="Invalid date"):
            with session_scope() as session:
                import_fx_rates(session, {"USDJPY": {"2024-01-02": 141.0, "soon": 1.0}})
        assert _count_rates() == 0


class TestService:
    def test_lookup_from_database(self, usdjpy):
        assert lookup_fx_rate("usdjpy", "2024-01-06") == {
            "pair": "USDJPY",
            "rate": 144.2,
            "date": "2024-01-05",
            "requestedDate": "2024-01-06",
            "source": "database",
        }

    def test_lookup_caches_pair_from_file(self, db, fx_file):
        result = lookup_fx_rate("EURJPY", file_path=fx_file)
        assert result["source"] == "file"
        assert result["rate"] == 158.9
        assert lookup_fx_rate("EURJPY", file_path=fx_file)["source"] == "database"

    def test_lookup_not_found(self, db, fx_file):
        assert lookup_fx_rate("GBPJPY", file_path=fx_file) == {
            "pair": "GBPJPY",
            "rate": None,
            "date": None,
            "requestedDate": None,
            "source": "none",
        }

    def test_lookup_without_file(self, db, tmp_path):
        result = lookup_fx_rate("EURJPY", file_path=tmp_path / "missing.json")
        assert result["source"] == "none"

    def test_lookup_rejects_bad_date(self, db):
        with pytest.raises(ValidationError, match="Invalid date"):
            lookup_fx_rate("USDJPY", "next week")

    def test_update_then_lookup(self, db):
        stored = update_fx_rate("usdjpy", 149.25, "2024/03/01")
        assert stored == {"pair": "USDJPY", "rate": 149.25, "date": "2024-03-01"}
        assert lookup_fx_rate("USDJPY")["rate"] == 149.25

    def test_import_file(self, db, fx_file):
        assert import_fx_rates_file(fx_file) == 1
        with session_scope() as session:
            assert get_all_fx_rates_for_pair(session, "EURJPY") == {"2024-01-05": 158.9}

    def test_import_missing_file(self, db, tmp_path):
        with pytest.raises(FileNotFoundError):
            import_fx_rates_file(tmp_path / "missing.json")
