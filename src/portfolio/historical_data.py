"""Historical price freshness evaluation.

The status is derived on every call from MAX(price_date) in
securities_prices; nothing is persisted. A gap from Friday data is allowed
2 expected days on Monday and 3 on Tuesday; on weekdays any gap beyond
the expected days asks for a refresh, on weekends only a gap of more than
one unexpected day does.

Examples::

    >>> from datetime import date
    >>> evaluate_freshness(date(2025, 1, 3), today=date(2025, 1, 6)).needs_refresh
    True
    >>> evaluate_freshness(date(2025, 1, 6), today=date(2025, 1, 6)).reason
    'Data is up to date (last: 2025-01-06)'
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy import func, select

from src.core.database import session_scope
from src.core.models import FxRate, SecurityPrice
from src.core.utils.logging_config import get_logger

logger = get_logger("historical_data")

NO_DATA_REASON = "No historical data found"

_MONDAY, _TUESDAY, _FRIDAY = 0, 1, 4


@dataclass(frozen=True)
class HistoricalDataStatus:
    needs_refresh: bool
    missing_days: int
    last_data_date: Optional[str]
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "needsRefresh": self.needs_refresh,
            "missingDays": self.missing_days,
            "lastDataDate": self.last_data_date,
            "reason": self.reason,
        }


def expected_missing_days(today: date, last_date: date) -> int:
    """Days of gap explained by the weekend alone."""
    if last_date.weekday() == _FRIDAY:
        if today.weekday() == _MONDAY:
            return 2
        if today.weekday() == _TUESDAY:
            return 3
    return 0


def evaluate_freshness(
    last_date: Optional[date], today: Optional[date] = None
) -> HistoricalDataStatus:
    """Pure freshness rule applied to the most recent stored price date."""
    if last_date is None:
        return HistoricalDataStatus(
            needs_refresh=True,
            missing_days=0,
            last_data_date=None,
            reason=NO_DATA_REASON,
        )

    today = today or date.today()
    diff_days = (today - last_date).days
    expected = expected_missing_days(today, last_date)
    unexpected = diff_days - expected
    is_weekday = today.weekday() <= _FRIDAY

    needs_refresh = unexpected > 1 or (is_weekday and diff_days > expected)
    last_iso = last_date.isoformat()

    if not needs_refresh:
        reason = f"Data is up to date (last: {last_iso})"
    elif diff_days == expected:
        reason = f"Missing {diff_days} days (expected due to weekends)"
    else:
        reason = f"Missing {diff_days} days ({unexpected} unexpected)"

    return HistoricalDataStatus(
        needs_refresh=needs_refresh,
        missing_days=diff_days,
        last_data_date=last_iso,
        reason=reason,
    )


def _as_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def get_historical_data_status(today: Optional[date] = None) -> HistoricalDataStatus:
    """Freshness of the stored price history; safe on an empty database."""
    with session_scope() as session:
        latest = session.scalar(select(func.max(SecurityPrice.price_date)))
    status = evaluate_freshness(_as_date(latest), today=today)
    logger.debug(
        "historical_data_status",
        needs_refresh=status.needs_refresh,
        last_data_date=status.last_data_date,
    )
    return status


def get_historical_data_summary(today: Optional[date] = None) -> dict[str, Any]:
    """Row counts and recency of the historical tables."""
    with session_scope() as session:
        prices = session.scalar(select(func.count()).select_from(SecurityPrice)) or 0
        fx_rates = session.scalar(select(func.count()).select_from(FxRate)) or 0
        securities = (
            session.scalar(select(func.count(func.distinct(SecurityPrice.security_id))))
            or 0
        )
        latest = _as_date(session.scalar(select(func.max(SecurityPrice.price_date))))

    days_since = 0
    if latest is not None:
        days_since = ((today or date.today()) - latest).days

    return {
        "historicalPrices": prices,
        "fxRates": fx_rates,
        "securitiesWithData": securities,
        "lastDataDate": latest.isoformat() if latest else None,
        "daysSinceLastData": days_since,
    }
