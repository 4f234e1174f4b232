"""FX rate storage and lookup.

Rates live in ``fx_rates`` keyed by (from_currency, to_currency, rate_date)
and are addressed by a six-letter pair such as ``USDJPY``. A lookup for a
date returns the stored rate closest to it (ties go to the later date);
without a date it returns the latest one.

When the table holds nothing for a pair, lookup_fx_rate() loads that pair
from the FX rates file (``{"USDJPY": {"2024-01-05": 144.2, ...}}``) into the
table and retries, so the file is read at most once per pair.

Examples::

    >>> normalize_fx_pair(" usdjpy ")
    ('USDJPY', 'USD', 'JPY')
"""

from __future__ import annotations

import json
import math
from datetime import date
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.core.config import settings
from src.core.database import session_scope
from src.core.exceptions import ValidationError
from src.core.models import FxRate
from src.core.utils.logging_config import get_logger

from .records import parse_transaction_date

logger = get_logger("fx_rates")

FX_PAIR_LENGTH = 6


def normalize_fx_pair(pair: Any) -> tuple[str, str, str]:
    """Return ``(pair, from_currency, to_currency)`` in upper case.

    Raises:
        ValidationError: ``pair`` is not six letters.
    """
    text = str(pair or "").strip().upper()
    if len(text) != FX_PAIR_LENGTH or not text.isalpha():
        raise ValidationError("FX pair must be 6 characters (e.g., USDJPY)")
    return text, text[:3], text[3:]


def parse_rate_date(value: Optional[str]) -> Optional[date]:
    """Parse an optional ``YYYY-MM-DD`` (or ``YYYY/MM/DD``) date.

    Raises:
        ValidationError: a non-empty value that is not a calendar date.
    """
    if value is None or not str(value).strip():
        return None
    parsed = parse_transaction_date(str(value))
    if parsed is None:
        raise ValidationError(f"Invalid date: {value}")
    return parsed


def _check_rate(rate: Any) -> float:
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise ValidationError("Rate must be a number")
    if not math.isfinite(rate):
        raise ValidationError("Rate must be a finite number")
    return float(rate)


# ---------------------------------------------------------------------------
# Table operations
# ---------------------------------------------------------------------------
def get_fx_rate(
    session: Session, pair: str, requested_date: Optional[date] = None
) -> Optional[tuple[float, date]]:
    """Return ``(rate, rate_date)`` nearest to ``requested_date``, or the latest."""
    _, from_ccy, to_ccy = normalize_fx_pair(pair)
    stmt = select(FxRate.rate, FxRate.rate_date).where(
        FxRate.from_currency == from_ccy, FxRate.to_currency == to_ccy
    )
    if requested_date is not None:
        distance = func.abs(
            func.julianday(FxRate.rate_date) - func.julianday(requested_date.isoformat())
        )
        stmt = stmt.order_by(distance, FxRate.rate_date.desc())
    else:
        stmt = stmt.order_by(FxRate.rate_date.desc())

    row = session.execute(stmt.limit(1)).first()
    if row is None:
        return None
    return row.rate, row.rate_date


def store_fx_rate(
    session: Session, pair: str, rate: Any, rate_date: Optional[date] = None
) -> date:
    """Insert or overwrite the rate for ``pair`` on ``rate_date`` (default today)."""
    _, from_ccy, to_ccy = normalize_fx_pair(pair)
    value = _check_rate(rate)
    rate_date = rate_date or date.today()

    existing = session.scalar(
        select(FxRate).where(
            FxRate.from_currency == from_ccy,
            FxRate.to_currency == to_ccy,
            FxRate.rate_date == rate_date,
        )
    )
    if existing is not None:
        existing.rate = value
    else:
        session.add(
            FxRate(
                from_currency=from_ccy,
                to_currency=to_ccy,
                rate=value,
                rate_date=rate_date,
            )
        )
    session.flush()
    return rate_date


def get_all_fx_rates_for_pair(session: Session, pair: str) -> dict[str, float]:
    """``{"YYYY-MM-DD": rate}`` for every stored date, newest first."""
    _, from_ccy, to_ccy = normalize_fx_pair(pair)
    rows = session.execute(
        select(FxRate.rate_date, FxRate.rate)
        .where(FxRate.from_currency == from_ccy, FxRate.to_currency == to_ccy)
        .order_by(FxRate.rate_date.desc())
    ).all()
    return {row.rate_date.isoformat(): row.rate for row in rows}


def import_fx_rates(session: Session, data: dict[str, dict[str, Any]]) -> int:
    """Store every ``{pair: {date: rate}}`` entry; returns the number stored.

    Raises:
        ValidationError: a malformed pair, date, or rate. Nothing is kept
            when the surrounding transaction rolls back.
    """
    if not isinstance(data, dict):
        raise ValidationError("FX rates data must be an object keyed by pair")
    stored = 0
    for pair, rates in data.items():
        if not isinstance(rates, dict):
            raise ValidationError(f"FX rates for {pair} must be an object keyed by date")
        for raw_date, rate in rates.items():
            store_fx_rate(session, pair, rate, parse_rate_date(raw_date))
            stored += 1
    logger.info("fx_rates_imported", pairs=len(data), rates=stored)
    return stored


# ---------------------------------------------------------------------------
# FX rates file
# ---------------------------------------------------------------------------
def read_fx_rates_file(file_path: Optional[str | Path] = None) -> Optional[dict[str, Any]]:
    """Load the FX rates file; None when it does not exist.

    Raises:
        ValidationError: the file is not valid JSON.
    """
    path = Path(file_path or settings.fx_rates_file_path).expanduser()
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except json.JSONDecodeError as exc:
        raise ValidationError(f"FX rates file is not valid JSON: {exc}") from exc


# ---------------------------------------------------------------------------
# Service entry points
# ---------------------------------------------------------------------------
def lookup_fx_rate(
    pair: Any,
    requested_date: Optional[str] = None,
    file_path: Optional[str | Path] = None,
) -> dict[str, Any]:
    """Resolve a rate from the table, falling back to the FX rates file.

    Returns ``{"pair", "rate", "date", "requestedDate", "source"}`` where
    ``source`` is ``"database"``, ``"file"`` or ``"none"`` (rate and date null).
    """
    fx_pair, _, _ = normalize_fx_pair(pair)
    target = parse_rate_date(requested_date)

    def _result(found: Optional[tuple[float, date]], source: str) -> dict[str, Any]:
        return {
            "pair": fx_pair,
            "rate": found[0] if found else None,
            "date": found[1].isoformat() if found else None,
            "requestedDate": target.isoformat() if target else None,
            "source": source if found else "none",
        }

    with session_scope() as session:
        found = get_fx_rate(session, fx_pair, target)
    if found is not None:
        return _result(found, "database")

    file_data = read_fx_rates_file(file_path)
    if not file_data or fx_pair not in file_data:
        logger.info("fx_rate_not_found", pair=fx_pair, requested_date=requested_date)
        return _result(None, "none")

    with session_scope() as session:
        import_fx_rates(session, {fx_pair: file_data[fx_pair]})
        found = get_fx_rate(session, fx_pair, target)
    logger.info("fx_rates_cached_from_file", pair=fx_pair)
    return _result(found, "file")


def update_fx_rate(pair: Any, rate: Any, rate_date: Optional[str] = None) -> dict[str, Any]:
    """Store one rate; returns ``{"pair", "rate", "date"}``."""
    fx_pair, _, _ = normalize_fx_pair(pair)
    with session_scope() as session:
        stored_on = store_fx_rate(session, fx_pair, rate, parse_rate_date(rate_date))
    logger.info("fx_rate_stored", pair=fx_pair, rate=rate, rate_date=str(stored_on))
    return {"pair": fx_pair, "rate": float(rate), "date": stored_on.isoformat()}


def import_fx_rates_file(file_path: Optional[str | Path] = None) -> int:
    """Load every pair in the FX rates file into the table.

    Raises:
        FileNotFoundError: the file does not exist.
        ValidationError: the file is malformed.
    """
    data = read_fx_rates_file(file_path)
    if data is None:
        raise FileNotFoundError(str(file_path or settings.fx_rates_file_path))
    with session_scope() as session:
        return import_fx_rates(session, data)
