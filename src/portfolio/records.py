"""Wire-level position records and their normalization helpers.

RawPosition is the holding entry clients send and receive (camelCase JSON,
e.g. ``costPerUnit``). Transaction dates arrive as ``YYYY/MM/DD`` or
``YYYY-MM-DD`` and are exported as ``YYYY/MM/DD``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from src.core.exceptions import ValidationError


class RawPosition(BaseModel):
    """A single holding as submitted by a client, before any valuation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    transaction_date: Optional[str] = None
    ticker: str
    full_name: Optional[str] = None
    broker: Optional[str] = None
    account: Optional[str] = None
    quantity: float
    cost_per_unit: float
    transaction_ccy: str = "USD"
    stock_ccy: Optional[str] = None

    @field_validator("ticker", mode="before")
    @classmethod
    def _coerce_ticker(cls, value: Any) -> Any:
        # Tokyo tickers such as 7940 often arrive as JSON numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("ticker")
    @classmethod
    def _ticker_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("ticker must not be empty")
        return value


def normalize_positions_input(data: Any) -> list[Any]:
    """Accept either a bare list or a ``{"positions": [...]}`` wrapper."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("positions"), list):
        return data["positions"]
    raise ValidationError(
        "Invalid positions payload. Expected array or { positions: RawPosition[] }"
    )


def parse_raw_positions(items: Any) -> list[RawPosition]:
    """Validate a sequence of dicts (or RawPosition) into RawPosition objects.

    Raises:
        ValidationError: when ``items`` is not a list/tuple or an entry is malformed.
    """
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise ValidationError("Invalid positions data")

    parsed: list[RawPosition] = []
    for index, item in enumerate(items):
        if isinstance(item, RawPosition):
            parsed.append(item)
            continue
        try:
            parsed.append(RawPosition.model_validate(item))
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid position at index {index}: {exc}") from exc
    return parsed


_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")


def parse_transaction_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY/M/D``, ``YYYY-MM-DD`` or an ISO timestamp; None if unparseable.

    Month and day may omit the leading zero (``2024/3/5``).
    """
    if not value:
        return None
    match = _DATE_PREFIX.match(value.strip().replace("/", "-"))
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_export_date(value: date | datetime | None) -> str:
    """Render a date as ``YYYY/MM/DD``; today when missing."""
    if value is None:
        value = date.today()
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%Y/%m/%d")
