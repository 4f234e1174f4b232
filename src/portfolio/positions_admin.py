"""Positions ingestion -- write raw position batches into a position set.

Brokers, accounts, and securities referenced by a batch are created on
demand. A batch is written in a single transaction: either every position
lands or none does. Duplicate (account, security) pairs inside one set are
merged by summing quantity and cost basis.

Also handles the JSON positions file (``{"positions": [...]}``) used for
bulk import and export from disk.
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.core.config import settings
from src.core.database import session_scope
from src.core.exceptions import ValidationError
from src.core.models import Account, Broker, Position, Security
from src.core.utils.logging_config import get_logger

from .position_sets import (
    DEFAULT_INFO_TYPE,
    create_position_set,
    get_active_position_set,
)
from .records import (
    RawPosition,
    normalize_positions_input,
    parse_raw_positions,
    parse_transaction_date,
)

logger = get_logger("positions_admin")

FALLBACK_SET_NAME = "user-portfolio"
UNKNOWN_BROKER = "Unknown Broker"
DEFAULT_ACCOUNT = "General"


def normalize_broker_key(broker_name: str) -> str:
    """``"Interactive Brokers"`` -> ``"interactive_brokers"``."""
    return re.sub(r"[^a-z0-9]+", "_", broker_name.lower())


# ---------------------------------------------------------------------------
# Get-or-create helpers
# ---------------------------------------------------------------------------
def ensure_broker(
    session: Session, broker_name: Optional[str], preferred_currency: Optional[str]
) -> Broker:
    """Find a broker by its display name, creating it when missing.

    Matching is on the display name only, so "Rakuten" and the seeded
    "Rakuten Securities" stay distinct brokers. When the derived internal key
    is already taken the new row gets a numbered one (``rakuten_2``).
    """
    display_name = (broker_name or "").strip() or UNKNOWN_BROKER

    broker = session.scalar(
        select(Broker)
        .where(Broker.display_name == display_name)
        .order_by(Broker.id)
        .limit(1)
    )
    if broker is not None:
        return broker

    base_key = normalize_broker_key(display_name) or "unknown_broker"
    taken = set(
        session.scalars(
            select(Broker.name).where(Broker.name.startswith(base_key, autoescape=True))
        )
    )
    internal_name = base_key
    suffix = 2
    while internal_name in taken:
        internal_name = f"{base_key}_{suffix}"
        suffix += 1

    broker = Broker(
        name=internal_name,
        display_name=display_name,
        default_currency=preferred_currency or "USD",
    )
    session.add(broker)
    session.flush()
    return broker


def ensure_account(
    session: Session, account_name: Optional[str], broker: Broker
) -> Account:
    name = (account_name or "").strip() or DEFAULT_ACCOUNT
    account = session.scalar(
        select(Account).where(Account.name == name, Account.broker_id == broker.id)
    )
    if account is not None:
        return account

    account = Account(
        name=name,
        broker_id=broker.id,
        account_type="BROKERAGE",
        base_currency=broker.default_currency or "USD",
    )
    session.add(account)
    session.flush()
    return account


def ensure_security(session: Session, position: RawPosition) -> Security:
    security = session.scalar(select(Security).where(Security.ticker == position.ticker))
    if security is not None:
        return security

    security = Security(
        ticker=position.ticker,
        name=position.full_name or position.ticker,
        currency=position.stock_ccy or position.transaction_ccy or "USD",
    )
    session.add(security)
    session.flush()
    return security


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
def _write_position(
    session: Session,
    position_set_id: int,
    account: Account,
    security: Security,
    position: RawPosition,
) -> None:
    quantity = position.quantity
    average_cost = position.cost_per_unit
    if not math.isfinite(quantity) or not math.isfinite(average_cost):
        raise ValidationError(f"Invalid numeric values for position {position.ticker}")

    cost_basis = quantity * average_cost
    existing = session.scalar(
        select(Position).where(
            Position.position_set_id == position_set_id,
            Position.account_id == account.id,
            Position.security_id == security.id,
        )
    )
    if existing is not None:
        existing.quantity += quantity
        existing.cost_basis += cost_basis
        if existing.quantity:
            existing.average_cost = existing.cost_basis / existing.quantity
        session.flush()
        return

    session.add(
        Position(
            position_set_id=position_set_id,
            account_id=account.id,
            security_id=security.id,
            quantity=quantity,
            average_cost=average_cost,
            cost_basis=cost_basis,
            position_currency=position.transaction_ccy or "USD",
            transaction_date=parse_transaction_date(position.transaction_date),
        )
    )
    session.flush()


def upsert_positions_for_set(
    session: Session,
    position_set_id: int,
    positions: list[RawPosition],
    replace_existing: bool = True,
) -> int:
    """Write ``positions`` into the set; returns the number of records processed.

    With ``replace_existing`` (the default) the set's current positions are
    removed first, giving full-overwrite semantics.
    """
    if replace_existing:
        session.execute(
            delete(Position).where(Position.position_set_id == position_set_id)
        )

    for position in positions:
        broker = ensure_broker(session, position.broker, position.transaction_ccy)
        account = ensure_account(session, position.account, broker)
        security = ensure_security(session, position)
        _write_position(session, position_set_id, account, security, position)

    logger.info(
        "positions_written",
        position_set_id=position_set_id,
        count=len(positions),
        replace_existing=replace_existing,
    )
    return len(positions)


def ensure_active_position_set(session: Session) -> dict[str, Any]:
    """Return the active set, creating and activating a fallback one if needed."""
    active = get_active_position_set(session)
    if active is not None:
        return active

    create_position_set(
        session,
        name=FALLBACK_SET_NAME,
        display_name="User Portfolio",
        description="Automatically created portfolio set",
        info_type=DEFAULT_INFO_TYPE,
        is_active=True,
    )
    active = get_active_position_set(session)
    if active is None:
        raise RuntimeError("Failed to create or retrieve an active position set")
    return active


def replace_active_position_set_positions(positions: list[RawPosition]) -> int:
    """Overwrite the active set's positions in one transaction."""
    with session_scope() as session:
        position_set = ensure_active_position_set(session)
        return upsert_positions_for_set(
            session, position_set["id"], positions, replace_existing=True
        )


def write_positions(positions: Any) -> int:
    """Validate a client batch and make it the active set's full contents.

    Raises:
        ValidationError: ``positions`` is not a list, or an entry is malformed.
            Raised before any database access.
    """
    parsed = parse_raw_positions(positions)
    return replace_active_position_set_positions(parsed)


# ---------------------------------------------------------------------------
# Positions file
# ---------------------------------------------------------------------------
def _resolve_path(file_path: Optional[str | Path]) -> Path:
    return Path(file_path or settings.positions_file_path).expanduser()


def read_positions_from_file(file_path: Optional[str | Path] = None) -> list[RawPosition]:
    """Load and validate positions from a JSON file.

    Raises:
        FileNotFoundError: the file does not exist.
        ValidationError: the file is not valid JSON or has the wrong shape.
    """
    path = _resolve_path(file_path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Positions file is not valid JSON: {exc}") from exc
    return parse_raw_positions(normalize_positions_input(data))


def write_positions_file(
    positions: list[RawPosition], file_path: Optional[str | Path] = None
) -> Path:
    """Write ``{"positions": [...]}`` pretty-printed, creating parent dirs."""
    path = _resolve_path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "positions": [
            p.model_dump(by_alias=True, exclude_none=True) for p in positions
        ]
    }
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def get_positions_file_status(file_path: Optional[str | Path] = None) -> dict[str, Any]:
    try:
        positions = read_positions_from_file(file_path)
    except FileNotFoundError:
        return {
            "hasFile": False,
            "positionCount": 0,
            "message": (
                "No positions.json file found. Place your positions.json file "
                "in the data/ directory to import."
            ),
        }
    return {
        "hasFile": True,
        "positionCount": len(positions),
        "message": f"Found positions file with {len(positions)} positions ready to import",
    }


def import_positions_from_file(file_path: Optional[str | Path] = None) -> dict[str, Any]:
    """Replace the active set's positions with the contents of the file."""
    positions = read_positions_from_file(file_path)
    count = replace_active_position_set_positions(positions)
    return {
        "count": count,
        "positions": [p.model_dump(by_alias=True) for p in positions],
    }
