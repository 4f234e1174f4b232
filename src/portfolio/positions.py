"""Read-side queries returning stored positions as RawPosition-shaped dicts."""

from __future__ import annotations

from typing import Any, Literal

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.brokers import format_broker_display
from src.core.models import Account, Broker, Position, Security

from .position_sets import get_active_position_set_id
from .records import format_export_date


def _positions_query(position_set_id: int, order: Literal["ticker", "created"]):
    stmt = (
        select(
            Position.quantity,
            Position.average_cost,
            Position.position_currency,
            Position.transaction_date,
            Position.created_at,
            Security.ticker,
            Security.name.label("full_name"),
            Security.currency.label("stock_ccy"),
            Account.name.label("account"),
            Broker.display_name.label("broker"),
        )
        .join(Security, Position.security_id == Security.id)
        .join(Account, Position.account_id == Account.id)
        .join(Broker, Account.broker_id == Broker.id)
        .where(Position.position_set_id == position_set_id)
    )
    if order == "ticker":
        return stmt.order_by(Security.ticker, Position.id)
    return stmt.order_by(Position.created_at, Position.id)


def _row_to_raw_position(row) -> dict[str, Any]:
    return {
        "transactionDate": format_export_date(row.transaction_date or row.created_at),
        "ticker": row.ticker,
        "fullName": row.full_name or row.ticker,
        "broker": row.broker,
        "account": row.account or "General",
        "quantity": float(row.quantity),
        "costPerUnit": float(row.average_cost),
        "transactionCcy": row.position_currency or "USD",
        "stockCcy": row.stock_ccy or row.position_currency or "USD",
    }


def get_positions_for_set(
    session: Session,
    position_set_id: int,
    order: Literal["ticker", "created"] = "ticker",
) -> list[dict[str, Any]]:
    """Return the positions of one set, sorted by ticker or insertion order."""
    rows = session.execute(_positions_query(position_set_id, order)).all()
    return [_row_to_raw_position(row) for row in rows]


def get_positions_for_active_set(session: Session) -> list[dict[str, Any]]:
    """Positions of the active set; empty when no set is active."""
    active_id = get_active_position_set_id(session)
    if active_id is None:
        return []
    return get_positions_for_set(session, active_id)


def with_broker_display(positions: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Copy of ``positions`` with a ``brokerDisplay`` label (flag + full name)."""
    return [
        {**position, "brokerDisplay": format_broker_display(position["broker"])}
        for position in positions
    ]
