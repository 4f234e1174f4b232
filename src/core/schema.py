"""Schema creation and default reference data.

setup_database() is idempotent: tables are created if missing and the
currency/broker seed rows and the active-set pointer row are inserted only
when absent.
"""

from __future__ import annotations

from sqlalchemy import select

from .currency import SUPPORTED_CURRENCIES, ZERO_DECIMAL_CURRENCIES
from .database import get_engine, session_scope
from .models import (
    ACTIVE_POINTER_ID,
    ActivePositionSet,
    Base,
    Broker,
    Currency,
)
from .utils.logging_config import get_logger

logger = get_logger("schema")

DEFAULT_CURRENCIES: list[dict] = [
    {
        "code": c.code,
        "name": c.name,
        "symbol": c.symbol,
        "decimal_places": 0 if c.code in ZERO_DECIMAL_CURRENCIES else 2,
    }
    for c in SUPPORTED_CURRENCIES
]

DEFAULT_BROKERS: list[dict] = [
    {"name": "credit_agricole", "display_name": "Credit Agricole", "default_currency": "EUR"},
    {"name": "rakuten", "display_name": "Rakuten Securities", "default_currency": "JPY"},
    {"name": "interactive_brokers", "display_name": "Interactive Brokers", "default_currency": "USD"},
    {"name": "charles_schwab", "display_name": "Charles Schwab", "default_currency": "USD"},
    {"name": "fidelity", "display_name": "Fidelity", "default_currency": "USD"},
    {"name": "vanguard", "display_name": "Vanguard", "default_currency": "USD"},
    {"name": "td_ameritrade", "display_name": "TD Ameritrade", "default_currency": "USD"},
    {"name": "etoro", "display_name": "eToro", "default_currency": "USD"},
    {"name": "robinhood", "display_name": "Robinhood", "default_currency": "USD"},
    {"name": "webull", "display_name": "Webull", "default_currency": "USD"},
]


def initialize_database() -> None:
    """Create every table known to Base.metadata."""
    logger.info("initializing_schema")
    Base.metadata.create_all(get_engine())


def insert_default_data() -> None:
    """Insert reference currencies, brokers, and the empty active pointer."""
    with session_scope() as session:
        existing_codes = set(session.scalars(select(Currency.code)))
        for row in DEFAULT_CURRENCIES:
            if row["code"] not in existing_codes:
                session.add(Currency(**row))

        existing_brokers = set(session.scalars(select(Broker.name)))
        for row in DEFAULT_BROKERS:
            if row["name"] not in existing_brokers:
                session.add(Broker(**row))

        if session.get(ActivePositionSet, ACTIVE_POINTER_ID) is None:
            session.add(ActivePositionSet(id=ACTIVE_POINTER_ID, position_set_id=None))
    logger.info("default_data_inserted")


def setup_database() -> None:
    """Full database setup (schema + default data)."""
    initialize_database()
    insert_default_data()
    logger.info("database_setup_completed")


def drop_all_tables() -> None:
    """Drop every table (for tests and full resets)."""
    Base.metadata.drop_all(get_engine())
    logger.info("all_tables_dropped")
