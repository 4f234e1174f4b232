"""Demo data seeding, cached-data clearing, and startup initialization.

On a fresh database (no positions anywhere) startup creates a ``demo``
position set flagged ``info_type="warning"`` and makes it active so the
UI has something to show.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select

from src.core.database import session_scope
from src.core.models import FxRate, Position, PositionSet, SecurityPrice
from src.core.schema import setup_database
from src.core.utils.logging_config import get_logger

from .position_sets import DEMO_INFO_TYPE, create_position_set
from .positions_admin import upsert_positions_for_set
from .records import RawPosition

logger = get_logger("demo_data")

DEMO_SET_NAME = "demo"
DEMO_BROKER = "Credit Agricole"

DEMO_POSITIONS: list[tuple[str, str, str, float, float, str]] = [
    # (ticker, name, account, quantity, cost, currency)
    ("AAPL", "Apple Inc", "General", 392, 2.63, "USD"),
    ("MSFT", "Microsoft Corp", "General", 50, 85.50, "USD"),
    ("GOOG", "Alphabet Inc", "General", 25, 120.75, "USD"),
    ("7940.T", "Wavelock HLDGS", "JP NISA", 100, 572.0, "JPY"),
    ("8953.T", "Japan City Fund", "JP General", 1, 118000.0, "JPY"),
    ("8986.T", "Daiwa Securities Living Investment", "JP General", 1, 106342.0, "JPY"),
    ("4246.T", "Daikyo Nishikawa", "JP General", 100, 605.35, "JPY"),
    ("NVDA", "Nvidia Corp", "JP General", 2, 110.71, "USD"),
]


def demo_positions() -> list[RawPosition]:
    return [
        RawPosition(
            ticker=ticker,
            full_name=name,
            broker=DEMO_BROKER,
            account=account,
            quantity=quantity,
            cost_per_unit=cost,
            transaction_ccy=ccy,
            stock_ccy=ccy,
        )
        for ticker, name, account, quantity, cost, ccy in DEMO_POSITIONS
    ]


def initialize_demo_positions() -> int:
    """Create the active demo set with the sample holdings; returns its id."""
    positions = demo_positions()
    with session_scope() as session:
        position_set_id = create_position_set(
            session,
            name=DEMO_SET_NAME,
            display_name="Demo Portfolio",
            description=(
                "You are currently viewing some sample portfolio data "
                "for demonstration purposes"
            ),
            info_type=DEMO_INFO_TYPE,
            is_active=True,
        )
        upsert_positions_for_set(session, position_set_id, positions)
    logger.info(
        "demo_positions_created", position_set_id=position_set_id, count=len(positions)
    )
    return position_set_id


def clear_cached_data() -> None:
    """Delete historical prices and FX rates; positions are kept."""
    with session_scope() as session:
        prices = session.execute(delete(SecurityPrice)).rowcount
        fx_rates = session.execute(delete(FxRate)).rowcount
    logger.info("cached_data_cleared", prices=prices, fx_rates=fx_rates)


def initialize_database_on_startup(seed_demo_data: bool = True) -> bool:
    """Set up the schema and seed demo data on a fresh database.

    Returns:
        True when demo data was seeded.
    """
    setup_database()
    if not seed_demo_data:
        return False

    with session_scope() as session:
        position_count = session.scalar(select(func.count()).select_from(Position)) or 0
        set_count = session.scalar(select(func.count()).select_from(PositionSet)) or 0

    if position_count > 0 or set_count > 0:
        logger.info(
            "startup_existing_data", positions=position_count, position_sets=set_count
        )
        return False

    logger.info("startup_fresh_database_seeding_demo")
    initialize_demo_positions()
    return True
