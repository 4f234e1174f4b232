"""SQLAlchemy 2.0 ORM models for the Portfolio Tracker.

Re-exports Base and all model classes for convenient imports:
  - 4 reference tables: Currency, Broker, Account, Security
  - 3 position set tables: PositionSet, ActivePositionSet, Position
  - 2 historical tables: SecurityPrice, FxRate
"""

from .base import Base
from .position_sets import ACTIVE_POINTER_ID, ActivePositionSet, Position, PositionSet
from .prices import FxRate, SecurityPrice
from .reference_data import Account, Broker, Currency, Security

__all__ = [
    "Base",
    "ACTIVE_POINTER_ID",
    "Currency",
    "Broker",
    "Account",
    "Security",
    "PositionSet",
    "ActivePositionSet",
    "Position",
    "SecurityPrice",
    "FxRate",
]
