"""Reference tables -- currencies, brokers, accounts, and securities.

Positions point at an account (which belongs to a broker) and a security.
Brokers, accounts, and securities are created on demand during position
ingestion; currencies and a default broker list are seeded by setup_database().
"""

from typing import Optional

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Currency(TimestampMixin, Base):
    __tablename__ = "currencies"

    code: Mapped[str] = mapped_column(String(10), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    symbol: Mapped[str] = mapped_column(String(10), nullable=False)
    decimal_places: Mapped[int] = mapped_column(Integer, default=2)


class Broker(TimestampMixin, Base):
    """A brokerage. ``name`` is the internal key, ``display_name`` is user-facing."""

    __tablename__ = "brokers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    default_currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USD"
    )

    def __repr__(self) -> str:
        return f"<Broker(id={self.id}, name={self.name!r})>"


class Account(TimestampMixin, Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    broker_id: Mapped[int] = mapped_column(ForeignKey("brokers.id"), nullable=False)
    account_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    account_type: Mapped[str] = mapped_column(String(50), default="investment")
    base_currency: Mapped[str] = mapped_column(
        String(10), nullable=False, default="USD"
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    __table_args__ = (
        UniqueConstraint("broker_id", "name", name="uq_accounts_broker_name"),
    )

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name!r}, broker_id={self.broker_id})>"


class Security(TimestampMixin, Base):
    __tablename__ = "securities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    ticker: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    security_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="stock"
    )
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    exchange: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    sector: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Security(id={self.id}, ticker={self.ticker!r})>"
