"""Position set tables -- named snapshots of holdings and the active pointer.

Three tables:
  - position_sets: one row per named snapshot (demo data, user data, scenarios)
  - active_position_set: single-row pointer (id is always 1) naming the active set
  - positions: holdings belonging to a set, one row per (set, account, security)

The active set is stored as a pointer rather than a per-row flag, so switching
sets is a single-row UPDATE and no reader can see two active sets.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

ACTIVE_POINTER_ID = 1


class PositionSet(Base):
    __tablename__ = "position_sets"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    info_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="info", server_default="info"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<PositionSet("
            f"id={self.id}, "
            f"name={self.name!r}, "
            f"info_type={self.info_type!r})>"
        )


class ActivePositionSet(Base):
    """Singleton row pointing at the active position set (NULL when none)."""

    __tablename__ = "active_position_set"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=ACTIVE_POINTER_ID)
    position_set_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("position_sets.id", ondelete="SET NULL"), nullable=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (CheckConstraint(f"id = {ACTIVE_POINTER_ID}", name="singleton"),)


class Position(Base):
    __tablename__ = "positions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    position_set_id: Mapped[int] = mapped_column(
        ForeignKey("position_sets.id", ondelete="CASCADE"), nullable=False
    )
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"), nullable=False)
    security_id: Mapped[int] = mapped_column(
        ForeignKey("securities.id"), nullable=False
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    average_cost: Mapped[float] = mapped_column(Float, nullable=False)
    cost_basis: Mapped[float] = mapped_column(Float, nullable=False)
    position_currency: Mapped[str] = mapped_column(String(10), nullable=False)
    transaction_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "position_set_id",
            "account_id",
            "security_id",
            name="uq_positions_natural_key",
        ),
        Index("ix_positions_position_set_id", "position_set_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Position("
            f"id={self.id}, "
            f"position_set_id={self.position_set_id}, "
            f"security_id={self.security_id}, "
            f"quantity={self.quantity})>"
        )
