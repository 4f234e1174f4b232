"""Initial schema: reference data, position sets, and price history.

Creates the complete database schema for the Portfolio Tracker:
- 4 reference tables: currencies, brokers, accounts, securities
- 3 position tables: position_sets, active_position_set, positions
- 2 history tables: securities_prices, fx_rates

Revision ID: 3f9c2a7d1e40
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f9c2a7d1e40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    # -----------------------------------------------------------------------
    # Step 1: Reference tables
    # -----------------------------------------------------------------------
    op.create_table(
        "currencies",
        sa.Column("code", sa.String(10), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("symbol", sa.String(10), nullable=False),
        sa.Column("decimal_places", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("code", name="pk_currencies"),
    )

    op.create_table(
        "brokers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("default_currency", sa.String(10), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_brokers"),
        sa.UniqueConstraint("name", name="uq_brokers_name"),
    )

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("broker_id", sa.Integer(), nullable=False),
        sa.Column("account_number", sa.String(100), nullable=True),
        sa.Column("account_type", sa.String(50), nullable=True),
        sa.Column("base_currency", sa.String(10), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_accounts"),
        sa.ForeignKeyConstraint(
            ["broker_id"], ["brokers.id"], name="fk_accounts_broker_id_brokers"
        ),
        sa.UniqueConstraint("broker_id", "name", name="uq_accounts_broker_name"),
    )

    op.create_table(
        "securities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ticker", sa.String(50), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("security_type", sa.String(20), nullable=False),
        sa.Column("currency", sa.String(10), nullable=False),
        sa.Column("exchange", sa.String(50), nullable=True),
        sa.Column("sector", sa.String(100), nullable=True),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("country", sa.String(10), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_securities"),
        sa.UniqueConstraint("ticker", name="uq_securities_ticker"),
    )

    # -----------------------------------------------------------------------
    # Step 2: Position sets, the active pointer, and positions
    # -----------------------------------------------------------------------
    op.create_table(
        "position_sets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("display_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("info_type", sa.String(20), nullable=False, server_default="info"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_position_sets"),
        sa.UniqueConstraint("name", name="uq_position_sets_name"),
    )

    op.create_table(
        "active_position_set",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("position_set_id", sa.Integer(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_active_position_set"),
        sa.ForeignKeyConstraint(
            ["position_set_id"],
            ["position_sets.id"],
            name="fk_active_position_set_position_set_id_position_sets",
            ondelete="SET NULL",
        ),
        sa.CheckConstraint("id = 1", name="ck_active_position_set_singleton"),
    )
    op.execute("INSERT INTO active_position_set (id, position_set_id) VALUES (1, NULL)")

    op.create_table(
        "positions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("position_set_id", sa.Integer(), nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("security_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("average_cost", sa.Float(), nullable=False),
        sa.Column("cost_basis", sa.Float(), nullable=False),
        sa.Column("position_currency", sa.String(10), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_positions"),
        sa.ForeignKeyConstraint(
            ["position_set_id"],
            ["position_sets.id"],
            name="fk_positions_position_set_id_position_sets",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["account_id"], ["accounts.id"], name="fk_positions_account_id_accounts"
        ),
        sa.ForeignKeyConstraint(
            ["security_id"], ["securities.id"], name="fk_positions_security_id_securities"
        ),
        sa.UniqueConstraint(
            "position_set_id",
            "account_id",
            "security_id",
            name="uq_positions_natural_key",
        ),
    )
    op.create_index("ix_positions_position_set_id", "positions", ["position_set_id"])

    # -----------------------------------------------------------------------
    # Step 3: Price and FX history
    # -----------------------------------------------------------------------
    op.create_table(
        "securities_prices",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("security_id", sa.Integer(), nullable=False),
        sa.Column("price_date", sa.Date(), nullable=False),
        sa.Column("open_price", sa.Float(), nullable=True),
        sa.Column("high_price", sa.Float(), nullable=True),
        sa.Column("low_price", sa.Float(), nullable=True),
        sa.Column("close_price", sa.Float(), nullable=False),
        sa.Column("adjusted_close", sa.Float(), nullable=True),
        sa.Column("volume", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_securities_prices"),
        sa.ForeignKeyConstraint(
            ["security_id"],
            ["securities.id"],
            name="fk_securities_prices_security_id_securities",
        ),
        sa.UniqueConstraint(
            "security_id", "price_date", name="uq_securities_prices_natural_key"
        ),
    )

    op.create_table(
        "fx_rates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("from_currency", sa.String(10), nullable=False),
        sa.Column("to_currency", sa.String(10), nullable=False),
        sa.Column("rate", sa.Float(), nullable=False),
        sa.Column("rate_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_fx_rates"),
        sa.UniqueConstraint(
            "from_currency", "to_currency", "rate_date", name="uq_fx_rates_natural_key"
        ),
    )


def downgrade() -> None:
    # Drop tables in reverse dependency order
    op.drop_table("fx_rates")
    op.drop_table("securities_prices")
    op.drop_index("ix_positions_position_set_id", table_name="positions")
    op.drop_table("positions")
    op.drop_table("active_position_set")
    op.drop_table("position_sets")
    op.drop_table("securities")
    op.drop_table("accounts")
    op.drop_table("brokers")
    op.drop_table("currencies")
