"""Root pytest configuration and shared fixtures.

Provides common test fixtures used across all test modules:
- db: a fresh SQLite database per test (DATABASE_PATH points at tmp_path)
- sample_positions: camelCase position dicts as clients send them
- make_position_set: callable creating a position set with positions
- write_positions_json: callable writing a positions file under tmp_path
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from src.core.database import close_db_connection, session_scope
from src.core.schema import setup_database


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Point DATABASE_PATH at a temp file and run the close + setup cycle."""
    db_path = tmp_path / "portfolio-test.db"
    monkeypatch.setenv("DATABASE_PATH", str(db_path))
    close_db_connection()
    setup_database()
    yield db_path
    close_db_connection()


@pytest.fixture
def sample_positions() -> list[dict[str, Any]]:
    """Return three holdings across two brokers and two currencies."""
    return [
        {
            "transactionDate": "2024/03/15",
            "ticker": "AAPL",
            "fullName": "Apple Inc",
            "broker": "Interactive Brokers",
            "account": "Taxable",
            "quantity": 10,
            "costPerUnit": 150.0,
            "transactionCcy": "USD",
            "stockCcy": "USD",
        },
        {
            "transactionDate": "2024-04-01",
            "ticker": "7940.T",
            "fullName": "Wavelock HLDGS",
            "broker": "Rakuten Securities",
            "account": "JP NISA",
            "quantity": 100,
            "costPerUnit": 572.0,
            "transactionCcy": "JPY",
            "stockCcy": "JPY",
        },
        {
            "ticker": "MSFT",
            "fullName": "Microsoft Corp",
            "broker": "Interactive Brokers",
            "quantity": 5,
            "costPerUnit": 300.0,
        },
    ]


@pytest.fixture
def make_position_set(db):
    """Return a callable that creates a set (optionally active) with positions.

    Usage::

        def test_something(make_position_set):
            set_id = make_position_set("alpha", positions=[...], active=True)
    """
    from src.portfolio.position_sets import create_position_set
    from src.portfolio.positions_admin import upsert_positions_for_set
    from src.portfolio.records import parse_raw_positions

    def _make(
        name: str,
        positions: list[dict[str, Any]] | None = None,
        active: bool = False,
        info_type: str = "info",
    ) -> int:
        with session_scope() as session:
            set_id = create_position_set(
                session,
                name=name,
                display_name=name.title(),
                description=f"{name} holdings",
                info_type=info_type,
                is_active=active,
            )
            if positions:
                upsert_positions_for_set(session, set_id, parse_raw_positions(positions))
        return set_id

    return _make


@pytest.fixture
def write_positions_json(tmp_path):
    """Return a callable that writes ``payload`` as JSON and returns the path."""

    def _write(payload: Any, filename: str = "positions.json") -> Path:
        path = tmp_path / filename
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
