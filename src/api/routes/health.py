"""Health-check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from src.api.deps import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(session: Session = Depends(get_db)) -> dict:
    """Basic liveness probe -- verifies the database connection."""
    db_status = "disconnected"
    try:
        session.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as exc:
        db_status = f"disconnected: {exc}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
