"""Historical market data endpoints.

Provides:
- GET      /historical-data         -- row counts and recency of stored history
- GET      /historical-data/status  -- whether the stored history needs a refresh
- GET/POST /historical-prices       -- price retrieval (always 501)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from src.api.responses import error_response
from src.api.schemas.portfolio_schemas import (
    HistoricalDataStatusResponse,
    HistoricalDataSummaryResponse,
)
from src.core.exceptions import NotImplementedFeatureError
from src.portfolio import get_historical_data_status, get_historical_data_summary

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Historical Data"])


@router.get("/historical-data", response_model=HistoricalDataSummaryResponse)
def historical_data_summary():
    try:
        return get_historical_data_summary()
    except Exception as exc:
        logger.error("Error fetching historical data summary: %s", exc)
        return error_response(500, "Failed to fetch historical data", str(exc))


@router.get("/historical-data/status", response_model=HistoricalDataStatusResponse)
def historical_data_status():
    """Freshness of stored price history, evaluated against today's date."""
    try:
        status = get_historical_data_status()
    except Exception as exc:
        logger.error("Error checking historical data status: %s", exc)
        return error_response(500, "Failed to check data status", str(exc))

    return HistoricalDataStatusResponse(
        **status.to_dict(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.api_route("/historical-prices", methods=["GET", "POST"])
def historical_prices():
    """Price retrieval is served by an external job; always answers 501."""
    raise NotImplementedFeatureError("Historical prices retrieval not yet implemented")
