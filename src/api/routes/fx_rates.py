"""FX rate endpoints.

Provides:
- GET  /fx-rates?pair=USDJPY[&date=YYYY-MM-DD] -- stored rate nearest the date
- POST /fx-rates                               -- store today's rate for a pair
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter

from src.api.responses import error_response
from src.api.schemas.portfolio_schemas import (
    FxRateResponse,
    UpdateFxRateRequest,
    UpdateFxRateResponse,
)
from src.core.exceptions import ValidationError
from src.portfolio import lookup_fx_rate, update_fx_rate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fx-rates", tags=["FX Rates"])


@router.get("", response_model=FxRateResponse)
def get_fx_rate(pair: Optional[str] = None, date: Optional[str] = None):
    """Rate for ``pair``; ``rate`` is null when nothing is stored or on file."""
    if not pair:
        return error_response(400, "FX pair parameter is required")
    try:
        return lookup_fx_rate(pair, date)
    except ValidationError as exc:
        return error_response(400, str(exc))
    except Exception as exc:
        logger.error("Error fetching FX rate %s: %s", pair, exc)
        return error_response(500, "Failed to fetch FX rate", str(exc))


@router.post("", response_model=UpdateFxRateResponse)
def post_fx_rate(body: UpdateFxRateRequest):
    """Store a rate for ``fxPair``, dated today unless ``date`` is given."""
    rate = body.rate
    if not body.fxPair or isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return error_response(400, "Invalid FX pair or rate")
    try:
        stored = update_fx_rate(body.fxPair, rate, body.date)
    except ValidationError as exc:
        return error_response(400, str(exc))
    except Exception as exc:
        logger.error("Error updating FX rate %s: %s", body.fxPair, exc)
        return error_response(500, "Failed to update FX rate", str(exc))

    return UpdateFxRateResponse(
        message=f"FX rate updated for {stored['pair']}",
        rate=stored["rate"],
        date=stored["date"],
    )
