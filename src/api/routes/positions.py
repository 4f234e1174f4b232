"""Positions endpoints for the active position set.

Provides:
- GET  /positions         -- positions of the active set, with broker labels
- POST /positions/update  -- overwrite the active set's positions
- GET  /positions/import  -- status of the server-side positions file
- POST /positions/import  -- load the positions file into the active set
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from src.api.responses import error_response
from src.api.schemas.portfolio_schemas import (
    PositionsFileStatusResponse,
    PositionsImportResponse,
    PositionsListResponse,
    UpdatePositionsRequest,
    UpdatePositionsResponse,
)
from src.core.database import session_scope
from src.core.exceptions import ValidationError
from src.portfolio import write_positions
from src.portfolio.positions import get_positions_for_active_set, with_broker_display
from src.portfolio.positions_admin import (
    get_positions_file_status,
    import_positions_from_file,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/positions", tags=["Positions"])


@router.get("", response_model=PositionsListResponse)
def list_positions():
    """Return the positions of the active set."""
    try:
        with session_scope() as session:
            positions = get_positions_for_active_set(session)
    except Exception as exc:
        logger.error("Error loading positions: %s", exc)
        return error_response(500, "Failed to load positions")

    if not positions:
        return PositionsListResponse(
            positions=[],
            message="No positions found. Import positions to get started.",
        )
    return PositionsListResponse(positions=with_broker_display(positions))


@router.post("/update", response_model=UpdatePositionsResponse)
def update_positions(body: UpdatePositionsRequest):
    """Replace the active set's positions with the submitted list."""
    try:
        count = write_positions(body.positions)
    except ValidationError as exc:
        logger.warning("Rejected positions update: %s", exc)
        return error_response(400, "Invalid positions data", str(exc))
    except Exception as exc:
        logger.error("Error updating positions: %s", exc)
        return error_response(500, "Failed to update positions")

    logger.info("Updated active position set with %d positions", count)
    return UpdatePositionsResponse(success=True)


@router.get("/import", response_model=PositionsFileStatusResponse)
def positions_file_status():
    """Report whether a positions file is available to import."""
    try:
        return get_positions_file_status()
    except Exception as exc:
        logger.error("Error checking positions file: %s", exc)
        return error_response(500, "Failed to check positions file", str(exc))


@router.post("/import", response_model=PositionsImportResponse)
def import_positions():
    """Load the positions file into the active set."""
    try:
        result = import_positions_from_file()
    except FileNotFoundError:
        return error_response(
            404,
            "No positions.json file found. Place your positions.json file "
            "in the data/ directory.",
        )
    except ValidationError as exc:
        return error_response(400, "Invalid positions file", str(exc))
    except Exception as exc:
        logger.error("Error importing positions: %s", exc)
        return error_response(500, "Failed to import positions", str(exc))

    count = result["count"]
    return PositionsImportResponse(
        message=f"Successfully imported {count} positions", count=count
    )
