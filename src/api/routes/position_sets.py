"""Position set endpoints.

Provides:
- GET    /position-sets                -- all sets plus the active one
- POST   /position-sets/import         -- create a set from a positions payload
- POST   /position-sets/{id}/activate  -- make a set the active one
- DELETE /position-sets/{id}           -- delete a set and its positions
- GET    /position-sets/{id}/export    -- download a set as JSON
- GET    /demo-status                  -- whether the active set is demo data

A missing set is reported as 404 by export only; activate and delete report
every failure other than a malformed id as 500.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from src.api.responses import error_response
from src.api.schemas.portfolio_schemas import (
    DemoStatusResponse,
    ImportPositionSetRequest,
    ImportPositionSetResponse,
    MessageResponse,
    PositionSetsOverviewResponse,
)
from src.core.exceptions import NotFoundError, ValidationError
from src.portfolio import (
    PositionSetService,
    content_disposition,
    export_filename,
    parse_position_set_id,
    serialize_export,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Position Sets"])

# ---------------------------------------------------------------------------
# Lazy singleton for PositionSetService
# ---------------------------------------------------------------------------
_service = None


def _get_service() -> PositionSetService:
    """Return (or create) the module-level PositionSetService singleton."""
    global _service
    if _service is None:
        _service = PositionSetService()
    return _service


# ---------------------------------------------------------------------------
# 1. GET /position-sets
# ---------------------------------------------------------------------------
@router.get("/position-sets", response_model=PositionSetsOverviewResponse)
def list_position_sets():
    """Return every position set and the active one (or null)."""
    try:
        return _get_service().get_overview()
    except Exception as exc:
        logger.error("Error fetching position sets: %s", exc)
        return error_response(500, "Failed to fetch position sets")


# ---------------------------------------------------------------------------
# 2. POST /position-sets/import
# ---------------------------------------------------------------------------
@router.post("/position-sets/import", response_model=ImportPositionSetResponse)
def import_position_set(body: ImportPositionSetRequest):
    """Create a new position set from a list of raw positions."""
    try:
        result = _get_service().import_position_set(
            name=body.name or "",
            positions=body.positions,
            description=body.description,
            set_as_active=body.set_as_active,
        )
        return ImportPositionSetResponse(
            message="Position set imported successfully", **result
        )
    except ValidationError as exc:
        return error_response(400, str(exc))
    except Exception as exc:
        logger.error("Error importing position set: %s", exc)
        return error_response(500, "Failed to import position set", str(exc))


# ---------------------------------------------------------------------------
# 3. POST /position-sets/{id}/activate
# ---------------------------------------------------------------------------
@router.post("/position-sets/{position_set_id}/activate", response_model=MessageResponse)
def activate_position_set(position_set_id: str):
    """Make the given set the single active set."""
    try:
        set_id = parse_position_set_id(position_set_id)
    except ValidationError as exc:
        return error_response(400, str(exc))

    try:
        _get_service().activate(set_id)
        return MessageResponse(message="Position set activated successfully")
    except Exception as exc:
        logger.error("Error activating position set %s: %s", set_id, exc)
        return error_response(500, "Failed to activate position set", str(exc))


# ---------------------------------------------------------------------------
# 4. DELETE /position-sets/{id}
# ---------------------------------------------------------------------------
@router.delete("/position-sets/{position_set_id}", response_model=MessageResponse)
def delete_position_set(position_set_id: str):
    """Delete a set and all of its positions."""
    try:
        set_id = parse_position_set_id(position_set_id)
    except ValidationError as exc:
        return error_response(400, str(exc))

    try:
        _get_service().delete(set_id)
        return MessageResponse(message="Position set deleted successfully")
    except Exception as exc:
        logger.error("Error deleting position set %s: %s", set_id, exc)
        return error_response(500, str(exc) or "Failed to delete position set")


# ---------------------------------------------------------------------------
# 5. GET /position-sets/{id}/export
# ---------------------------------------------------------------------------
@router.get("/position-sets/{position_set_id}/export")
def export_position_set(position_set_id: str):
    """Download a set and its positions as an attachment."""
    try:
        set_id = parse_position_set_id(position_set_id)
    except ValidationError as exc:
        return error_response(400, str(exc))

    try:
        export = _get_service().export(set_id)
        filename = export_filename(export["positionSet"]["name"])
        return Response(
            content=serialize_export(export),
            media_type="application/json",
            headers={"Content-Disposition": content_disposition(filename)},
        )
    except NotFoundError as exc:
        return error_response(404, str(exc))
    except Exception as exc:
        logger.error("Error exporting position set %s: %s", set_id, exc)
        return error_response(500, "Failed to export position set", str(exc))


# ---------------------------------------------------------------------------
# 6. GET /demo-status
# ---------------------------------------------------------------------------
@router.get("/demo-status", response_model=DemoStatusResponse)
def demo_status():
    """Report whether the active set is flagged as demo data."""
    try:
        return _get_service().get_demo_status()
    except Exception as exc:
        logger.error("Error checking demo status: %s", exc)
        return error_response(500, "Failed to check demo status")
