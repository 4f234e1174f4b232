"""Pydantic v2 request/response schemas for the position set API.

Request bodies keep ``positions`` loosely typed so that shape errors are
reported by the service layer as 400s with a stable ``error`` message
rather than as framework 422s.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# =====================================================================
# REQUEST MODELS
# =====================================================================


class UpdatePositionsRequest(BaseModel):
    """Request body for POST /positions/update."""

    positions: Any = None


class ImportPositionSetRequest(BaseModel):
    """Request body for POST /position-sets/import."""

    name: Optional[str] = None
    description: Optional[str] = None
    positions: Any = None
    set_as_active: bool = False


# =====================================================================
# RESPONSE MODELS
# =====================================================================


class MessageResponse(BaseModel):
    message: str


class PositionSetResponse(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    info_type: str
    is_active: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class PositionSetsOverviewResponse(BaseModel):
    position_sets: list[PositionSetResponse] = Field(default_factory=list)
    active_set: Optional[PositionSetResponse] = None


class ImportPositionSetResponse(BaseModel):
    message: str
    position_set_id: int
    positions_imported: int


class DemoPositionSet(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    info_type: str


class DemoStatusResponse(BaseModel):
    isDemoData: bool
    isDemo: bool
    positionSet: Optional[DemoPositionSet] = None


class UpdatePositionsResponse(BaseModel):
    success: bool = True


class PositionsListResponse(BaseModel):
    positions: list[dict[str, Any]] = Field(default_factory=list)
    message: Optional[str] = None


class PositionsFileStatusResponse(BaseModel):
    hasFile: bool
    positionCount: int
    message: str


class PositionsImportResponse(BaseModel):
    message: str
    count: int


class HistoricalDataStatusResponse(BaseModel):
    needsRefresh: bool
    missingDays: int
    lastDataDate: Optional[str] = None
    reason: str
    timestamp: str


class HistoricalDataSummaryResponse(BaseModel):
    historicalPrices: int
    fxRates: int
    securitiesWithData: int
    lastDataDate: Optional[str] = None
    daysSinceLastData: int


class UpdateFxRateRequest(BaseModel):
    """Request body for POST /fx-rates."""

    fxPair: Any = None
    rate: Any = None
    date: Optional[str] = None


class FxRateResponse(BaseModel):
    pair: str
    rate: Optional[float] = None
    date: Optional[str] = None
    requestedDate: Optional[str] = None
    source: str


class UpdateFxRateResponse(BaseModel):
    success: bool = True
    message: str
    rate: float
    date: str
