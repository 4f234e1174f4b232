"""Position set management package.

Provides the position-set lifecycle:
- PositionSetService: overview, activate, delete, export, import, demo status.
- write_positions: replace the active set's holdings from a client batch.
- get_historical_data_status: freshness of stored price history.
- lookup_fx_rate / update_fx_rate: stored FX rates by pair and date.
"""

from src.portfolio.fx_rates import lookup_fx_rate, update_fx_rate
from src.portfolio.historical_data import (
    HistoricalDataStatus,
    get_historical_data_status,
    get_historical_data_summary,
)
from src.portfolio.position_set_service import (
    PositionSetService,
    content_disposition,
    export_filename,
    parse_position_set_id,
    serialize_export,
)
from src.portfolio.positions_admin import write_positions
from src.portfolio.records import RawPosition

__all__ = [
    "HistoricalDataStatus",
    "PositionSetService",
    "RawPosition",
    "content_disposition",
    "export_filename",
    "get_historical_data_status",
    "get_historical_data_summary",
    "lookup_fx_rate",
    "parse_position_set_id",
    "serialize_export",
    "update_fx_rate",
    "write_positions",
]
