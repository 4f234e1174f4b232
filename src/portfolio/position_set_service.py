"""Position set lifecycle service.

Orchestrates the position set store, positions ingestion, and positions
queries behind the operations exposed over HTTP: overview, activate,
delete, export, import, and demo status. Each operation runs in its own
transaction via ``session_scope()``.

Errors are raised as domain exceptions (``src.core.exceptions``); mapping
to HTTP status codes is the route layer's job.
"""

from __future__ import annotations

import json
import re
from typing import Any, Optional
from urllib.parse import quote

from src.core.database import session_scope
from src.core.exceptions import ValidationError
from src.core.utils.logging_config import get_logger

from .position_sets import (
    DEFAULT_INFO_TYPE,
    DEMO_INFO_TYPE,
    create_position_set,
    delete_position_set,
    get_active_position_set,
    get_all_position_sets,
    get_position_set,
    set_active_position_set,
)
from .positions import get_positions_for_set
from .positions_admin import upsert_positions_for_set
from .records import parse_raw_positions

logger = get_logger("position_set_service")

# SQLite INTEGER is a signed 64-bit value
MAX_POSITION_SET_ID = 2**63 - 1


def parse_position_set_id(raw: Any) -> int:
    """Validate a path segment as a positive integer id.

    Raises:
        ValidationError: for anything other than a positive base-10 integer
            that fits in a SQLite INTEGER.
    """
    if isinstance(raw, bool):
        raise ValidationError("Invalid position set ID")
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValidationError("Invalid position set ID")
        value = int(text)
    if value <= 0 or value > MAX_POSITION_SET_ID:
        raise ValidationError("Invalid position set ID")
    return value


def export_filename(position_set_name: str) -> str:
    return f"{position_set_name}-positions.json"


def content_disposition(filename: str) -> str:
    """Attachment header usable with any set name.

    HTTP headers are latin-1, so the plain ``filename`` parameter carries an
    ASCII-only copy and ``filename*`` (RFC 6266) carries the real name.
    """
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "_", filename)
    return (
        f'attachment; filename="{fallback}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )


def serialize_export(export: dict[str, Any]) -> str:
    """Deterministic JSON rendering of an export payload."""
    return json.dumps(export, indent=2, ensure_ascii=False)


class PositionSetService:
    """Lifecycle operations over position sets."""

    def get_overview(self) -> dict[str, Any]:
        with session_scope() as session:
            return {
                "position_sets": get_all_position_sets(session),
                "active_set": get_active_position_set(session),
            }

    def get_active(self) -> Optional[dict[str, Any]]:
        with session_scope() as session:
            return get_active_position_set(session)

    def activate(self, position_set_id: int) -> None:
        with session_scope() as session:
            set_active_position_set(session, position_set_id)

    def delete(self, position_set_id: int) -> None:
        with session_scope() as session:
            delete_position_set(session, position_set_id)

    def export(self, position_set_id: int) -> dict[str, Any]:
        """Return ``{"positionSet": {...}, "positions": [...]}`` without mutating state."""
        with session_scope() as session:
            position_set = get_position_set(session, position_set_id)
            positions = get_positions_for_set(session, position_set_id, order="created")
            header = {
                "name": position_set.name,
                "display_name": position_set.display_name,
                "description": position_set.description,
                "created_at": str(position_set.created_at),
            }
        logger.info(
            "position_set_exported",
            position_set_id=position_set_id,
            positions=len(positions),
        )
        return {"positionSet": header, "positions": positions}

    def import_position_set(
        self,
        name: str,
        positions: Any,
        description: Optional[str] = None,
        set_as_active: bool = False,
    ) -> dict[str, int]:
        """Create a set named ``name`` holding ``positions``.

        Raises:
            ValidationError: missing name, empty/non-list positions, duplicate name.
        """
        if not name or not str(name).strip():
            raise ValidationError("Missing required fields: name and positions array")
        parsed = parse_raw_positions(positions)
        if not parsed:
            raise ValidationError("Positions array cannot be empty")

        with session_scope() as session:
            position_set_id = create_position_set(
                session,
                name=name,
                display_name=name,
                description=description,
                info_type=DEFAULT_INFO_TYPE,
                is_active=set_as_active,
            )
            imported = upsert_positions_for_set(
                session, position_set_id, parsed, replace_existing=True
            )

        logger.info(
            "position_set_imported",
            position_set_id=position_set_id,
            positions=imported,
            set_as_active=set_as_active,
        )
        return {"position_set_id": position_set_id, "positions_imported": imported}

    def get_demo_status(self) -> dict[str, Any]:
        active = self.get_active()
        is_demo = active is not None and active["info_type"] == DEMO_INFO_TYPE
        position_set = None
        if active is not None:
            position_set = {
                key: active[key]
                for key in ("id", "name", "display_name", "description", "info_type")
            }
        return {"isDemoData": is_demo, "isDemo": is_demo, "positionSet": position_set}
