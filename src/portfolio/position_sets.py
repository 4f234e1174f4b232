"""Position set store -- named snapshots of holdings with one active pointer.

All functions take an open Session and never commit; the caller owns the
transaction (see ``src.core.database.session_scope``). Position sets are
returned as plain dicts so the API layer never touches ORM instances.

Invariant: at most one set is active. The active set is the one named by
the singleton ``active_position_set`` row, so activation is one UPDATE.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from src.core.exceptions import PositionSetNotFoundError, ValidationError
from src.core.models import (
    ACTIVE_POINTER_ID,
    ActivePositionSet,
    Position,
    PositionSet,
)
from src.core.utils.logging_config import get_logger

logger = get_logger("position_sets")

DEMO_INFO_TYPE = "warning"
DEFAULT_INFO_TYPE = "info"


def _get_pointer(session: Session) -> ActivePositionSet:
    pointer = session.get(ActivePositionSet, ACTIVE_POINTER_ID)
    if pointer is None:
        # Databases created before the pointer row existed
        pointer = ActivePositionSet(id=ACTIVE_POINTER_ID, position_set_id=None)
        session.add(pointer)
        session.flush()
    return pointer


def get_active_position_set_id(session: Session) -> Optional[int]:
    pointer = session.get(ActivePositionSet, ACTIVE_POINTER_ID)
    return pointer.position_set_id if pointer is not None else None


def to_dict(position_set: PositionSet, active_id: Optional[int]) -> dict[str, Any]:
    """Serialize a PositionSet row, deriving ``is_active`` from the pointer."""
    return {
        "id": position_set.id,
        "name": position_set.name,
        "display_name": position_set.display_name,
        "description": position_set.description,
        "info_type": position_set.info_type or DEFAULT_INFO_TYPE,
        "is_active": position_set.id == active_id,
        "created_at": str(position_set.created_at) if position_set.created_at else None,
        "updated_at": str(position_set.updated_at) if position_set.updated_at else None,
    }


def get_position_set(session: Session, position_set_id: int) -> PositionSet:
    """Return the ORM row or raise PositionSetNotFoundError."""
    position_set = session.get(PositionSet, position_set_id)
    if position_set is None:
        raise PositionSetNotFoundError(position_set_id)
    return position_set


def get_all_position_sets(session: Session) -> list[dict[str, Any]]:
    """All sets, active first, then by creation time and id."""
    active_id = get_active_position_set_id(session)
    rows = session.scalars(
        select(PositionSet).order_by(PositionSet.created_at, PositionSet.id)
    ).all()
    sets = [to_dict(row, active_id) for row in rows]
    # Stable sort keeps the creation order among inactive sets
    sets.sort(key=lambda s: not s["is_active"])
    return sets


def get_active_position_set(session: Session) -> Optional[dict[str, Any]]:
    active_id = get_active_position_set_id(session)
    if active_id is None:
        return None
    position_set = session.get(PositionSet, active_id)
    if position_set is None:
        return None
    return to_dict(position_set, active_id)


def create_position_set(
    session: Session,
    name: str,
    display_name: str,
    description: Optional[str] = None,
    info_type: str = DEFAULT_INFO_TYPE,
    is_active: bool = False,
) -> int:
    """Insert a new set and return its id; optionally make it the active set."""
    if not name or not name.strip():
        raise ValidationError("Position set name is required")
    exists = session.scalar(select(PositionSet.id).where(PositionSet.name == name))
    if exists is not None:
        raise ValidationError(f"Position set '{name}' already exists")

    position_set = PositionSet(
        name=name,
        display_name=display_name or name,
        description=description or None,
        info_type=info_type or DEFAULT_INFO_TYPE,
    )
    session.add(position_set)
    session.flush()

    if is_active:
        _get_pointer(session).position_set_id = position_set.id
        session.flush()

    logger.info(
        "position_set_created",
        position_set_id=position_set.id,
        name=name,
        is_active=is_active,
    )
    return position_set.id


def set_active_position_set(session: Session, position_set_id: int) -> None:
    """Point the active marker at ``position_set_id``.

    Raises:
        PositionSetNotFoundError: if the set does not exist.
    """
    get_position_set(session, position_set_id)
    pointer = _get_pointer(session)
    if pointer.position_set_id == position_set_id:
        return
    previous = pointer.position_set_id
    pointer.position_set_id = position_set_id
    session.flush()
    logger.info(
        "position_set_activated",
        position_set_id=position_set_id,
        previous_position_set_id=previous,
    )


def delete_position_set(session: Session, position_set_id: int) -> None:
    """Delete a set and every position belonging to it.

    Deleting the active set leaves no set active.

    Raises:
        PositionSetNotFoundError: if the set does not exist.
    """
    position_set = get_position_set(session, position_set_id)

    pointer = _get_pointer(session)
    if pointer.position_set_id == position_set_id:
        pointer.position_set_id = None
        session.flush()

    removed = session.execute(
        delete(Position).where(Position.position_set_id == position_set_id)
    ).rowcount
    session.delete(position_set)
    session.flush()
    logger.info(
        "position_set_deleted",
        position_set_id=position_set_id,
        positions_removed=removed,
    )


def count_positions(session: Session, position_set_id: int) -> int:
    return session.scalar(
        select(func.count())
        .select_from(Position)
        .where(Position.position_set_id == position_set_id)
    ) or 0


def is_using_demo_data(session: Session) -> bool:
    active = get_active_position_set(session)
    return active is not None and active["info_type"] == DEMO_INFO_TYPE
