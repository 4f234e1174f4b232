"""Tests for the position set store: active pointer, delete, and lookups."""

import pytest
from sqlalchemy import func, select

from src.core.database import session_scope
from src.core.exceptions import PositionSetNotFoundError, ValidationError
from src.core.models import Position
from src.portfolio.position_sets import (
    count_positions,
    create_position_set,
    delete_position_set,
    get_active_position_set,
    get_active_position_set_id,
    get_all_position_sets,
    is_using_demo_data,
    set_active_position_set,
)


def _active_ids() -> list[int]:
    with session_scope() as session:
        return [s["id"] for s in get_all_position_sets(session) if s["is_active"]]


# ============================================================================
# Creation
# ============================================================================


class TestCreatePositionSet:
    def test_new_set_is_inactive_by_default(self, db):
        with session_scope() as session:
            set_id = create_position_set(session, "alpha", "Alpha")
            assert get_active_position_set_id(session) is None
        assert set_id > 0

    def test_create_active_set_moves_pointer(self, make_position_set):
        first = make_position_set("alpha", active=True)
        second = make_position_set("beta", active=True)
        assert first != second
        assert _active_ids() == [second]

    def test_duplicate_name_rejected(self, make_position_set):
        make_position_set("alpha")
        with pytest.raises(ValidationError):
            make_position_set("alpha")

    def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            with session_scope() as session:
                create_position_set(session, "   ", "Blank")


# ============================================================================
# Activation
# ============================================================================


class TestActivation:
    def test_exactly_one_active_after_each_activation(self, make_position_set):
        ids = [make_position_set(name) for name in ("a", "b", "c")]
        for set_id in [ids[1], ids[0], ids[2], ids[2], ids[1]]:
            with session_scope() as session:
                set_active_position_set(session, set_id)
            assert _active_ids() == [set_id]

    def test_reactivating_active_set_is_noop(self, make_position_set):
        set_id = make_position_set("alpha", active=True)
        with session_scope() as session:
            before = get_active_position_set(session)
        with session_scope() as session:
            set_active_position_set(session, set_id)
        with session_scope() as session:
            after = get_active_position_set(session)
        assert before == after

    def test_activate_missing_set_raises(self, make_position_set):
        active = make_position_set("alpha", active=True)
        with pytest.raises(PositionSetNotFoundError) as exc_info:
            with session_scope() as session:
                set_active_position_set(session, 999)
        assert str(exc_info.value) == "Position set not found"
        assert exc_info.value.position_set_id == 999
        assert _active_ids() == [active]

    def test_active_set_listed_first(self, make_position_set):
        make_position_set("a")
        make_position_set("b")
        third = make_position_set("c", active=True)
        with session_scope() as session:
            names = [s["name"] for s in get_all_position_sets(session)]
            active = get_active_position_set(session)
        assert names == ["c", "a", "b"]
        assert active["id"] == third
        assert active["is_active"] is True


# ============================================================================
# Deletion
# ============================================================================


class TestDeletion:
    def test_delete_removes_positions(self, make_position_set, sample_positions):
        keep = make_position_set("keep", positions=sample_positions[:1])
        doomed = make_position_set("doomed", positions=sample_positions)
        with session_scope() as session:
            assert count_positions(session, doomed) == 3
            delete_position_set(session, doomed)
        with session_scope() as session:
            remaining = session.scalars(select(Position.position_set_id)).all()
            assert set(remaining) == {keep}
            assert [s["id"] for s in get_all_position_sets(session)] == [keep]

    def test_delete_active_leaves_no_active_set(self, make_position_set):
        other = make_position_set("other")
        active = make_position_set("active", active=True)
        with session_scope() as session:
            delete_position_set(session, active)
        with session_scope() as session:
            assert get_active_position_set(session) is None
            assert [s["id"] for s in get_all_position_sets(session)] == [other]

    def test_delete_missing_set_raises(self, db):
        with pytest.raises(PositionSetNotFoundError):
            with session_scope() as session:
                delete_position_set(session, 42)

    def test_delete_last_set(self, make_position_set):
        only = make_position_set("only", active=True)
        with session_scope() as session:
            delete_position_set(session, only)
        with session_scope() as session:
            assert get_all_position_sets(session) == []
            assert session.scalar(select(func.count()).select_from(Position)) == 0


class TestDemoFlag:
    def test_demo_detected_from_active_info_type(self, make_position_set):
        make_position_set("demo", active=True, info_type="warning")
        with session_scope() as session:
            assert is_using_demo_data(session) is True

    def test_no_active_set_is_not_demo(self, make_position_set):
        make_position_set("demo", info_type="warning")
        with session_scope() as session:
            assert is_using_demo_data(session) is False
