"""Unit tests for PriorityService."""

from datetime import datetime, timedelta, timezone

import pytest

from priority_tracker.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from priority_tracker.models.priority import Priority, PriorityStatus
from priority_tracker.services.priority_service import PriorityService
from priority_tracker.utils.weeks import WEEK_SPAN, get_week_dates


@pytest.fixture
def priority_service(test_db_session, test_config):
    """Create a priority service with test session."""
    return PriorityService(test_db_session, test_config)


@pytest.fixture
def own_priority(priority_service, user_principal, initiative, week_day):
    return priority_service.create_priority(
        user_principal, title="Cerrar propuesta", initiative_id=initiative.id, week_start=week_day
    )


@pytest.fixture
def foreign_priority(priority_service, other_principal, initiative, week_day):
    return priority_service.create_priority(
        other_principal, title="Someone else's", initiative_id=initiative.id, week_start=week_day
    )


class TestCreatePriority:
    """Tests for priority creation."""

    def test_create_defaults(self, priority_service, user_principal, initiative, week_day):
        priority = priority_service.create_priority(
            user_principal,
            title="  Lanzar piloto  ",
            description="Con el cliente actual",
            initiative_id=initiative.id,
            week_start=week_day,
        )

        assert priority.id is not None
        assert priority.title == "Lanzar piloto"
        assert priority.user_id == user_principal.id
        assert priority.completion_percentage == 0
        assert priority.status == PriorityStatus.EN_TIEMPO
        assert priority.was_edited is False
        assert priority.last_edited_at is None
        assert priority.is_carried_over is False

    def test_week_normalized(self, own_priority):
        """Any day of the week is stored as that week's Monday-Friday range."""
        assert own_priority.week_start == datetime(2025, 10, 13)
        assert own_priority.week_end - own_priority.week_start == WEEK_SPAN

    def test_defaults_to_current_week(self, priority_service, user_principal, initiative):
        priority = priority_service.create_priority(
            user_principal, title="Now", initiative_id=initiative.id
        )
        assert priority.week_start == get_week_dates(tz=priority_service.tz).monday

    def test_same_instant_same_week(self, priority_service, user_principal, initiative):
        """An offset is converted to the configured zone, not dropped."""
        a = priority_service.create_priority(
            user_principal,
            title="A",
            initiative_id=initiative.id,
            week_start=datetime(2025, 10, 13, 0, 0, tzinfo=timezone(timedelta(hours=2))),
        )
        b = priority_service.create_priority(
            user_principal,
            title="B",
            initiative_id=initiative.id,
            week_start=datetime(2025, 10, 12, 22, 0, tzinfo=timezone.utc),
        )

        assert a.week_start == b.week_start == datetime(2025, 10, 6)

    def test_week_end_in_other_week_rejected(
        self, priority_service, user_principal, initiative, week_day
    ):
        with pytest.raises(ValidationError, match="same week"):
            priority_service.create_priority(
                user_principal,
                title="Spans two weeks",
                initiative_id=initiative.id,
                week_start=week_day,
                week_end=week_day + timedelta(days=7),
            )

    def test_percentage_above_100_rejected(self, priority_service, user_principal, initiative):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            priority_service.create_priority(
                user_principal, title="Overdone", initiative_id=initiative.id, completion_percentage=150
            )

    def test_negative_percentage_rejected(self, priority_service, user_principal, initiative):
        with pytest.raises(ValidationError):
            priority_service.create_priority(
                user_principal, title="Negative", initiative_id=initiative.id, completion_percentage=-1
            )

    def test_title_required(self, priority_service, user_principal, initiative):
        with pytest.raises(ValidationError, match="Title"):
            priority_service.create_priority(user_principal, title="   ", initiative_id=initiative.id)

    def test_title_too_long(self, priority_service, user_principal, initiative):
        with pytest.raises(ValidationError, match="150"):
            priority_service.create_priority(user_principal, title="x" * 151, initiative_id=initiative.id)

    def test_unknown_initiative(self, priority_service, user_principal):
        with pytest.raises(ValidationError, match="Initiative"):
            priority_service.create_priority(user_principal, title="Orphan", initiative_id=9999)

    def test_user_cannot_create_for_other(self, priority_service, user_principal, other_user, initiative):
        with pytest.raises(ForbiddenError):
            priority_service.create_priority(
                user_principal, title="For you", initiative_id=initiative.id, user_id=other_user.id
            )

    def test_admin_creates_for_user(self, priority_service, admin_principal, regular_user, initiative):
        priority = priority_service.create_priority(
            admin_principal, title="Assigned", initiative_id=initiative.id, user_id=regular_user.id
        )
        assert priority.user_id == regular_user.id

    def test_admin_creates_for_missing_user(self, priority_service, admin_principal, initiative):
        with pytest.raises(ValidationError, match="User"):
            priority_service.create_priority(
                admin_principal, title="Ghost", initiative_id=initiative.id, user_id=9999
            )

    def test_anonymous(self, priority_service, initiative):
        with pytest.raises(UnauthenticatedError):
            priority_service.create_priority(None, title="Anon", initiative_id=initiative.id)

    def test_round_trip(self, priority_service, user_principal, initiative, week_day):
        """Fetching right after creating returns the same values."""
        created = priority_service.create_priority(
            user_principal,
            title="Round trip",
            description="details",
            initiative_id=initiative.id,
            week_start=week_day,
            completion_percentage=40,
            status=PriorityStatus.EN_RIESGO,
        )

        fetched = priority_service.get_priority_for(user_principal, created.id)

        assert fetched.title == "Round trip"
        assert fetched.description == "details"
        assert fetched.initiative_id == initiative.id
        assert fetched.completion_percentage == 40
        assert fetched.status == PriorityStatus.EN_RIESGO
        assert fetched.week_start == created.week_start
        assert fetched.week_end == created.week_end
        assert fetched.was_edited is False


class TestReadPriorities:
    """Tests for listing and fetching."""

    def test_user_lists_only_own(self, priority_service, user_principal, own_priority, foreign_priority):
        ids = [p.id for p in priority_service.get_priorities(user_principal)]
        assert ids == [own_priority.id]

    def test_user_listing_other_user_forbidden(
        self, priority_service, user_principal, other_user, foreign_priority
    ):
        with pytest.raises(ForbiddenError):
            priority_service.get_priorities(user_principal, user_id=other_user.id)

    def test_admin_lists_all(self, priority_service, admin_principal, own_priority, foreign_priority):
        ids = {p.id for p in priority_service.get_priorities(admin_principal)}
        assert ids == {own_priority.id, foreign_priority.id}

    def test_admin_filters_by_user(
        self, priority_service, admin_principal, regular_user, own_priority, foreign_priority
    ):
        ids = [p.id for p in priority_service.get_priorities(admin_principal, user_id=regular_user.id)]
        assert ids == [own_priority.id]

    def test_filter_by_week(self, priority_service, user_principal, initiative, own_priority, week_day):
        older = priority_service.create_priority(
            user_principal,
            title="Last week",
            initiative_id=initiative.id,
            week_start=week_day - timedelta(days=7),
        )

        week = get_week_dates(week_day)
        this_week = priority_service.get_week_priorities(user_principal, week)
        assert [p.id for p in this_week] == [own_priority.id]

        everything = priority_service.get_priorities(user_principal)
        assert [p.id for p in everything] == [own_priority.id, older.id]

    def test_filter_bounds_select_whole_weeks(self, priority_service, user_principal, own_priority):
        """Bounds in the middle of a week, with an offset, still select that week."""
        result = priority_service.get_priorities(
            user_principal,
            week_start=datetime(2025, 10, 13, 6, 0, tzinfo=timezone.utc),
            week_end=datetime(2025, 10, 18, 5, 59, 59, 999000, tzinfo=timezone.utc),
        )
        assert [p.id for p in result] == [own_priority.id]

    def test_filter_bounds_exclude_other_weeks(self, priority_service, user_principal, own_priority):
        result = priority_service.get_priorities(
            user_principal,
            week_start=datetime(2025, 10, 20, 12, 0),
            week_end=datetime(2025, 10, 24, 12, 0),
        )
        assert result == []

    def test_filter_by_initiative(
        self, priority_service, user_principal, second_initiative, own_priority, week_day
    ):
        tagged = priority_service.create_priority(
            user_principal, title="Other tag", initiative_id=second_initiative.id, week_start=week_day
        )

        result = priority_service.get_priorities(user_principal, initiative_id=second_initiative.id)
        assert [p.id for p in result] == [tagged.id]

    def test_get_foreign_priority_forbidden(self, priority_service, user_principal, foreign_priority):
        with pytest.raises(ForbiddenError):
            priority_service.get_priority_for(user_principal, foreign_priority.id)

    def test_get_missing(self, priority_service, user_principal):
        with pytest.raises(NotFoundError):
            priority_service.get_priority_for(user_principal, 9999)


class TestUpdatePriority:
    """Tests for partial updates."""

    def test_update_marks_edited(self, priority_service, user_principal, own_priority):
        updated = priority_service.update_priority(
            user_principal,
            own_priority.id,
            completion_percentage=100,
            status=PriorityStatus.COMPLETADO,
        )

        assert updated.completion_percentage == 100
        assert updated.status == PriorityStatus.COMPLETADO
        assert updated.title == "Cerrar propuesta"
        assert updated.was_edited is True
        assert updated.last_edited_at is not None

    def test_empty_update_still_marks_edited(self, priority_service, user_principal, own_priority):
        updated = priority_service.update_priority(user_principal, own_priority.id)
        assert updated.was_edited is True

    def test_move_to_other_week(self, priority_service, user_principal, own_priority, week_day):
        updated = priority_service.update_priority(
            user_principal, own_priority.id, week_start=week_day + timedelta(days=7)
        )

        assert updated.week_start == datetime(2025, 10, 20)
        assert updated.week_end - updated.week_start == WEEK_SPAN

    def test_update_foreign_forbidden(self, priority_service, user_principal, foreign_priority):
        with pytest.raises(ForbiddenError):
            priority_service.update_priority(user_principal, foreign_priority.id, title="Mine now")

    def test_user_cannot_reassign(self, priority_service, user_principal, other_user, own_priority):
        with pytest.raises(ForbiddenError):
            priority_service.update_priority(user_principal, own_priority.id, user_id=other_user.id)

    def test_admin_reassigns(self, priority_service, admin_principal, other_user, own_priority):
        updated = priority_service.update_priority(admin_principal, own_priority.id, user_id=other_user.id)
        assert updated.user_id == other_user.id

    def test_update_percentage_bounds(self, priority_service, user_principal, own_priority):
        with pytest.raises(ValidationError):
            priority_service.update_priority(user_principal, own_priority.id, completion_percentage=101)

    def test_last_write_wins(self, priority_service, user_principal, own_priority):
        priority_service.update_priority(user_principal, own_priority.id, title="First")
        updated = priority_service.update_priority(user_principal, own_priority.id, title="Second")
        assert updated.title == "Second"

    def test_clear_description(self, priority_service, user_principal, initiative, week_day):
        priority = priority_service.create_priority(
            user_principal,
            title="Con nota",
            description="Temporal",
            initiative_id=initiative.id,
            week_start=week_day,
        )

        kept = priority_service.update_priority(user_principal, priority.id, title="Con nota 2")
        assert kept.description == "Temporal"

        cleared = priority_service.update_priority(user_principal, priority.id, clear_description=True)
        assert cleared.description is None


class TestDeletePriority:
    def test_delete_own(self, priority_service, test_db_session, user_principal, own_priority):
        priority_service.delete_priority(user_principal, own_priority.id)
        assert test_db_session.get(Priority, own_priority.id) is None

    def test_delete_foreign_forbidden(self, priority_service, user_principal, foreign_priority):
        with pytest.raises(ForbiddenError):
            priority_service.delete_priority(user_principal, foreign_priority.id)

    def test_admin_deletes_any(self, priority_service, admin_principal, foreign_priority):
        priority_service.delete_priority(admin_principal, foreign_priority.id)
        assert priority_service.get_priority(foreign_priority.id) is None


def test_status_labels():
    assert PriorityStatus.EN_TIEMPO.label == "En Tiempo"
    assert PriorityStatus.BLOQUEADO.label == "Bloqueado"
