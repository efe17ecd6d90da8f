from __future__ import annotations

from datetime import timezone
from types import SimpleNamespace

import pytest
from scheduling_helpers import at, booking
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    EntityNotFoundException,
    InvalidIntervalException,
    InvalidTransitionException,
    OfferingMissingException,
    SchedulingConflictException,
)
from app.models import SkillSession
from app.models.session import SessionStatus
from app.schemas.session import SessionUpdate
from app.services.session_store import (
    LEARNER_CONFLICT_MESSAGE,
    TEACHER_CONFLICT_MESSAGE,
    SessionStore,
)


@pytest.fixture
def store(db: Session) -> SessionStore:
    return SessionStore(db)


def _book(store: SessionStore, directory: SimpleNamespace, start_h: float, end_h: float, **overrides) -> SkillSession:
    data = {
        "teacher_id": directory.teacher.id,
        "learner_id": directory.learner.id,
        "skill_id": directory.skill.id,
    }
    data.update(overrides)
    return store.create_session(
        booking(data.pop("teacher_id"), data.pop("learner_id"), data.pop("skill_id"), at(start_h), at(end_h), **data)
    )


def _session_count(db: Session) -> int:
    return db.query(SkillSession).count()


class TestCreateSession:
    def test_creates_pending_session_with_details(self, store, directory, db) -> None:
        session = _book(store, directory, 0, 1, notes="Bring a capo")

        assert session.id
        assert session.status == SessionStatus.PENDING.value
        assert session.notes == "Bring a capo"
        assert session.teacher.name == "Ada"
        assert session.learner.name == "Lin"
        assert session.skill.name == "Guitar"
        assert session.has_review is False
        assert session.is_active
        assert session.confirmed_at is None
        assert session.completed_at is None
        assert _session_count(db) == 1

    def test_stored_instants_are_utc(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)

        assert session.start_time.replace(tzinfo=timezone.utc) == at(0)
        assert session.end_time.replace(tzinfo=timezone.utc) == at(1)

    @pytest.mark.parametrize(
        ("override", "kind"),
        [
            ("teacher_id", "teacher"),
            ("learner_id", "learner"),
            ("skill_id", "skill"),
        ],
    )
    def test_missing_reference_is_not_found(self, store, directory, db, override, kind) -> None:
        with pytest.raises(EntityNotFoundException) as exc_info:
            _book(store, directory, 0, 1, **{override: "01J00000000000000000MISSNG"})

        assert exc_info.value.kind == kind
        assert exc_info.value.status_code == 404
        assert _session_count(db) == 0

    def test_teacher_is_checked_before_learner(self, store, directory) -> None:
        with pytest.raises(EntityNotFoundException) as exc_info:
            _book(store, directory, 0, 1, teacher_id="nope-teacher", learner_id="nope-learner")

        assert exc_info.value.kind == "teacher"

    def test_skill_not_offered_by_teacher(self, store, directory, db) -> None:
        with pytest.raises(OfferingMissingException):
            _book(store, directory, 0, 1, skill_id=directory.unoffered_skill.id)

        assert _session_count(db) == 0

    @pytest.mark.parametrize(("start_h", "end_h"), [(1, 1), (2, 1)])
    def test_empty_or_inverted_interval(self, store, directory, db, start_h, end_h) -> None:
        with pytest.raises(InvalidIntervalException) as exc_info:
            _book(store, directory, start_h, end_h)

        assert exc_info.value.code == "INVALID_INTERVAL"
        assert _session_count(db) == 0

    def test_teacher_overlap_is_rejected(self, store, directory, db) -> None:
        existing = _book(store, directory, 0, 2)

        with pytest.raises(SchedulingConflictException) as exc_info:
            _book(store, directory, 1, 3, learner_id=directory.other_learner.id)

        assert exc_info.value.message == TEACHER_CONFLICT_MESSAGE
        assert exc_info.value.details["conflict_scope"] == "teacher"
        assert exc_info.value.details["conflicting_session_id"] == existing.id
        assert _session_count(db) == 1

    def test_learner_overlap_is_rejected(self, store, directory, db) -> None:
        _book(store, directory, 0, 2)

        with pytest.raises(SchedulingConflictException) as exc_info:
            _book(store, directory, 1.5, 2.5, teacher_id=directory.other_teacher.id)

        assert exc_info.value.message == LEARNER_CONFLICT_MESSAGE
        assert exc_info.value.details["conflict_scope"] == "learner"
        assert _session_count(db) == 1

    def test_containing_interval_is_rejected(self, store, directory) -> None:
        _book(store, directory, 1, 2)

        with pytest.raises(SchedulingConflictException):
            _book(store, directory, 0, 3, learner_id=directory.other_learner.id)

    def test_touching_sessions_are_allowed(self, store, directory, db) -> None:
        _book(store, directory, 1, 2)
        _book(store, directory, 2, 3)
        _book(store, directory, 0, 1)

        assert _session_count(db) == 3

    def test_unrelated_participants_may_overlap(self, store, directory, db) -> None:
        _book(store, directory, 0, 2)
        _book(
            store,
            directory,
            0,
            2,
            teacher_id=directory.other_teacher.id,
            learner_id=directory.other_learner.id,
        )

        assert _session_count(db) == 2

    def test_confirmed_session_still_blocks(self, store, directory) -> None:
        existing = _book(store, directory, 0, 1)
        store.update_session(existing.id, SessionUpdate(status=SessionStatus.CONFIRMED))

        with pytest.raises(SchedulingConflictException):
            _book(store, directory, 0.5, 1.5, learner_id=directory.other_learner.id)

    def test_completed_session_frees_the_interval(self, store, directory, db) -> None:
        existing = _book(store, directory, 0, 1)
        store.update_session(existing.id, SessionUpdate(status=SessionStatus.CONFIRMED))
        completed = store.update_session(existing.id, SessionUpdate(status=SessionStatus.COMPLETED))
        assert not completed.is_active

        _book(store, directory, 0, 1)

        assert _session_count(db) == 2

    def test_non_exclusion_integrity_error_propagates(self, store, directory, db, monkeypatch) -> None:
        def _explode(**_kwargs):
            raise IntegrityError("INSERT", params=None, orig=Exception("some other constraint"))

        monkeypatch.setattr(store.repository, "create", _explode)

        with pytest.raises(IntegrityError):
            _book(store, directory, 0, 1)

        assert _session_count(db) == 0

    def test_exclusion_violation_becomes_conflict(self, store, directory, monkeypatch) -> None:
        def _explode(**_kwargs):
            raise IntegrityError(
                "INSERT",
                params=None,
                orig=Exception('violates exclusion constraint "sessions_no_overlap_per_learner"'),
            )

        monkeypatch.setattr(store.repository, "create", _explode)

        with pytest.raises(SchedulingConflictException) as exc_info:
            _book(store, directory, 0, 1)

        assert exc_info.value.details["conflict_scope"] == "learner"
        assert exc_info.value.message == LEARNER_CONFLICT_MESSAGE


class TestUpdateSession:
    def test_confirm_then_complete_stamps_timestamps(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)

        confirmed = store.update_session(session.id, SessionUpdate(status=SessionStatus.CONFIRMED))
        assert confirmed.status == "CONFIRMED"
        assert confirmed.confirmed_at is not None
        assert confirmed.completed_at is None

        completed = store.update_session(session.id, SessionUpdate(status=SessionStatus.COMPLETED))
        assert completed.status == "COMPLETED"
        assert completed.completed_at is not None
        assert completed.confirmed_at is not None

    def test_skipping_confirmation_is_rejected(self, store, directory, db) -> None:
        session = _book(store, directory, 0, 1)

        with pytest.raises(InvalidTransitionException):
            store.update_session(session.id, SessionUpdate(status=SessionStatus.COMPLETED))

        db.expire_all()
        assert db.get(SkillSession, session.id).status == "PENDING"

    def test_completed_is_terminal(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)
        store.update_session(session.id, SessionUpdate(status=SessionStatus.CONFIRMED))
        store.update_session(session.id, SessionUpdate(status=SessionStatus.COMPLETED))

        for target in SessionStatus:
            with pytest.raises(InvalidTransitionException):
                store.update_session(session.id, SessionUpdate(status=target))

    def test_rejected_transition_does_not_apply_notes(self, store, directory, db) -> None:
        session = _book(store, directory, 0, 1, notes="original")

        with pytest.raises(InvalidTransitionException):
            store.update_session(
                session.id, SessionUpdate(status=SessionStatus.PENDING, notes="changed")
            )

        db.expire_all()
        assert db.get(SkillSession, session.id).notes == "original"

    def test_notes_only_update_keeps_status(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)

        updated = store.update_session(session.id, SessionUpdate(notes="Practice scales"))

        assert updated.status == "PENDING"
        assert updated.notes == "Practice scales"
        assert updated.confirmed_at is None

    def test_notes_can_change_after_completion(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)
        store.update_session(session.id, SessionUpdate(status=SessionStatus.CONFIRMED))
        store.update_session(session.id, SessionUpdate(status=SessionStatus.COMPLETED))

        updated = store.update_session(session.id, SessionUpdate(notes=None))

        assert updated.status == "COMPLETED"
        assert updated.notes is None

    def test_empty_patch_is_a_no_op(self, store, directory) -> None:
        session = _book(store, directory, 0, 1, notes="keep")

        updated = store.update_session(session.id, SessionUpdate())

        assert updated.status == "PENDING"
        assert updated.notes == "keep"

    def test_interval_and_participants_never_change(self, store, directory) -> None:
        session = _book(store, directory, 0, 1)

        updated = store.update_session(session.id, SessionUpdate(status=SessionStatus.CONFIRMED))

        assert (updated.teacher_id, updated.learner_id, updated.skill_id) == (
            session.teacher_id,
            session.learner_id,
            session.skill_id,
        )
        assert updated.start_time == session.start_time
        assert updated.end_time == session.end_time

    def test_missing_session_is_not_found(self, store, directory) -> None:
        with pytest.raises(EntityNotFoundException) as exc_info:
            store.update_session("01J00000000000000000MISSNG", SessionUpdate(notes="x"))

        assert exc_info.value.kind == "session"

    def test_get_session_missing(self, store) -> None:
        with pytest.raises(EntityNotFoundException):
            store.get_session("01J00000000000000000MISSNG")
