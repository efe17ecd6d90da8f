from __future__ import annotations

from typing import Any, Dict

from fastapi.testclient import TestClient
import pytest
from scheduling_helpers import at

from app.core.exceptions import RepositoryException
from app.repositories.session_repository import SessionRepository

SESSIONS = "/api/v1/sessions"
UNKNOWN_ULID = "01HZY3N8Q4V6R2K9J7M5T1B0CD"


def _body(directory, start_h: float = 0, end_h: float = 1, **overrides: Any) -> Dict[str, Any]:
    body = {
        "teacherId": directory.teacher.id,
        "learnerId": directory.learner.id,
        "skillId": directory.skill.id,
        "startTime": at(start_h).isoformat(),
        "endTime": at(end_h).isoformat(),
    }
    body.update(overrides)
    return body


@pytest.fixture
def learner_headers(auth_headers, directory):
    return auth_headers(directory.learner.id, "LEARNER")


@pytest.fixture
def teacher_headers(auth_headers, directory):
    return auth_headers(directory.teacher.id, "TEACHER")


@pytest.fixture
def admin_headers(auth_headers):
    return auth_headers("01HZY3N8Q4V6R2K9J7M5ADM1N0", "ADMIN")


def _create(client, directory, headers, **kwargs) -> Dict[str, Any]:
    response = client.post(SESSIONS, json=_body(directory, **kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _patch(client, session_id: str, body: Dict[str, Any], headers):
    return client.patch(f"{SESSIONS}/{session_id}", json=body, headers=headers)


class TestCreateSessionRoute:
    def test_learner_books_session(self, client, directory, learner_headers) -> None:
        payload = _create(client, directory, learner_headers, notes="First lesson")

        assert payload["status"] == "PENDING"
        assert payload["teacherId"] == directory.teacher.id
        assert payload["learnerId"] == directory.learner.id
        assert payload["notes"] == "First lesson"
        assert payload["startTime"] == "2030-01-07T09:00:00Z"
        assert payload["endTime"] == "2030-01-07T10:00:00Z"
        assert payload["teacher"]["name"] == "Ada"
        assert payload["skill"]["name"] == "Guitar"
        assert payload["hasReview"] is False
        assert payload["confirmedAt"] is None

    def test_admin_books_for_any_learner(self, client, directory, admin_headers) -> None:
        payload = _create(
            client, directory, admin_headers, learnerId=directory.other_learner.id
        )
        assert payload["learnerId"] == directory.other_learner.id

    def test_missing_token_is_401(self, client, directory) -> None:
        response = client.post(SESSIONS, json=_body(directory))

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")

    def test_garbage_token_is_401(self, client, directory) -> None:
        response = client.post(
            SESSIONS, json=_body(directory), headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_teacher_cannot_book(self, client, directory, teacher_headers) -> None:
        response = client.post(SESSIONS, json=_body(directory), headers=teacher_headers)
        assert response.status_code == 403

    def test_learner_cannot_book_for_someone_else(self, client, directory, learner_headers) -> None:
        response = client.post(
            SESSIONS,
            json=_body(directory, learnerId=directory.other_learner.id),
            headers=learner_headers,
        )

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_unknown_teacher_is_404(self, client, directory, learner_headers) -> None:
        response = client.post(
            SESSIONS, json=_body(directory, teacherId=UNKNOWN_ULID), headers=learner_headers
        )

        assert response.status_code == 404
        problem = response.json()
        assert problem["code"] == "NOT_FOUND"
        assert problem["detail"] == "Teacher not found"
        assert problem["instance"] == SESSIONS

    def test_skill_not_offered_is_400(self, client, directory, learner_headers) -> None:
        response = client.post(
            SESSIONS,
            json=_body(directory, skillId=directory.unoffered_skill.id),
            headers=learner_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "OFFERING_MISSING"

    def test_inverted_interval_is_400(self, client, directory, learner_headers) -> None:
        response = client.post(SESSIONS, json=_body(directory, 2, 1), headers=learner_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_INTERVAL"

    def test_overlap_is_a_scheduling_conflict(self, client, directory, learner_headers, auth_headers) -> None:
        existing = _create(client, directory, learner_headers, start_h=0, end_h=2)

        response = client.post(
            SESSIONS,
            json=_body(directory, 1, 3, learnerId=directory.other_learner.id),
            headers=auth_headers(directory.other_learner.id, "LEARNER"),
        )

        assert response.status_code == 400
        problem = response.json()
        assert problem["code"] == "SCHEDULING_CONFLICT"
        assert problem["detail"] == "Teacher already has a session at this time"
        assert problem["errors"]["conflict_scope"] == "teacher"
        assert problem["errors"]["conflicting_session_id"] == existing["id"]

    def test_back_to_back_sessions_are_allowed(self, client, directory, learner_headers) -> None:
        _create(client, directory, learner_headers, start_h=0, end_h=1)
        _create(client, directory, learner_headers, start_h=1, end_h=2)

    @pytest.mark.parametrize(
        "mutation",
        [
            {"startTime": "next tuesday"},
            {"teacherId": None},
            {"unexpected": "field"},
            {"notes": "x" * 2001},
        ],
    )
    def test_malformed_body_is_422(self, client, directory, learner_headers, mutation) -> None:
        response = client.post(SESSIONS, json=_body(directory, **mutation), headers=learner_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_missing_field_is_422(self, client, directory, learner_headers) -> None:
        body = _body(directory)
        del body["skillId"]

        response = client.post(SESSIONS, json=body, headers=learner_headers)

        assert response.status_code == 422


class TestUpdateSessionRoute:
    def test_teacher_confirms_and_completes(self, client, directory, learner_headers, teacher_headers) -> None:
        created = _create(client, directory, learner_headers)

        confirmed = _patch(client, created["id"], {"status": "CONFIRMED"}, teacher_headers)
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "CONFIRMED"
        assert confirmed.json()["confirmedAt"] is not None

        completed = _patch(client, created["id"], {"status": "COMPLETED"}, teacher_headers)
        assert completed.status_code == 200
        assert completed.json()["status"] == "COMPLETED"
        assert completed.json()["completedAt"] is not None

    def test_invalid_transition_is_400(self, client, directory, learner_headers, teacher_headers) -> None:
        created = _create(client, directory, learner_headers)

        response = _patch(client, created["id"], {"status": "COMPLETED"}, teacher_headers)

        assert response.status_code == 400
        problem = response.json()
        assert problem["code"] == "INVALID_TRANSITION"
        assert problem["detail"] == "Cannot transition from PENDING to COMPLETED"

    def test_notes_only_patch(self, client, directory, learner_headers, teacher_headers) -> None:
        created = _create(client, directory, learner_headers)

        response = _patch(client, created["id"], {"notes": "Tune before class"}, teacher_headers)

        assert response.status_code == 200
        assert response.json()["notes"] == "Tune before class"
        assert response.json()["status"] == "PENDING"

    def test_other_teacher_is_403(self, client, directory, learner_headers, auth_headers) -> None:
        created = _create(client, directory, learner_headers)

        response = _patch(
            client,
            created["id"],
            {"status": "CONFIRMED"},
            auth_headers(directory.other_teacher.id, "TEACHER"),
        )

        assert response.status_code == 403

    def test_learner_cannot_patch(self, client, directory, learner_headers) -> None:
        created = _create(client, directory, learner_headers)

        response = _patch(client, created["id"], {"notes": "hi"}, learner_headers)

        assert response.status_code == 403

    def test_unknown_session_is_404(self, client, teacher_headers) -> None:
        response = _patch(client, UNKNOWN_ULID, {"notes": "x"}, teacher_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_malformed_session_id_is_422(self, client, teacher_headers) -> None:
        response = _patch(client, "not-a-session-id", {"notes": "x"}, teacher_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_storage_failure_is_500_problem(
        self, client, directory, learner_headers, teacher_headers, monkeypatch
    ) -> None:
        created = _create(client, directory, learner_headers)

        def _fail(self, session_id):
            raise RepositoryException("Failed to lock session: connection reset")

        monkeypatch.setattr(SessionRepository, "get_for_update", _fail)
        failing_client = TestClient(client.app, raise_server_exceptions=False)

        response = _patch(failing_client, created["id"], {"notes": "x"}, teacher_headers)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["code"] == "internal_server_error"

    def test_unknown_status_is_422(self, client, directory, learner_headers, teacher_headers) -> None:
        created = _create(client, directory, learner_headers)

        response = _patch(client, created["id"], {"status": "CANCELLED"}, teacher_headers)

        assert response.status_code == 422


class TestCalendarRoutes:
    @pytest.fixture
    def confirmed(self, client, directory, learner_headers, teacher_headers) -> Dict[str, Any]:
        created = _create(client, directory, learner_headers, start_h=0, end_h=1)
        _create(client, directory, learner_headers, start_h=2, end_h=3)  # stays pending
        response = _patch(client, created["id"], {"status": "CONFIRMED"}, teacher_headers)
        assert response.status_code == 200
        return created

    def test_teacher_calendar(self, client, confirmed, teacher_headers) -> None:
        response = client.get(f"{SESSIONS}/teacher/calendar", headers=teacher_headers)

        assert response.status_code == 200
        events = response.json()
        assert len(events) == 1
        event = events[0]
        assert event["id"] == confirmed["id"]
        assert event["title"] == "Guitar with Lin"
        assert event["start"] == "2030-01-07T09:00:00Z"
        assert event["allDay"] is False
        assert event["extendedProps"]["learnerName"] == "Lin"
        assert "teacherId" not in event["extendedProps"]

    def test_learner_calendar(self, client, confirmed, learner_headers) -> None:
        response = client.get(f"{SESSIONS}/learner/calendar", headers=learner_headers)

        assert response.status_code == 200
        events = response.json()
        assert [event["title"] for event in events] == ["Guitar with Ada"]
        assert "learnerId" not in events[0]["extendedProps"]

    def test_admin_calendar(self, client, confirmed, admin_headers) -> None:
        response = client.get(f"{SESSIONS}/calendar", headers=admin_headers)

        assert response.status_code == 200
        event = response.json()[0]
        assert event["title"] == "Guitar: Ada - Lin"
        assert event["extendedProps"]["teacherName"] == "Ada"
        assert event["extendedProps"]["learnerName"] == "Lin"
        assert event["extendedProps"]["status"] == "CONFIRMED"

    def test_calendar_window(self, client, confirmed, admin_headers) -> None:
        response = client.get(
            f"{SESSIONS}/calendar",
            params={"start": at(1).isoformat(), "end": at(5).isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize(
        ("path", "role"),
        [
            ("/teacher/calendar", "LEARNER"),
            ("/learner/calendar", "TEACHER"),
            ("/calendar", "TEACHER"),
            ("/calendar", "LEARNER"),
        ],
    )
    def test_wrong_role_is_403(self, client, directory, auth_headers, path: str, role: str) -> None:
        response = client.get(f"{SESSIONS}{path}", headers=auth_headers(directory.learner.id, role))
        assert response.status_code == 403

    def test_calendar_requires_token(self, client) -> None:
        assert client.get(f"{SESSIONS}/calendar").status_code == 401
