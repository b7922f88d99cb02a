"""
API tests for applying, reviewing applications and scheduling interviews.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.crud import users as users_crud
from app.schemas.application import ApplyRequest
from app.services.applications import apply_to_job


def apply(client, candidate, job_id, **extra):
    return client.post(
        "/api/v1/candidate/applications",
        json={"job_id": job_id, **extra},
        headers=candidate["headers"],
    )


@pytest.fixture
def application(client, candidate, published_job):
    response = apply(client, candidate, published_job["id"], cover_letter="Hello!")
    assert response.status_code == 201, response.text
    return response.json()


class TestApply:
    def test_apply_returns_location(self, client, candidate, published_job):
        response = apply(client, candidate, published_job["id"], resume_url="https://cdn.example.com/cv.pdf")

        assert response.status_code == 201
        body = response.json()
        assert body["path"] == f"/api/v1/candidate/applications/{body['id']}"
        assert body["url"] == f"http://testserver{body['path']}"

        detail = client.get(body["path"], headers=candidate["headers"]).json()
        assert detail["application"]["status"] == "APPLIED"
        assert detail["application"]["source"] == "APPLY"
        assert detail["application"]["resume_url"] == "https://cdn.example.com/cv.pdf"
        assert detail["job"]["title"] == "Backend Engineer"

    def test_duplicate_apply_is_409(self, client, candidate, published_job, application):
        response = apply(client, candidate, published_job["id"])
        assert response.status_code == 409
        assert response.json() == {
            "error": "AlreadyApplied",
            "message": "You have already applied to this job.",
        }

        mine = client.get("/api/v1/candidate/applications", headers=candidate["headers"]).json()
        assert len(mine["applications"]) == 1

    def test_draft_job_is_not_found(self, client, candidate, create_job):
        job = create_job()
        assert apply(client, candidate, job["id"]).status_code == 404

    def test_closed_job_is_not_found(self, client, recruiter, candidate, published_job):
        client.post(f"/api/v1/recruiter/jobs/{published_job['id']}/close", headers=recruiter["headers"])
        assert apply(client, candidate, published_job["id"]).status_code == 404

    def test_missing_job(self, client, candidate):
        assert apply(client, candidate, 999).status_code == 404

    def test_notifications_are_written(self, client, recruiter, candidate, published_job, application, drain):
        drain()

        mine = client.get("/api/v1/candidate/notifications", headers=candidate["headers"]).json()
        assert [n["title"] for n in mine["notifications"]] == ["Application received"]

        inbox = client.get("/api/v1/recruiter/notifications", headers=recruiter["headers"]).json()
        new_applicant = [n for n in inbox["notifications"] if n["title"] == "New application"]
        assert len(new_applicant) == 1
        notification = new_applicant[0]
        assert notification["type"] == "APPLICATION"
        assert "1 new applicants for the Backend Engineer position" in notification["message"]
        assert notification["data"]["application_id"] == application["id"]
        assert notification["data"]["path"] == f"/recruiter/jobs/{published_job['id']}/applications"
        recent = notification["data"]["recent_applicants"]
        assert [r["candidate_email"] for r in recent] == ["john.doe@example.com"]
        assert recent[0]["candidate_name"] == "John Doe"

    def test_notification_failure_does_not_fail_apply(self, client, app, candidate, published_job, drain):
        with patch(
            "app.services.notifications.notifications_crud.create_notification",
            side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
        ):
            response = apply(client, candidate, published_job["id"])
            drain()

        assert response.status_code == 201
        assert app.state.dispatcher.failed >= 2

        mine = client.get("/api/v1/candidate/applications", headers=candidate["headers"]).json()
        assert [a["id"] for a in mine["applications"]] == [response.json()["id"]]

    def test_apply_survives_a_stopped_dispatcher(self, client, app, candidate, published_job):
        client.portal.call(app.state.dispatcher.stop)

        response = apply(client, candidate, published_job["id"])
        assert response.status_code == 201
        assert app.state.dispatcher.dropped >= 1

    def test_other_candidate_cannot_read_application(self, client, register, application):
        _, headers, _ = register("someone.else@example.com")
        response = client.get(application["path"], headers=headers)
        assert response.status_code == 403

    def test_deleted_account_cannot_apply(self, client, database, candidate, published_job):
        session = database.session()
        try:
            session.delete(users_crud.get_user(session, candidate["user"]["id"]))
            session.commit()
        finally:
            session.close()

        response = apply(client, candidate, published_job["id"])
        assert response.status_code == 401

    def test_missing_candidate_is_not_a_duplicate(self, db, dispatcher, published_job):
        with pytest.raises(IntegrityError):
            apply_to_job(db, dispatcher, 999, ApplyRequest(job_id=published_job["id"]))
        dispatcher.submit.assert_not_called()


class TestRecruiterReview:
    def test_list_applications_for_job(self, client, recruiter, register, published_job, application):
        _, jane_headers, _ = register("jane.smith@example.com", name="Jane Smith")
        apply(client, {"headers": jane_headers}, published_job["id"])

        url = f"/api/v1/recruiter/jobs/{published_job['id']}/applications"
        everyone = client.get(url, headers=recruiter["headers"]).json()["applications"]
        assert {a["candidate"]["email"] for a in everyone} == {"john.doe@example.com", "jane.smith@example.com"}

        jane = client.get(url, params={"q": "jane"}, headers=recruiter["headers"]).json()["applications"]
        assert [a["candidate"]["name"] for a in jane] == ["Jane Smith"]

    def test_other_recruiter_cannot_list(self, client, other_recruiter, published_job, application):
        url = f"/api/v1/recruiter/jobs/{published_job['id']}/applications"
        assert client.get(url, headers=other_recruiter["headers"]).status_code == 403

    def test_status_change_notifies_candidate(self, client, recruiter, candidate, application, drain):
        drain()
        response = client.patch(
            f"/api/v1/recruiter/applications/{application['id']}",
            json={"status": "PASSED", "score": 88, "tags": ["python"]},
            headers=recruiter["headers"],
        )
        assert response.status_code == 200
        assert response.json()["application"]["status"] == "PASSED"
        assert response.json()["application"]["score"] == 88
        drain()

        titles = [
            n["title"]
            for n in client.get("/api/v1/candidate/notifications", headers=candidate["headers"]).json()[
                "notifications"
            ]
        ]
        assert "Application updated" in titles

    def test_notes_only_patch_does_not_notify(self, client, app, recruiter, application, drain):
        drain()
        submitted = app.state.dispatcher.submitted
        response = client.patch(
            f"/api/v1/recruiter/applications/{application['id']}",
            json={"notes": "Strong systems background"},
            headers=recruiter["headers"],
        )
        assert response.status_code == 200
        assert app.state.dispatcher.submitted == submitted

    def test_invalid_score(self, client, recruiter, application):
        response = client.patch(
            f"/api/v1/recruiter/applications/{application['id']}",
            json={"score": 101},
            headers=recruiter["headers"],
        )
        assert response.status_code == 400

    def test_other_recruiter_cannot_patch(self, client, other_recruiter, application):
        response = client.patch(
            f"/api/v1/recruiter/applications/{application['id']}",
            json={"status": "FAILED"},
            headers=other_recruiter["headers"],
        )
        assert response.status_code == 403


class TestInterviews:
    def test_schedule_and_update(self, client, recruiter, candidate, application, drain):
        base = f"/api/v1/recruiter/applications/{application['id']}/interviews"
        response = client.post(
            base,
            json={
                "scheduled_at": "2030-05-01T09:00:00+02:00",
                "duration_minutes": 45,
                "meeting_url": "https://meet.example.com/abc",
            },
            headers=recruiter["headers"],
        )
        assert response.status_code == 201
        created = response.json()
        assert created["path"] == f"{base}/{created['id']}"

        interviews = client.get(base, headers=recruiter["headers"]).json()["interviews"]
        assert len(interviews) == 1
        # Stored as UTC
        assert interviews[0]["scheduled_at"] == "2030-05-01T07:00:00"
        assert interviews[0]["status"] == "SCHEDULED"

        updated = client.patch(
            created["path"],
            json={"status": "COMPLETED", "rating": 8, "feedback": "Great"},
            headers=recruiter["headers"],
        )
        assert updated.status_code == 200
        assert updated.json()["interviews"][0]["status"] == "COMPLETED"

        drain()
        inbox = client.get("/api/v1/candidate/notifications", headers=candidate["headers"]).json()
        scheduled = [n for n in inbox["notifications"] if n["type"] == "INTERVIEW"]
        assert scheduled[0]["data"]["scheduled_at"] == "2030-05-01T07:00:00"

    def test_interview_of_other_application_is_not_found(self, client, recruiter, application):
        response = client.patch(
            f"/api/v1/recruiter/applications/{application['id']}/interviews/999",
            json={"status": "CANCELED"},
            headers=recruiter["headers"],
        )
        assert response.status_code == 404

    def test_missing_scheduled_at(self, client, recruiter, application):
        response = client.post(
            f"/api/v1/recruiter/applications/{application['id']}/interviews",
            json={"duration_minutes": 30},
            headers=recruiter["headers"],
        )
        assert response.status_code == 400
