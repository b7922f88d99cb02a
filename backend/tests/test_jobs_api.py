"""
API tests for /api/v1/recruiter/jobs and the public job routes.
"""

from unittest.mock import patch

from app.core.exceptions import ExtractionError


class TestCreateJob:
    def test_create_draft(self, client, recruiter, job_payload):
        response = client.post("/api/v1/recruiter/jobs", json=job_payload, headers=recruiter["headers"])

        assert response.status_code == 201
        body = response.json()
        assert body["job"]["status"] == "DRAFT"
        assert body["job"]["recruiter_id"] == recruiter["user"]["id"]
        assert body["path"] == f"/api/v1/recruiter/jobs/{body['id']}"

    def test_status_is_required(self, client, recruiter, job_payload):
        del job_payload["status"]
        response = client.post("/api/v1/recruiter/jobs", json=job_payload, headers=recruiter["headers"])
        assert response.status_code == 400

    def test_skill_weight_is_bounded(self, client, recruiter, job_payload):
        job_payload["skills_technical"] = [{"name": "Python", "weight": 150}]
        response = client.post("/api/v1/recruiter/jobs", json=job_payload, headers=recruiter["headers"])
        assert response.status_code == 400

    def test_unknown_field_is_rejected(self, client, recruiter, job_payload):
        job_payload["recruiter_id"] = 999
        response = client.post("/api/v1/recruiter/jobs", json=job_payload, headers=recruiter["headers"])
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_legacy_auto_close_is_accepted(self, client, recruiter, job_payload):
        job_payload["auto_close"] = True
        response = client.post("/api/v1/recruiter/jobs", json=job_payload, headers=recruiter["headers"])
        assert response.status_code == 201
        assert response.json()["job"]["auto_offer"] is True

    def test_create_published_notifies_owner(self, client, recruiter, create_job, drain):
        job = create_job(status="PUBLISHED")
        drain()

        response = client.get("/api/v1/recruiter/notifications", headers=recruiter["headers"])
        notifications = response.json()["notifications"]
        assert len(notifications) == 1
        assert notifications[0]["type"] == "JOB"
        assert notifications[0]["data"] == {"job_id": job["id"], "path": f"/recruiter/jobs/{job['id']}"}
        assert notifications[0]["read"] is False

    def test_unauthenticated(self, client, job_payload):
        assert client.post("/api/v1/recruiter/jobs", json=job_payload).status_code == 401


class TestReadJobs:
    def test_list_own_jobs(self, client, recruiter, other_recruiter, create_job):
        create_job()
        create_job(status="PUBLISHED")
        create_job(headers=other_recruiter["headers"])

        response = client.get("/api/v1/recruiter/jobs", headers=recruiter["headers"])
        assert len(response.json()["jobs"]) == 2

        drafts = client.get("/api/v1/recruiter/jobs?status=DRAFT", headers=recruiter["headers"])
        assert [job["status"] for job in drafts.json()["jobs"]] == ["DRAFT"]

    def test_get_foreign_job_is_forbidden(self, client, other_recruiter, create_job):
        job = create_job()
        response = client.get(f"/api/v1/recruiter/jobs/{job['id']}", headers=other_recruiter["headers"])
        assert response.status_code == 403

    def test_get_missing_job(self, client, recruiter):
        response = client.get("/api/v1/recruiter/jobs/999", headers=recruiter["headers"])
        assert response.status_code == 404
        assert response.json() == {"error": "NotFound", "message": "Job not found"}


class TestLifecycleRoutes:
    def test_publish_close_reopen(self, client, recruiter, create_job):
        job = create_job()
        base = f"/api/v1/recruiter/jobs/{job['id']}"

        assert client.post(f"{base}/publish", headers=recruiter["headers"]).json()["job"]["status"] == "PUBLISHED"
        assert client.post(f"{base}/close", headers=recruiter["headers"]).json()["job"]["status"] == "CLOSED"
        assert client.post(f"{base}/reopen", headers=recruiter["headers"]).json()["job"]["status"] == "PUBLISHED"

    def test_invalid_transition_is_409(self, client, recruiter, create_job):
        job = create_job()
        response = client.post(f"/api/v1/recruiter/jobs/{job['id']}/close", headers=recruiter["headers"])
        assert response.status_code == 409
        assert response.json()["error"] == "InvalidTransition"

    def test_patch_published_job_fields_is_409(self, client, recruiter, published_job):
        response = client.patch(
            f"/api/v1/recruiter/jobs/{published_job['id']}",
            json={"title": "Renamed"},
            headers=recruiter["headers"],
        )
        assert response.status_code == 409
        assert response.json()["error"] == "NotDraft"

    def test_patch_status_closes_published_job(self, client, recruiter, published_job):
        response = client.patch(
            f"/api/v1/recruiter/jobs/{published_job['id']}",
            json={"status": "CLOSED"},
            headers=recruiter["headers"],
        )
        assert response.status_code == 200
        assert response.json()["job"]["status"] == "CLOSED"

    def test_patch_unknown_field_is_400(self, client, recruiter, create_job):
        job = create_job()
        response = client.patch(
            f"/api/v1/recruiter/jobs/{job['id']}",
            json={"recruiter_id": 42},
            headers=recruiter["headers"],
        )
        assert response.status_code == 400

    def test_delete_cascades_applications(self, client, recruiter, candidate, published_job):
        applied = client.post(
            "/api/v1/candidate/applications",
            json={"job_id": published_job["id"]},
            headers=candidate["headers"],
        )
        assert applied.status_code == 201

        response = client.delete(f"/api/v1/recruiter/jobs/{published_job['id']}", headers=recruiter["headers"])
        assert response.status_code == 204

        mine = client.get("/api/v1/candidate/applications", headers=candidate["headers"])
        assert mine.json()["applications"] == []


class TestPublicJobs:
    def test_only_published_jobs_are_listed(self, client, create_job):
        create_job(title="Hidden Draft")
        published = create_job(title="Visible Role", status="PUBLISHED")

        response = client.get("/api/v1/candidate/jobs")
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert [job["id"] for job in body["jobs"]] == [published["id"]]

    def test_search_filters(self, client, create_job):
        create_job(title="Frontend Developer", location="Berlin", status="PUBLISHED")
        create_job(title="Backend Engineer", location="Remote", status="PUBLISHED")

        by_title = client.get("/api/v1/candidate/jobs", params={"q": "backend"}).json()
        assert [job["title"] for job in by_title["jobs"]] == ["Backend Engineer"]

        by_location = client.get("/api/v1/candidate/jobs", params={"location": "berl"}).json()
        assert [job["title"] for job in by_location["jobs"]] == ["Frontend Developer"]

    def test_draft_is_not_found(self, client, create_job):
        job = create_job()
        assert client.get(f"/api/v1/candidate/jobs/{job['id']}").status_code == 404

    def test_public_recruiter_card(self, client, recruiter, published_job, create_job):
        create_job()
        recruiter_id = recruiter["user"]["id"]

        card = client.get(f"/api/v1/recruiter/{recruiter_id}")
        assert card.status_code == 200
        assert card.json()["recruiter"]["name"] == "Sarah Chen"
        assert "email" not in card.json()["recruiter"]

        jobs = client.get(f"/api/v1/recruiter/{recruiter_id}/jobs")
        assert [job["id"] for job in jobs.json()["jobs"]] == [published_job["id"]]

    def test_candidate_is_not_a_recruiter(self, client, candidate):
        assert client.get(f"/api/v1/recruiter/{candidate['user']['id']}").status_code == 404


class TestRecruiterStats:
    def test_stats(self, client, recruiter, candidate, create_job, published_job):
        create_job()
        client.post(
            "/api/v1/candidate/applications",
            json={"job_id": published_job["id"]},
            headers=candidate["headers"],
        )

        response = client.get("/api/v1/recruiter/me/stats", headers=recruiter["headers"])
        assert response.status_code == 200
        assert response.json() == {
            "jobs": {"draft": 1, "published": 1, "closed": 0, "total": 2},
            "applications": {"total": 1, "applied": 1, "passed": 0, "failed": 0},
        }


class TestAutofill:
    def test_rejects_non_pdf(self, client, recruiter):
        response = client.post(
            "/api/v1/recruiter/jobs/autofill",
            files={"file": ("job.txt", b"Job Title: Backend Engineer", "text/plain")},
            headers=recruiter["headers"],
        )
        assert response.status_code == 400
        assert response.json()["error"] == "UnsupportedMediaType"

    def test_unreadable_pdf(self, client, recruiter):
        response = client.post(
            "/api/v1/recruiter/jobs/autofill",
            files={"file": ("job.pdf", b"definitely not a pdf", "application/pdf")},
            headers=recruiter["headers"],
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ExtractionError"

    def test_suggested_fields(self, client, recruiter):
        text = "Job Title: Backend Engineer\nLocation: Remote\n"
        with patch("app.services.job_extractor.extract_text_from_pdf", return_value=text):
            response = client.post(
                "/api/v1/recruiter/jobs/autofill",
                files={"file": ("job.pdf", b"%PDF-1.4 stub", "application/pdf")},
                headers=recruiter["headers"],
            )
        assert response.status_code == 200
        suggested = response.json()["suggested"]
        assert suggested["title"] == "Backend Engineer"
        assert suggested["location"] == "Remote"
        assert suggested["remote_flexible"] is True
        assert "salary" not in suggested

    def test_extraction_failure_is_reported(self, client, recruiter):
        with patch(
            "app.services.job_extractor.extract_text_from_pdf",
            side_effect=ExtractionError("Could not read the PDF document"),
        ):
            response = client.post(
                "/api/v1/recruiter/jobs/autofill",
                files={"file": ("job.pdf", b"%PDF-1.4 stub", "application/pdf")},
                headers=recruiter["headers"],
            )
        assert response.status_code == 400
        assert response.json()["message"] == "Could not read the PDF document"

    def test_candidate_cannot_autofill(self, client, candidate):
        response = client.post(
            "/api/v1/recruiter/jobs/autofill",
            files={"file": ("job.pdf", b"%PDF-1.4 stub", "application/pdf")},
            headers=candidate["headers"],
        )
        assert response.status_code == 403
