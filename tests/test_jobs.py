"""Tests for the job board."""

from datetime import timedelta
from typing import NamedTuple

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.utils import utc_now
from tests.conftest import (
    create_test_course,
    create_test_employer,
    create_test_enrollment,
    create_test_job,
    create_test_user,
)


class JobBoard(NamedTuple):
    owner: models.User
    employer: models.Employer
    approved: models.Job
    featured: models.Job
    pending: models.Job
    inactive: models.Job


@pytest.fixture
def enrolled_user(db_session: Session, test_user: models.User) -> models.User:
    """The default user enrolled in one course, which opens the job board."""
    create_test_enrollment(db_session, test_user, create_test_course(db_session))
    return test_user


@pytest.fixture
def job_board(db_session: Session) -> JobBoard:
    owner = create_test_user(db_session, email="owner@bayouplumbing.com", username="owner")
    employer = create_test_employer(db_session, owner)
    return JobBoard(
        owner=owner,
        employer=employer,
        approved=create_test_job(db_session, employer, title="Journeyman Plumber"),
        featured=create_test_job(
            db_session, employer, title="Service Plumber", location="Lafayette, LA",
            is_featured=True,
        ),
        pending=create_test_job(db_session, employer, title="Apprentice", status="pending"),
        inactive=create_test_job(db_session, employer, title="Estimator", is_active=False),
    )


class TestJobBoardAccess:
    def test_requires_enrollment(self, client: TestClient, job_board: JobBoard) -> None:
        response = client.get("/api/v1/jobs")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        data = response.json()
        assert data["detail"] == "Job board access requires course enrollment"
        assert data["enrollment_required"] is True

    def test_admin_bypasses_enrollment(
        self, client: TestClient, admin_user: models.User, job_board: JobBoard
    ) -> None:
        response = client.get("/api/v1/jobs")
        assert response.status_code == status.HTTP_200_OK


class TestListJobs:
    def test_only_approved_active_jobs_featured_first(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        data = client.get("/api/v1/jobs").json()

        assert [job["title"] for job in data["jobs"]] == ["Service Plumber", "Journeyman Plumber"]
        assert data["total"] == 2
        assert data["total_pages"] == 1

    def test_search_matches_location(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        data = client.get("/api/v1/jobs", params={"search": "lafayette"}).json()
        assert [job["title"] for job in data["jobs"]] == ["Service Plumber"]

    def test_search_wildcards_match_literally(
        self, client: TestClient, db_session: Session, enrolled_user: models.User
    ) -> None:
        create_test_job(db_session, title="Plumber 100% commission")
        create_test_job(db_session, title="Pipe_fitter")
        create_test_job(db_session, title="Pipefitter")

        percent = client.get("/api/v1/jobs", params={"search": "100%"}).json()
        underscore = client.get("/api/v1/jobs", params={"search": "pipe_"}).json()
        everything = client.get("/api/v1/jobs", params={"search": "%"}).json()

        assert [job["title"] for job in percent["jobs"]] == ["Plumber 100% commission"]
        assert [job["title"] for job in underscore["jobs"]] == ["Pipe_fitter"]
        assert everything["total"] == 1

    def test_expired_jobs_are_hidden(
        self, client: TestClient, db_session: Session, enrolled_user: models.User
    ) -> None:
        expired = create_test_job(
            db_session, title="Old Posting", expires_at=utc_now() - timedelta(days=1)
        )
        create_test_job(
            db_session, title="Open Posting", expires_at=utc_now() + timedelta(days=10)
        )

        data = client.get("/api/v1/jobs").json()

        assert [job["title"] for job in data["jobs"]] == ["Open Posting"]
        assert client.get(f"/api/v1/jobs/{expired.id}").status_code == status.HTTP_404_NOT_FOUND

    def test_pagination(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        data = client.get("/api/v1/jobs", params={"page": 2, "limit": 1}).json()

        assert len(data["jobs"]) == 1
        assert data["page"] == 2
        assert data["total_pages"] == 2

    def test_empty_board(self, client: TestClient, enrolled_user: models.User) -> None:
        data = client.get("/api/v1/jobs").json()
        assert data == {"jobs": [], "total": 0, "page": 1, "limit": 10, "total_pages": 0}

    def test_pending_job_is_not_public(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        response = client.get(f"/api/v1/jobs/{job_board.pending.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_get_job(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        response = client.get(f"/api/v1/jobs/{job_board.approved.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["company"] == "Bayou Plumbing Co"


class TestApply:
    def test_apply_notifies_employer(
        self,
        client: TestClient,
        db_session: Session,
        enrolled_user: models.User,
        job_board: JobBoard,
    ) -> None:
        response = client.post(
            f"/api/v1/jobs/{job_board.approved.id}/apply",
            json={"cover_letter": "Five years of residential service work."},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "pending"
        assert data["job"]["id"] == job_board.approved.id

        notification = db_session.query(models.Notification).filter_by(
            user_id=job_board.owner.id
        ).one()
        assert notification.notification_type == "job_application"
        assert notification.title == "New application for Journeyman Plumber"

    def test_apply_twice(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        client.post(f"/api/v1/jobs/{job_board.approved.id}/apply", json={})

        response = client.post(f"/api/v1/jobs/{job_board.approved.id}/apply", json={})

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "You have already applied to this job"

    def test_apply_to_inactive_job(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        response = client.post(f"/api/v1/jobs/{job_board.inactive.id}/apply", json={})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_my_applications(
        self, client: TestClient, enrolled_user: models.User, job_board: JobBoard
    ) -> None:
        client.post(f"/api/v1/jobs/{job_board.approved.id}/apply", json={})
        client.post(f"/api/v1/jobs/{job_board.featured.id}/apply", json={})

        applications = client.get("/api/v1/jobs/applications/me").json()

        assert {a["job_id"] for a in applications} == {
            job_board.approved.id,
            job_board.featured.id,
        }
