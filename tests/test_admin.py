"""Tests for admin endpoints: job moderation, course content, store and mentor answers."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.config import get_settings
from tests.conftest import (
    create_test_content,
    create_test_course,
    create_test_employer,
    create_test_job,
    create_test_product,
    create_test_user,
)


class TestAdminAccess:
    def test_non_admin_is_forbidden(self, client: TestClient) -> None:
        response = client.get("/api/v1/admin/jobs/pending")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Admin access required"

    def test_admin_email_grants_access(
        self, client: TestClient, test_user: models.User, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(get_settings(), "ADMIN_EMAILS", [test_user.email])

        response = client.get("/api/v1/admin/jobs/pending")
        assert response.status_code == status.HTTP_200_OK


class TestJobModeration:
    def test_pending_jobs(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        pending = create_test_job(db_session, title="Apprentice Plumber", status="pending")
        create_test_job(db_session, title="Live Job", status="approved")

        jobs = client.get("/api/v1/admin/jobs/pending").json()

        assert [job["id"] for job in jobs] == [pending.id]

    def test_approve_notifies_employer(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        owner = create_test_user(db_session, email="owner@example.com", username="owner")
        job = create_test_job(db_session, create_test_employer(db_session, owner), status="pending")

        response = client.put(f"/api/v1/admin/jobs/{job.id}/approve")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "approved"
        db_session.refresh(job)
        assert job.approved_by_id == admin_user.id
        assert job.approved_at is not None
        notification = db_session.query(models.Notification).filter_by(user_id=owner.id).one()
        assert notification.notification_type == "job_approved"

    def test_reject_stores_reason(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        owner = create_test_user(db_session, email="owner@example.com", username="owner")
        job = create_test_job(db_session, create_test_employer(db_session, owner), status="pending")

        response = client.put(
            f"/api/v1/admin/jobs/{job.id}/reject", json={"reason": "  Not a plumbing position "}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "rejected"
        assert data["rejection_reason"] == "Not a plumbing position"
        notification = db_session.query(models.Notification).filter_by(user_id=owner.id).one()
        assert notification.notification_type == "job_rejected"

    def test_reject_blank_reason(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        job = create_test_job(db_session, status="pending")

        response = client.put(f"/api/v1/admin/jobs/{job.id}/reject", json={"reason": "   "})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_approve_unknown_job(self, client: TestClient, admin_user: models.User) -> None:
        response = client.put("/api/v1/admin/jobs/999/approve")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestContentManagement:
    def test_create_content(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        course = create_test_course(db_session)

        response = client.post(
            f"/api/v1/admin/courses/{course.slug}/content",
            json={
                "title": "Drain Waste and Vent",
                "content_type": "lesson",
                "chapter": 7,
                "section": 701,
                "duration": 45,
                "content": {"body": "DWV systems carry waste away."},
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["course_id"] == course.id
        assert data["is_active"] is True
        assert data["content"] == {"body": "DWV systems carry waste away."}

    def test_update_content(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        content = create_test_content(db_session, create_test_course(db_session))

        response = client.put(
            f"/api/v1/admin/content/{content.id}", json={"title": "Water Supply Sizing"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Water Supply Sizing"
        assert response.json()["section"] == 101

    def test_delete_content(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        content = create_test_content(db_session, create_test_course(db_session))

        response = client.delete(f"/api/v1/admin/content/{content.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/api/v1/content/{content.id}").status_code == (
            status.HTTP_404_NOT_FOUND
        )

    def test_update_unknown_content(self, client: TestClient, admin_user: models.User) -> None:
        response = client.put("/api/v1/admin/content/999", json={"title": "Nothing"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_course_stats(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        course = create_test_course(db_session)
        create_test_content(db_session, course, title="Lesson A", duration=20)
        create_test_content(db_session, course, title="Lesson B", duration=25)
        create_test_content(db_session, course, title="Quiz A", content_type="quiz", duration=15)

        response = client.get(f"/api/v1/admin/courses/{course.id}/stats")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "course_id": course.id,
            "lesson_count": 2,
            "quiz_count": 1,
            "content_count": 3,
            "total_minutes": 60,
        }


class TestStoreManagement:
    def test_create_product(self, client: TestClient, admin_user: models.User) -> None:
        response = client.post(
            "/api/v1/admin/products",
            json={
                "name": "PEX Crimp Tool",
                "category": "tools",
                "price": 54.5,
                "amazon_asin": "B000TEST01",
            },
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["is_active"] is True
        assert data["affiliate_url"] == "https://www.amazon.com/dp/B000TEST01?tag=laplumbprep-20"

    def test_update_product(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        product = create_test_product(db_session)

        response = client.put(f"/api/v1/admin/products/{product.id}", json={"price": 24.99})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["price"] == 24.99

    def test_delete_product_hides_it(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        product = create_test_product(db_session)

        response = client.delete(f"/api/v1/admin/products/{product.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        db_session.refresh(product)
        assert product.is_active is False
        assert client.get(f"/api/v1/products/{product.id}").status_code == (
            status.HTTP_404_NOT_FOUND
        )

    def test_approve_review(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        product = create_test_product(db_session)
        reviewer = create_test_user(db_session, email="buyer@example.com", username="buyer")
        review = models.ProductReview(product_id=product.id, user_id=reviewer.id, rating=5)
        db_session.add(review)
        db_session.commit()

        response = client.put(f"/api/v1/admin/reviews/{review.id}/approve")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_approved"] is True
        reviews = client.get(f"/api/v1/products/{product.id}/reviews").json()
        assert [r["id"] for r in reviews] == [review.id]


class TestChatAnswerImport:
    def test_import_answers(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        response = client.post(
            "/api/v1/admin/chat-answers",
            json={
                "answers": [
                    {"keyword": "trap seal", "answer": "A trap seal is at least 2 inches."},
                    {"keyword": "vent", "answer": "Vents protect trap seals.", "sort_order": 1},
                ]
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "imported": 2}
        assert db_session.query(models.ChatAnswer).count() == 2

    def test_import_requires_answers(self, client: TestClient, admin_user: models.User) -> None:
        response = client.post("/api/v1/admin/chat-answers", json={"answers": []})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
