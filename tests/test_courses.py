"""Tests for courses, course content and enrollments."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from tests.conftest import (
    create_test_content,
    create_test_course,
    create_test_enrollment,
    create_test_user,
    set_subscription,
)


class TestCourseCatalog:
    def test_catalog_is_seeded_on_first_access(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        response = anonymous_client.get("/api/v1/courses")

        assert response.status_code == status.HTTP_200_OK
        slugs = [course["slug"] for course in response.json()]
        assert "journeyman-prep" in slugs
        assert "backflow-prevention" not in slugs
        assert db_session.query(models.Course).count() > len(slugs)

    def test_existing_catalog_is_not_reseeded(
        self, client: TestClient, db_session: Session
    ) -> None:
        create_test_course(db_session, slug="custom-course", title="Custom")

        courses = client.get("/api/v1/courses").json()

        assert [course["slug"] for course in courses] == ["custom-course"]

    def test_get_course_by_slug_or_id(self, client: TestClient, db_session: Session) -> None:
        course = create_test_course(db_session)

        by_slug = client.get("/api/v1/courses/journeyman-prep")
        by_id = client.get(f"/api/v1/courses/{course.id}")

        assert by_slug.status_code == status.HTTP_200_OK
        assert by_slug.json() == by_id.json()

    def test_unknown_course(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses/plumbing-101")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Course 'plumbing-101' not found"


class TestCourseContent:
    def test_content_in_section_order_with_type_filter(
        self, client: TestClient, db_session: Session
    ) -> None:
        course = create_test_course(db_session)
        create_test_content(db_session, course, title="Section 102 lesson", section=102)
        create_test_content(db_session, course, title="Section 101 lesson", section=101)
        create_test_content(db_session, course, title="Quiz", content_type="quiz", section=101)
        create_test_content(db_session, course, title="Hidden", is_active=False)

        all_content = client.get("/api/v1/courses/journeyman-prep/content").json()
        lessons = client.get(
            "/api/v1/courses/journeyman-prep/content", params={"type": "lesson"}
        ).json()

        assert [c["title"] for c in all_content] == [
            "Section 101 lesson",
            "Quiz",
            "Section 102 lesson",
        ]
        assert [c["title"] for c in lessons] == ["Section 101 lesson", "Section 102 lesson"]

    def test_get_single_content(self, client: TestClient, db_session: Session) -> None:
        course = create_test_course(db_session)
        content = create_test_content(db_session, course, content={"body": "Trap seals"})

        response = client.get(f"/api/v1/content/{content.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["content"] == {"body": "Trap seals"}

    def test_inactive_content_is_hidden(self, client: TestClient, db_session: Session) -> None:
        course = create_test_course(db_session)
        content = create_test_content(db_session, course, is_active=False)

        response = client.get(f"/api/v1/content/{content.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_study_plans_default_duration(self, client: TestClient, db_session: Session) -> None:
        course = create_test_course(db_session)
        create_test_content(
            db_session, course, title="Two week plan", content_type="study_plans", duration=None
        )

        plans = client.get("/api/v1/courses/journeyman-prep/study-plans").json()

        assert len(plans) == 1
        assert plans[0]["title"] == "Two week plan"
        assert plans[0]["duration"] == 30


class TestEnrollment:
    def test_enroll(self, client: TestClient, db_session: Session) -> None:
        create_test_course(db_session)

        response = client.post("/api/v1/courses/journeyman-prep/enroll")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["course"]["slug"] == "journeyman-prep"
        assert data["progress"] == 0
        assert data["is_completed"] is False

    def test_enroll_twice_returns_existing(self, client: TestClient, db_session: Session) -> None:
        create_test_course(db_session)

        first = client.post("/api/v1/courses/journeyman-prep/enroll").json()
        second = client.post("/api/v1/courses/journeyman-prep/enroll").json()

        assert first["id"] == second["id"]
        assert db_session.query(models.CourseEnrollment).count() == 1

    def test_inactive_course_cannot_be_enrolled(
        self, client: TestClient, db_session: Session
    ) -> None:
        create_test_course(db_session, slug="natural-gas", is_active=False)

        response = client.post("/api/v1/courses/natural-gas/enroll")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_basic_plan_track_limit(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        create_test_enrollment(db_session, test_user, create_test_course(db_session))
        create_test_course(db_session, slug="master-plumber", title="Master", course_type="master")

        response = client.post("/api/v1/courses/master-plumber/enroll")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        data = response.json()
        assert data["subscription_required"] is True
        assert data["required_tier"] == "professional"

    def test_professional_plan_allows_more_tracks(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        set_subscription(db_session, test_user, "professional")
        create_test_enrollment(db_session, test_user, create_test_course(db_session))
        create_test_course(db_session, slug="master-plumber", title="Master", course_type="master")

        response = client.post("/api/v1/courses/master-plumber/enroll")
        assert response.status_code == status.HTTP_200_OK

    def test_unpaid_subscription_keeps_basic_track_limit(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        subscribed = client.post("/api/v1/subscriptions", json={"tier": "master"})
        assert subscribed.json()["status"] == "incomplete"
        create_test_course(db_session)
        create_test_course(db_session, slug="master-plumber", title="Master", course_type="master")

        first = client.post("/api/v1/courses/journeyman-prep/enroll")
        second = client.post("/api/v1/courses/master-plumber/enroll")

        assert first.status_code == status.HTTP_200_OK
        assert second.status_code == status.HTTP_403_FORBIDDEN
        data = second.json()
        assert data["detail"] == "Additional certification tracks require an active subscription"
        assert data["required_tier"] == "master"

    def test_list_enrollments(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        create_test_enrollment(db_session, test_user, create_test_course(db_session))

        enrollments = client.get("/api/v1/enrollments").json()

        assert len(enrollments) == 1
        assert enrollments[0]["course"]["slug"] == "journeyman-prep"

    def test_update_progress_completes_at_100(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        enrollment = create_test_enrollment(db_session, test_user, create_test_course(db_session))

        partial = client.put(
            f"/api/v1/enrollments/{enrollment.id}/progress",
            json={"progress": 40, "completed_lessons": [3, 1, 3], "test_scores": {"101": 80}},
        ).json()
        assert partial["completed_lessons"] == [1, 3]
        assert partial["is_completed"] is False

        done = client.put(
            f"/api/v1/enrollments/{enrollment.id}/progress",
            json={"progress": 100, "test_scores": {"102": 90}},
        ).json()
        assert done["is_completed"] is True
        assert done["completed_at"] is not None
        assert done["test_scores"] == {"101": 80, "102": 90}

    def test_update_progress_of_other_users_enrollment(
        self, client: TestClient, db_session: Session
    ) -> None:
        other = create_test_user(db_session, email="other@example.com", username="other")
        enrollment = create_test_enrollment(db_session, other, create_test_course(db_session))

        response = client.put(
            f"/api/v1/enrollments/{enrollment.id}/progress", json={"progress": 50}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
