"""Tests for the current user's profile endpoints."""

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.services.auth_service import verify_password
from tests.conftest import TEST_PASSWORD


class TestGetMe:
    def test_returns_profile(self, client: TestClient, test_user: models.User) -> None:
        response = client.get("/api/v1/users/me")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["id"] == test_user.id
        assert data["email"] == "learner@example.com"
        assert data["subscription_tier"] == "basic"
        assert data["is_admin"] is False

    def test_admin_flag(self, client: TestClient, admin_user: models.User) -> None:
        response = client.get("/api/v1/users/me")
        assert response.json()["is_admin"] is True


class TestUpdateMe:
    def test_update_name_and_phone(self, client: TestClient, db_session: Session) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"first_name": "Remy", "last_name": "Broussard", "phone": "225-555-0100"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["first_name"] == "Remy"
        assert data["last_name"] == "Broussard"
        assert data["phone"] == "225-555-0100"

    def test_change_password(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"current_password": TEST_PASSWORD, "new_password": "brand-new-pass"},
        )

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(test_user)
        assert test_user.hashed_password is not None
        assert verify_password("brand-new-pass", test_user.hashed_password)

    def test_change_password_requires_current_password(self, client: TestClient) -> None:
        response = client.post("/api/v1/users/me", json={"new_password": "brand-new-pass"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Current password is required to set a new password"

    def test_change_password_wrong_current_password(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/users/me",
            json={"current_password": "not-my-password", "new_password": "brand-new-pass"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Current password is incorrect"
