"""Tests for registration, login, token refresh and protected endpoints."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.config import get_settings
from plumbprep.services.auth_service import create_refresh_token
from tests.conftest import TEST_PASSWORD, create_test_user


def register(client: TestClient, **overrides: str) -> dict:
    payload = {
        "email": "new.plumber@example.com",
        "username": "newplumber",
        "password": "supersecret1",
        "first_name": "Remy",
        "last_name": "Broussard",
    }
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


class TestRegister:
    def test_register_returns_token_pair(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        response = register(anonymous_client)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["refresh_token"]
        assert "refresh_token" in response.cookies

        user = db_session.query(models.User).filter_by(email="new.plumber@example.com").one()
        assert user.subscription_tier == "basic"
        assert user.referral_code is not None
        assert user.referral_code.startswith("NEWPLUMB")

    def test_register_normalizes_email(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        response = register(anonymous_client, email="Mixed.Case@Example.COM")

        assert response.status_code == status.HTTP_200_OK
        assert db_session.query(models.User).filter_by(email="mixed.case@example.com").count() == 1

    def test_register_duplicate_email(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        create_test_user(db_session, email="new.plumber@example.com", username="someone")

        response = register(anonymous_client)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Email already registered"

    def test_register_duplicate_username(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        create_test_user(db_session, email="other@example.com", username="newplumber")

        response = register(anonymous_client)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Username already taken"

    def test_register_disabled(
        self, anonymous_client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(get_settings(), "ALLOW_USER_REGISTRATIONS", False)

        response = register(anonymous_client)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "User registration is currently disabled"

    def test_register_short_password_rejected(self, anonymous_client: TestClient) -> None:
        response = register(anonymous_client, password="short")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_register_links_referrer_by_code(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        referrer = create_test_user(
            db_session, email="mentor@example.com", username="mentor", referral_code="MENTORABC123"
        )

        response = register(anonymous_client, referred_by="mentorabc123")

        assert response.status_code == status.HTTP_200_OK
        user = db_session.query(models.User).filter_by(username="newplumber").one()
        assert user.referred_by_id == referrer.id

    def test_register_links_referrer_by_username(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        referrer = create_test_user(db_session, email="mentor@example.com", username="mentor")

        register(anonymous_client, referred_by="mentor")

        user = db_session.query(models.User).filter_by(username="newplumber").one()
        assert user.referred_by_id == referrer.id

    def test_register_unknown_referrer_is_ignored(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        response = register(anonymous_client, referred_by="nobody")

        assert response.status_code == status.HTTP_200_OK
        user = db_session.query(models.User).filter_by(username="newplumber").one()
        assert user.referred_by_id is None


class TestLogin:
    def test_login_success(self, anonymous_client: TestClient, db_session: Session) -> None:
        create_test_user(db_session, email="learner@example.com", username="learner")

        response = anonymous_client.post(
            "/api/v1/auth/login",
            data={"username": "learner@example.com", "password": TEST_PASSWORD},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["access_token"]
        assert data["expires_in"] == 15 * 60

    def test_login_wrong_password(self, anonymous_client: TestClient, db_session: Session) -> None:
        create_test_user(db_session, email="learner@example.com", username="learner")

        response = anonymous_client.post(
            "/api/v1/auth/login",
            data={"username": "learner@example.com", "password": "wrong-password"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Incorrect email or password"

    def test_login_unknown_email(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.post(
            "/api/v1/auth/login",
            data={"username": "ghost@example.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, anonymous_client: TestClient, db_session: Session) -> None:
        create_test_user(
            db_session, email="learner@example.com", username="learner", is_active=False
        )

        response = anonymous_client.post(
            "/api/v1/auth/login",
            data={"username": "learner@example.com", "password": TEST_PASSWORD},
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestTokens:
    def test_access_token_authenticates_requests(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        token = register(anonymous_client).json()["access_token"]

        response = anonymous_client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "new.plumber@example.com"

    def test_missing_token_is_rejected(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.get("/api/v1/users/me")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_token_cannot_be_used_as_access_token(
        self, anonymous_client: TestClient
    ) -> None:
        refresh_token = register(anonymous_client).json()["refresh_token"]

        response = anonymous_client.get(
            "/api/v1/users/me", headers={"Authorization": f"Bearer {refresh_token}"}
        )
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_with_body_token(self, anonymous_client: TestClient, db_session: Session) -> None:
        user = create_test_user(db_session, email="learner@example.com", username="learner")

        response = anonymous_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": create_refresh_token(user.id)}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["access_token"]

    def test_refresh_without_token(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.post("/api/v1/auth/refresh")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Refresh token required"

    def test_refresh_with_invalid_token(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.post(
            "/api/v1/auth/refresh", json={"refresh_token": "not-a-jwt"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid or expired refresh token"

    def test_logout(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.post("/api/v1/auth/logout")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Logged out successfully"}

    def test_beacon_accepts_query_token(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        token = register(anonymous_client).json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}
        started = anonymous_client.post(
            "/api/v1/study-sessions/start",
            json={"content_id": "lesson-101", "content_type": "lesson"},
            headers=headers,
        )
        assert started.status_code == status.HTTP_201_CREATED

        response = anonymous_client.post(
            f"/api/v1/study-sessions/{started.json()['id']}/end",
            params={"token": token},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["completed"] is True
