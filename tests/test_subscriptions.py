"""Tests for subscription plans, Stripe billing and webhooks."""

import asyncio
import json
from typing import Any
from unittest.mock import patch

from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.services import SubscriptionService
from plumbprep.services.billing import WebhookEvent
from tests.conftest import (
    VALID_WEBHOOK_SIGNATURE,
    FakeBillingGateway,
    create_test_user,
    set_subscription,
)


def post_webhook(
    client: TestClient,
    event_type: str,
    data: dict[str, Any],
    signature: str = VALID_WEBHOOK_SIGNATURE,
) -> Any:  # noqa: ANN401
    payload = json.dumps({"type": event_type, "data": {"object": data}})
    return client.post(
        "/api/v1/subscriptions/webhook",
        content=payload,
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


def subscription_payload(
    customer: str, price: str, status_value: str = "active", **extra: Any  # noqa: ANN401
) -> dict[str, Any]:
    return {
        "id": "sub_webhook",
        "customer": customer,
        "status": status_value,
        "cancel_at_period_end": False,
        "items": {
            "data": [
                {"id": "si_webhook", "price": {"id": price}, "current_period_end": 1767225600}
            ]
        },
        **extra,
    }


class TestPlans:
    def test_plans_are_public(self, anonymous_client: TestClient) -> None:
        response = anonymous_client.get("/api/v1/subscriptions/plans")

        assert response.status_code == status.HTTP_200_OK
        plans = response.json()
        assert [p["id"] for p in plans] == ["basic", "professional", "master"]
        assert plans[1]["popular"] is True
        assert "AI Mentor Support" in plans[1]["features"]


class TestSubscriptionStatus:
    def test_new_user_has_no_active_subscription(self, client: TestClient) -> None:
        response = client.get("/api/v1/subscriptions/status")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["has_active_subscription"] is False
        assert data["tier"] == "basic"
        assert "practice_tests" in data["features"]
        assert "ai_mentor" not in data["features"]

    def test_active_subscription(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        set_subscription(db_session, test_user, "professional")

        data = client.get("/api/v1/subscriptions/status").json()

        assert data["has_active_subscription"] is True
        assert data["tier"] == "professional"
        assert "ai_mentor" in data["features"]

    def test_past_due_subscription_is_inactive(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        set_subscription(db_session, test_user, "professional", status="past_due")

        data = client.get("/api/v1/subscriptions/status").json()
        assert data["has_active_subscription"] is False

    def test_admin_is_always_active(self, client: TestClient, admin_user: models.User) -> None:
        data = client.get("/api/v1/subscriptions/status").json()
        assert data["has_active_subscription"] is True


class TestCreateSubscription:
    def test_create_subscription(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        billing_gateway: FakeBillingGateway,
    ) -> None:
        response = client.post("/api/v1/subscriptions", json={"tier": "professional"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["subscription_id"] == "sub_test_1"
        assert data["client_secret"] == "pi_test_1_secret"
        assert data["status"] == "incomplete"
        assert data["tier"] == "professional"

        db_session.refresh(test_user)
        assert test_user.stripe_customer_id == "cus_test_1"
        assert test_user.stripe_subscription_id == "sub_test_1"
        assert test_user.subscription_tier == "professional"
        assert billing_gateway.subscriptions["sub_test_1"].price_id == "price_professional"

    def test_existing_active_subscription_is_returned(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        billing_gateway: FakeBillingGateway,
    ) -> None:
        set_subscription(db_session, test_user, "master", subscription_id="sub_live")

        response = client.post("/api/v1/subscriptions", json={"tier": "professional"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["subscription_id"] == "sub_live"
        assert response.json()["tier"] == "master"
        assert billing_gateway.subscriptions == {}

    def test_invalid_tier_rejected(self, client: TestClient) -> None:
        response = client.post("/api/v1/subscriptions", json={"tier": "platinum"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_price_from_another_tier_rejected(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        billing_gateway: FakeBillingGateway,
    ) -> None:
        response = client.post(
            "/api/v1/subscriptions", json={"tier": "master", "price_id": "price_basic"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Price price_basic does not match the master plan"
        db_session.refresh(test_user)
        assert test_user.subscription_tier == "basic"
        assert billing_gateway.subscriptions == {}

    def test_matching_price_override_accepted(
        self, client: TestClient, billing_gateway: FakeBillingGateway
    ) -> None:
        response = client.post(
            "/api/v1/subscriptions", json={"tier": "master", "price_id": "price_master"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert billing_gateway.subscriptions["sub_test_1"].price_id == "price_master"

    def test_referred_user_credits_referrer(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        referrer = create_test_user(
            db_session, email="mentor@example.com", username="mentor", subscription_tier="master"
        )
        test_user.referred_by_id = referrer.id
        db_session.commit()

        client.post("/api/v1/subscriptions", json={"tier": "professional"})

        referral = db_session.query(models.Referral).filter_by(referred_id=test_user.id).one()
        assert referral.referrer_id == referrer.id
        assert referral.commission_amount == 7.9
        assert db_session.query(models.MonthlyCommission).count() == 1


class TestCancelSubscription:
    def test_cancel_at_period_end(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        client.post("/api/v1/subscriptions", json={"tier": "basic"})

        response = client.post("/api/v1/subscriptions/cancel")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Subscription will be canceled at the end of the billing period"
        db_session.refresh(test_user)
        assert test_user.subscription_cancel_at_period_end is True

        status_data = client.get("/api/v1/subscriptions/status").json()
        assert status_data["cancel_at_period_end"] is True

    def test_cancel_without_subscription(self, client: TestClient) -> None:
        response = client.post("/api/v1/subscriptions/cancel")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No active subscription found"


class TestUpgradeSubscription:
    def test_upgrade(
        self,
        client: TestClient,
        db_session: Session,
        test_user: models.User,
        billing_gateway: FakeBillingGateway,
    ) -> None:
        client.post("/api/v1/subscriptions", json={"tier": "basic"})

        response = client.post("/api/v1/subscriptions/upgrade", json={"new_tier": "master"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Subscription changed to Master"
        assert data["tier"] == "master"
        assert billing_gateway.subscriptions["sub_test_1"].price_id == "price_master"
        db_session.refresh(test_user)
        assert test_user.subscription_tier == "master"

    def test_upgrade_to_same_tier(self, client: TestClient) -> None:
        client.post("/api/v1/subscriptions", json={"tier": "professional"})

        response = client.post(
            "/api/v1/subscriptions/upgrade", json={"new_tier": "professional"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Already subscribed to the Professional plan"

    def test_upgrade_invalid_tier(self, client: TestClient) -> None:
        client.post("/api/v1/subscriptions", json={"tier": "basic"})

        response = client.post("/api/v1/subscriptions/upgrade", json={"new_tier": "platinum"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid subscription tier"

    def test_upgrade_without_subscription(self, client: TestClient) -> None:
        response = client.post("/api/v1/subscriptions/upgrade", json={"new_tier": "master"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestWebhook:
    def test_handled_outside_the_event_loop(self, client: TestClient) -> None:
        handled_on: list[str] = []

        def record_thread(service: SubscriptionService, event: WebhookEvent) -> None:
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                handled_on.append("worker")
            else:
                handled_on.append("event loop")

        with patch.object(
            SubscriptionService, "handle_webhook", autospec=True, side_effect=record_thread
        ):
            response = post_webhook(client, "charge.refunded", {"id": "ch_1"})

        assert response.status_code == status.HTTP_200_OK
        assert handled_on == ["worker"]

    def test_invalid_signature(self, client: TestClient) -> None:
        response = post_webhook(client, "customer.subscription.updated", {}, signature="bogus")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_subscription_updated_syncs_user(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        test_user.stripe_customer_id = "cus_webhook"
        db_session.commit()

        response = post_webhook(
            client,
            "customer.subscription.updated",
            subscription_payload("cus_webhook", "price_professional"),
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"received": True}
        db_session.refresh(test_user)
        assert test_user.subscription_status == "active"
        assert test_user.subscription_tier == "professional"
        assert test_user.stripe_subscription_id == "sub_webhook"
        assert test_user.subscription_current_period_end is not None

    def test_subscription_deleted_resets_tier(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        set_subscription(db_session, test_user, "master")
        test_user.stripe_customer_id = "cus_webhook"
        db_session.commit()

        response = post_webhook(
            client,
            "customer.subscription.deleted",
            subscription_payload("cus_webhook", "price_master", status_value="canceled"),
        )

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(test_user)
        assert test_user.subscription_status == "canceled"
        assert test_user.subscription_tier == "basic"

    def test_unknown_customer_is_acknowledged(self, client: TestClient) -> None:
        response = post_webhook(
            client,
            "customer.subscription.updated",
            subscription_payload("cus_nobody", "price_basic"),
        )
        assert response.status_code == status.HTTP_200_OK

    def test_unhandled_event_is_acknowledged(self, client: TestClient) -> None:
        response = post_webhook(client, "charge.refunded", {"id": "ch_1"})
        assert response.status_code == status.HTTP_200_OK


class TestBillingNotConfigured:
    def test_webhook_without_stripe(
        self, anonymous_client: TestClient, db_session: Session
    ) -> None:
        response = anonymous_client.post(
            "/api/v1/subscriptions/webhook",
            content=b"{}",
            headers={"Stripe-Signature": VALID_WEBHOOK_SIGNATURE},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"] == "Billing is not configured on this server"
