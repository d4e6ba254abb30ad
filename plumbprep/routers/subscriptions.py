"""API routes for subscription plans and Stripe billing."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from plumbprep import schemas, subscription_tiers
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, is_admin_user
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import SubscriptionService
from plumbprep.services.billing import StripeBillingGateway, get_billing_gateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

BillingGateway = Annotated[StripeBillingGateway, Depends(get_billing_gateway)]


async def get_raw_body(request: Request) -> bytes:
    """Raw request body, needed to verify Stripe signatures."""
    return await request.body()


RawBody = Annotated[bytes, Depends(get_raw_body)]


@router.get("/plans", response_model=list[subscription_tiers.PricingPlan])
def get_plans() -> list[subscription_tiers.PricingPlan]:
    """Subscription plans with price, features and certification tracks. Public."""
    return subscription_tiers.get_pricing_plans()


@router.get("/status", response_model=schemas.SubscriptionStatusResponse)
def get_subscription_status(
    db: DatabaseSession, current_user: CurrentUser
) -> schemas.SubscriptionStatusResponse:
    """Subscription state mirrored from Stripe. Admins always report active."""
    return SubscriptionService(db).get_status(current_user, is_admin_user(current_user))


@router.post("", response_model=schemas.SubscriptionCreateResponse)
def create_subscription(
    request: schemas.SubscriptionCreateRequest,
    db: DatabaseSession,
    current_user: CurrentUser,
    gateway: BillingGateway,
) -> schemas.SubscriptionCreateResponse:
    """
    Subscribe to a plan. The first month is 50% off.

    The response carries the client secret the frontend uses to confirm the
    first payment with Stripe Elements.
    """
    try:
        return SubscriptionService(db, gateway).create_subscription(current_user, request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to create subscription for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("/cancel", response_model=schemas.SubscriptionCancelResponse)
def cancel_subscription(
    db: DatabaseSession, current_user: CurrentUser, gateway: BillingGateway
) -> schemas.SubscriptionCancelResponse:
    try:
        return SubscriptionService(db, gateway).cancel_subscription(current_user)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to cancel subscription for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("/upgrade", response_model=schemas.SubscriptionUpgradeResponse)
def upgrade_subscription(
    request: schemas.SubscriptionUpgradeRequest,
    db: DatabaseSession,
    current_user: CurrentUser,
    gateway: BillingGateway,
) -> schemas.SubscriptionUpgradeResponse:
    """Change plan with prorated billing."""
    try:
        return SubscriptionService(db, gateway).upgrade_subscription(current_user, request.new_tier)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to upgrade subscription for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("/webhook", response_model=schemas.WebhookResponse)
def stripe_webhook(
    payload: RawBody,
    db: DatabaseSession,
    gateway: BillingGateway,
    stripe_signature: Annotated[str | None, Header(alias="Stripe-Signature")] = None,
) -> schemas.WebhookResponse:
    """
    Receive Stripe events.

    The raw body is needed to verify the signature, so it is read by a
    dependency rather than parsed into a model.
    """
    event = gateway.parse_webhook(payload, stripe_signature)
    try:
        SubscriptionService(db, gateway).handle_webhook(event)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to handle Stripe event {event.type}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
    return schemas.WebhookResponse(received=True)
