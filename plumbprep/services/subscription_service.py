"""Service layer for Stripe subscriptions."""

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas, subscription_tiers
from plumbprep.config import get_settings
from plumbprep.exceptions import ValidationError
from plumbprep.services.billing import StripeBillingGateway, SubscriptionInfo, WebhookEvent
from plumbprep.services.billing.stripe_gateway import subscription_info_from_payload
from plumbprep.services.referral_service import ReferralService

logger = structlog.get_logger(__name__)

SUBSCRIPTION_SYNC_EVENTS = frozenset(
    {"customer.subscription.created", "customer.subscription.updated"}
)


class SubscriptionService:
    """
    Creates, cancels and upgrades subscriptions, and applies Stripe webhooks.

    The user row mirrors the Stripe subscription (tier, status, period end);
    feature gating reads that mirror instead of calling Stripe per request.
    """

    def __init__(self, db: Session, gateway: StripeBillingGateway | None = None) -> None:
        """Initialize service with database session and billing gateway."""
        self.db = db
        self.gateway = gateway
        self.settings = get_settings()
        self.user_repo = repositories.UserRepository(db)
        self.referral_service = ReferralService(db)

    def _require_gateway(self) -> StripeBillingGateway:
        if self.gateway is None:
            raise RuntimeError("SubscriptionService needs a billing gateway for this operation")
        return self.gateway

    def _apply_subscription(self, user: models.User, info: SubscriptionInfo) -> None:
        user.stripe_subscription_id = info.id
        user.subscription_status = info.status
        user.subscription_cancel_at_period_end = info.cancel_at_period_end
        if info.current_period_end is not None:
            user.subscription_current_period_end = info.current_period_end
        if info.customer_id:
            user.stripe_customer_id = info.customer_id

    def get_status(self, user: models.User, is_admin: bool = False) -> schemas.SubscriptionStatusResponse:
        tier = user.subscription_tier
        if is_admin:
            has_active = True
        elif not user.stripe_subscription_id:
            has_active = False
        else:
            has_active = subscription_tiers.is_subscription_active(user.subscription_status)
        return schemas.SubscriptionStatusResponse(
            has_active_subscription=has_active,
            tier=tier,
            status=user.subscription_status,
            current_period_end=user.subscription_current_period_end,
            cancel_at_period_end=user.subscription_cancel_at_period_end,
            features=sorted(subscription_tiers.get_tier_features(tier)),
        )

    def create_subscription(
        self, user: models.User, request: schemas.SubscriptionCreateRequest
    ) -> schemas.SubscriptionCreateResponse:
        """
        Subscribe a user to a plan with 50% off the first month.

        Raises:
            ValidationError: If no Stripe price is configured for the tier, or the
                requested price belongs to another tier
        """
        if user.stripe_subscription_id and subscription_tiers.is_subscription_active(
            user.subscription_status
        ):
            return schemas.SubscriptionCreateResponse(
                subscription_id=user.stripe_subscription_id,
                client_secret=None,
                status=user.subscription_status or "active",
                tier=user.subscription_tier,
            )

        price_id = request.price_id or self.settings.price_id_for_tier(request.tier)
        if not price_id:
            raise ValidationError(f"No Stripe price configured for the {request.tier} plan")
        if self.settings.tier_for_price_id(price_id) != request.tier:
            raise ValidationError(f"Price {price_id} does not match the {request.tier} plan")

        gateway = self._require_gateway()
        if not user.stripe_customer_id:
            name = " ".join(part for part in (user.first_name, user.last_name) if part) or None
            user.stripe_customer_id = gateway.create_customer(user.email, name)

        info = gateway.create_subscription(user.stripe_customer_id, price_id)
        self._apply_subscription(user, info)
        user.subscription_tier = request.tier
        self.referral_service.record_subscription_referral(user, request.tier)
        self.db.commit()

        logger.info(
            "subscription_created",
            user_id=user.id,
            tier=request.tier,
            subscription_id=info.id,
            status=info.status,
        )
        return schemas.SubscriptionCreateResponse(
            subscription_id=info.id,
            client_secret=info.client_secret,
            status=info.status,
            tier=request.tier,
        )

    def cancel_subscription(self, user: models.User) -> schemas.SubscriptionCancelResponse:
        """Cancel at the end of the current billing period."""
        if not user.stripe_subscription_id:
            raise ValidationError("No active subscription found")

        info = self._require_gateway().cancel_at_period_end(user.stripe_subscription_id)
        self._apply_subscription(user, info)
        self.db.commit()

        logger.info("subscription_cancel_requested", user_id=user.id, subscription_id=info.id)
        return schemas.SubscriptionCancelResponse(
            success=True,
            message="Subscription will be canceled at the end of the billing period",
            current_period_end=user.subscription_current_period_end,
        )

    def upgrade_subscription(
        self, user: models.User, new_tier: str
    ) -> schemas.SubscriptionUpgradeResponse:
        """
        Move the subscription to another plan with prorations.

        Raises:
            ValidationError: On an unknown tier, missing subscription or unconfigured price
        """
        if not subscription_tiers.is_valid_tier(new_tier):
            raise ValidationError("Invalid subscription tier")
        if not user.stripe_subscription_id:
            raise ValidationError("No active subscription found")
        if new_tier == user.subscription_tier:
            raise ValidationError(
                f"Already subscribed to the {subscription_tiers.get_tier_display_name(new_tier)} plan"
            )
        price_id = self.settings.price_id_for_tier(new_tier)
        if not price_id:
            raise ValidationError(f"No Stripe price configured for the {new_tier} plan")

        gateway = self._require_gateway()
        current = gateway.retrieve_subscription(user.stripe_subscription_id)
        info = gateway.change_price(user.stripe_subscription_id, current.item_id, price_id)

        previous_tier = user.subscription_tier
        self._apply_subscription(user, info)
        user.subscription_tier = new_tier
        self.referral_service.process_subscription_upgrade(user, new_tier)
        self.db.commit()

        logger.info(
            "subscription_tier_changed",
            user_id=user.id,
            previous_tier=previous_tier,
            new_tier=new_tier,
        )
        return schemas.SubscriptionUpgradeResponse(
            success=True,
            message=f"Subscription changed to {subscription_tiers.get_tier_display_name(new_tier)}",
            tier=new_tier,
            status=user.subscription_status,
        )

    def handle_webhook(self, event: WebhookEvent) -> None:
        """Apply a verified Stripe event to the local subscription mirror."""
        if event.type in SUBSCRIPTION_SYNC_EVENTS:
            self._sync_subscription(event)
        elif event.type == "customer.subscription.deleted":
            self._subscription_deleted(event)
        elif event.type == "invoice.payment_succeeded":
            logger.info(
                "invoice_payment_succeeded",
                customer_id=event.data.get("customer"),
                amount_paid=event.data.get("amount_paid"),
            )
        else:
            logger.debug("stripe_event_ignored", event_type=event.type)

    def _user_for_customer(self, event: WebhookEvent) -> models.User | None:
        customer_id = event.data.get("customer")
        user = self.user_repo.get_by_stripe_customer_id(customer_id) if customer_id else None
        if user is None:
            logger.warning("stripe_event_unknown_customer", event_type=event.type, customer_id=customer_id)
        return user

    def _sync_subscription(self, event: WebhookEvent) -> None:
        user = self._user_for_customer(event)
        if user is None:
            return
        info = subscription_info_from_payload(event.data)
        self._apply_subscription(user, info)

        new_tier = self.settings.tier_for_price_id(info.price_id or "")
        if new_tier and new_tier != user.subscription_tier:
            previous_tier = user.subscription_tier
            user.subscription_tier = new_tier
            self.referral_service.process_subscription_upgrade(user, new_tier)
            logger.info(
                "subscription_tier_synced",
                user_id=user.id,
                previous_tier=previous_tier,
                new_tier=new_tier,
            )
        self.db.commit()

    def _subscription_deleted(self, event: WebhookEvent) -> None:
        user = self._user_for_customer(event)
        if user is None:
            return
        user.subscription_status = "canceled"
        user.subscription_cancel_at_period_end = False
        user.subscription_tier = subscription_tiers.DEFAULT_TIER
        self.db.commit()
        logger.info("subscription_deleted", user_id=user.id)
