"""FastAPI dependencies for the application."""

from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Annotated, Any, TypeVar

from fastapi import Depends, HTTPException, status

from plumbprep import subscription_tiers
from plumbprep.config import get_settings
from plumbprep.database import DatabaseSession
from plumbprep.exceptions import (
    EnrollmentRequiredError,
    PermissionDeniedError,
    SubscriptionRequiredError,
)
from plumbprep.feature_flags import is_ai_enabled
from plumbprep.models import User
from plumbprep.repositories import EnrollmentRepository
from plumbprep.services.auth_service import get_current_user

F = TypeVar("F", bound=Callable[..., Any])

CurrentUser = Annotated[User, Depends(get_current_user)]


def require_ai_enabled(func: F) -> F:
    """
    Decorator that requires AI to be enabled for the endpoint.

    Returns HTTP 410 Gone if AI features are disabled.

    Usage:
        @router.post("/endpoint")
        @require_ai_enabled
        async def my_endpoint():
            ...
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        if not is_ai_enabled():
            raise HTTPException(
                status_code=status.HTTP_410_GONE,
                detail="AI features are not enabled on this server",
            )
        return await func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def is_admin_user(user: User) -> bool:
    """Admins are flagged in the database or listed in ADMIN_EMAILS."""
    return user.is_admin or user.email.lower() in get_settings().ADMIN_EMAILS


async def require_admin(current_user: CurrentUser) -> User:
    if not is_admin_user(current_user):
        raise PermissionDeniedError("Admin access required")
    return current_user


AdminUser = Annotated[User, Depends(require_admin)]


def check_feature_access(user: User, feature: str) -> None:
    """
    Raise SubscriptionRequiredError unless the user may use a tier feature.

    The tier must include the feature and, for anything above the basic
    plan, the Stripe subscription must be active. Admins always pass.
    """
    if is_admin_user(user):
        return
    required_tier = subscription_tiers.minimum_tier_for(feature)
    if not subscription_tiers.has_feature(user.subscription_tier, feature):
        display = subscription_tiers.get_tier_display_name(required_tier or "")
        raise SubscriptionRequiredError(
            f"This feature requires the {display} plan or higher",
            required_tier=required_tier,
        )
    if subscription_tiers.requires_paid_subscription(feature) and not (
        subscription_tiers.is_subscription_active(user.subscription_status)
    ):
        raise SubscriptionRequiredError(
            "Professional tools access requires an active subscription",
            required_tier=required_tier,
        )


def require_feature(feature: str) -> Callable[..., Coroutine[Any, Any, User]]:
    """
    Dependency factory gating an endpoint behind a subscription tier feature.

    Usage:
        @router.post("/chat")
        async def chat(user: Annotated[User, Depends(require_feature("ai_mentor"))]):
            ...
    """

    async def dependency(current_user: CurrentUser) -> User:
        check_feature_access(current_user, feature)
        return current_user

    return dependency


async def require_enrollment(current_user: CurrentUser, db: DatabaseSession) -> User:
    """Job board access is limited to learners enrolled in at least one course."""
    if is_admin_user(current_user):
        return current_user
    if EnrollmentRepository(db).count_by_user(current_user.id) == 0:
        raise EnrollmentRequiredError()
    return current_user


EnrolledUser = Annotated[User, Depends(require_enrollment)]
