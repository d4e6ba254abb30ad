"""Service layer for user-related business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from plumbprep import schemas
from plumbprep.feature_flags import is_user_registrations_enabled
from plumbprep.models import User
from plumbprep.repositories import UserRepository
from plumbprep.services.auth_service import (
    TokenWithRefresh,
    create_token_pair,
    hash_password,
    verify_password,
)
from plumbprep.subscription_tiers import DEFAULT_TIER
from plumbprep.utils import generate_referral_code

logger = logging.getLogger(__name__)


class UserService:
    """Service for handling user-related operations."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.user_repo = UserRepository(db)

    def _unique_referral_code(self, username: str) -> str:
        code = generate_referral_code(username)
        while self.user_repo.get_by_referral_code(code) is not None:
            code = generate_referral_code(username)
        return code

    def _resolve_referrer(self, reference: str | None) -> User | None:
        if not reference:
            return None
        return self.user_repo.get_by_username(reference) or self.user_repo.get_by_referral_code(
            reference.upper()
        )

    def register_user(self, register_data: schemas.UserRegisterRequest) -> TokenWithRefresh:
        """
        Register a new user account.

        Creates a new user on the basic tier, links the referrer when one is
        given, and returns a token pair for immediate login.

        Raises:
            HTTPException: If registration is disabled or email/username already exists
        """
        if not is_user_registrations_enabled():
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User registration is currently disabled",
            )

        if self.user_repo.get_by_email(register_data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )
        if self.user_repo.get_by_username(register_data.username):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username already taken",
            )

        referrer = self._resolve_referrer(register_data.referred_by)
        if register_data.referred_by and referrer is None:
            logger.warning(f"Unknown referrer '{register_data.referred_by}' ignored at signup")

        user = self.user_repo.create(
            email=register_data.email,
            username=register_data.username,
            hashed_password=hash_password(register_data.password),
            first_name=register_data.first_name,
            last_name=register_data.last_name,
            phone=register_data.phone,
            subscription_tier=DEFAULT_TIER,
            referral_code=self._unique_referral_code(register_data.username),
            referred_by_id=referrer.id if referrer else None,
        )
        self.db.commit()

        logger.info(f"Successfully registered user with email: {register_data.email}")
        return create_token_pair(user.id)

    def update_user(self, user: User, update_data: schemas.UserUpdateRequest) -> User:
        """
        Update profile fields and, when both passwords are given, the password.

        Raises:
            HTTPException: If the current password is missing or wrong
        """
        fields: dict[str, object] = {}
        for name in ("first_name", "last_name", "phone"):
            value = getattr(update_data, name)
            if value is not None:
                fields[name] = value

        if update_data.new_password is not None:
            if update_data.current_password is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Current password is required to set a new password",
                )
            if not user.hashed_password or not verify_password(
                update_data.current_password, user.hashed_password
            ):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Current password is incorrect",
                )
            fields["hashed_password"] = hash_password(update_data.new_password)

        if fields:
            user = self.user_repo.update(user, **fields)
            self.db.commit()
            logger.info(f"Updated profile for user {user.id}: {sorted(fields)}")
        return user
