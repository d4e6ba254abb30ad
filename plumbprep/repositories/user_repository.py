"""User repository for database operations."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, user_id: int) -> models.User | None:
        stmt = select(models.User).where(models.User.id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_email(self, email: str) -> models.User | None:
        """Get a user by email, case-insensitively."""
        stmt = select(models.User).where(func.lower(models.User.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_username(self, username: str) -> models.User | None:
        stmt = select(models.User).where(models.User.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_referral_code(self, referral_code: str) -> models.User | None:
        stmt = select(models.User).where(models.User.referral_code == referral_code)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_stripe_customer_id(self, customer_id: str) -> models.User | None:
        stmt = select(models.User).where(models.User.stripe_customer_id == customer_id)
        return self.db.execute(stmt).scalars().first()

    def create(
        self,
        email: str,
        hashed_password: str,
        username: str | None = None,
        **fields: Any,  # noqa: ANN401
    ) -> models.User:
        """Create a new user."""
        user = models.User(
            email=email,
            username=username,
            hashed_password=hashed_password,
            **fields,
        )
        self.db.add(user)
        self.db.flush()
        self.db.refresh(user)
        logger.info(f"Created user: {user.email} (id={user.id})")
        return user

    def update(self, user: models.User, **fields: Any) -> models.User:  # noqa: ANN401
        """Apply field updates to a user."""
        for key, value in fields.items():
            setattr(user, key, value)
        self.db.flush()
        self.db.refresh(user)
        return user
