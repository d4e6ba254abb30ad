"""Beta signup repository for database operations."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class BetaSignupRepository:
    """Repository for BetaSignup database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def count(self) -> int:
        return self.db.execute(select(func.count(models.BetaSignup.id))).scalar() or 0

    def get_by_email(self, email: str) -> models.BetaSignup | None:
        stmt = select(models.BetaSignup).where(func.lower(models.BetaSignup.email) == email.lower())
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, email: str, name: str | None = None) -> models.BetaSignup:
        signup = models.BetaSignup(email=email.lower(), name=name)
        self.db.add(signup)
        self.db.flush()
        self.db.refresh(signup)
        logger.info(f"Beta signup recorded (id={signup.id})")
        return signup
