"""Employer repository for database operations."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class EmployerRepository:
    """Repository for Employer database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, employer_id: int) -> models.Employer | None:
        stmt = select(models.Employer).where(models.Employer.id == employer_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_contact_email(self, email: str) -> models.Employer | None:
        stmt = select(models.Employer).where(
            func.lower(models.Employer.contact_email) == email.lower()
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_owner(self, owner_id: int) -> list[models.Employer]:
        stmt = (
            select(models.Employer)
            .where(models.Employer.owner_id == owner_id)
            .order_by(models.Employer.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, owner_id: int, **fields: Any) -> models.Employer:  # noqa: ANN401
        employer = models.Employer(owner_id=owner_id, **fields)
        self.db.add(employer)
        self.db.flush()
        self.db.refresh(employer)
        logger.info(f"Registered employer: {employer.company_name} (id={employer.id})")
        return employer
