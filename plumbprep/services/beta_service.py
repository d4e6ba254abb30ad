"""Beta program signup counter."""

import structlog
from sqlalchemy.orm import Session

from plumbprep import repositories, schemas
from plumbprep.config import get_settings
from plumbprep.exceptions import ConflictError

logger = structlog.get_logger(__name__)


class BetaService:
    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.limit = get_settings().BETA_SIGNUP_LIMIT
        self.signup_repo = repositories.BetaSignupRepository(db)

    def get_status(self) -> schemas.BetaStatus:
        signups = self.signup_repo.count()
        return schemas.BetaStatus(
            limit=self.limit,
            signups=signups,
            spots_remaining=max(0, self.limit - signups),
            is_full=signups >= self.limit,
        )

    def signup(self, request: schemas.BetaSignupRequest) -> schemas.BetaSignupResponse:
        """
        Claim a beta spot.

        Raises:
            ConflictError: If the email already signed up or the beta is full
        """
        if self.signup_repo.get_by_email(request.email) is not None:
            raise ConflictError("This email is already signed up for the beta")
        if self.get_status().is_full:
            raise ConflictError("The beta program is full")

        self.signup_repo.create(request.email, request.name)
        self.db.commit()
        status = self.get_status()
        logger.info("beta_signup", signups=status.signups, spots_remaining=status.spots_remaining)
        return schemas.BetaSignupResponse(
            success=True, message="You're in! Welcome to the beta.", status=status
        )
