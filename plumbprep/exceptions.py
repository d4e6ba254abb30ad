"""Custom exception hierarchy for the PlumbPrep application."""

from typing import Any

from fastapi import HTTPException
from starlette import status


class PlumbPrepError(Exception):
    """Base exception for all PlumbPrep errors."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        """Initialize exception with message and optional status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def extra(self) -> dict[str, Any]:
        """Additional fields merged into the JSON error body."""
        return {}


class NotFoundError(PlumbPrepError):
    """Resource not found error."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 404 status code."""
        super().__init__(message, status_code=404)


class CourseNotFoundError(NotFoundError):
    """Course not found error."""

    def __init__(self, course_ref: int | str | None = None, *, message: str | None = None) -> None:
        """Initialize with course id/slug or custom message."""
        self.course_ref = course_ref
        if message:
            super().__init__(message)
        elif course_ref is not None:
            super().__init__(f"Course '{course_ref}' not found")
        else:
            super().__init__("Course not found")


class ContentNotFoundError(NotFoundError):
    """Course content not found error."""

    def __init__(self, content_id: int | None = None, *, message: str | None = None) -> None:
        """Initialize with content ID or custom message."""
        self.content_id = content_id
        if message:
            super().__init__(message)
        elif content_id is not None:
            super().__init__(f"Content with id {content_id} not found")
        else:
            super().__init__("Content not found")


class JobNotFoundError(NotFoundError):
    """Job posting not found error."""

    def __init__(self, job_id: int | None = None, *, message: str | None = None) -> None:
        """Initialize with job ID or custom message."""
        self.job_id = job_id
        if message:
            super().__init__(message)
        elif job_id is not None:
            super().__init__(f"Job with id {job_id} not found")
        else:
            super().__init__("Job not found")


class StudySessionNotFoundError(NotFoundError):
    """Study session not found error."""

    def __init__(self, session_id: int | None = None, *, message: str | None = None) -> None:
        """Initialize with session ID or custom message."""
        self.session_id = session_id
        if message:
            super().__init__(message)
        elif session_id is not None:
            super().__init__(f"Study session with id {session_id} not found")
        else:
            super().__init__("Study session not found")


class ValidationError(PlumbPrepError):
    """Validation error."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        """Initialize with message and 400 status code by default."""
        super().__init__(message, status_code=status_code)


class ConflictError(PlumbPrepError):
    """Resource already exists or the request conflicts with current state."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 409 status code."""
        super().__init__(message, status_code=409)


class PermissionDeniedError(PlumbPrepError):
    """Authenticated user may not perform the action."""

    def __init__(self, message: str = "Permission denied") -> None:
        """Initialize with message and 403 status code."""
        super().__init__(message, status_code=403)


class SubscriptionRequiredError(PermissionDeniedError):
    """Feature requires a (higher) active subscription."""

    def __init__(
        self,
        message: str = "This feature requires an active subscription",
        *,
        required_tier: str | None = None,
    ) -> None:
        """Initialize with message and the minimum tier that unlocks the feature."""
        self.required_tier = required_tier
        super().__init__(message)

    @property
    def extra(self) -> dict[str, Any]:
        return {"subscription_required": True, "required_tier": self.required_tier}


class EnrollmentRequiredError(PermissionDeniedError):
    """Feature requires enrollment in at least one course."""

    def __init__(self, message: str = "Job board access requires course enrollment") -> None:
        super().__init__(message)

    @property
    def extra(self) -> dict[str, Any]:
        return {"enrollment_required": True}


class ServiceError(PlumbPrepError):
    """Service layer error."""


class BillingError(PlumbPrepError):
    """Payment provider call failed."""

    def __init__(self, message: str) -> None:
        """Initialize with message and 502 status code."""
        super().__init__(message, status_code=502)


CredentialsException = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)
