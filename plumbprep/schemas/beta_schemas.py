from pydantic import BaseModel, Field

from plumbprep.schemas.user_schemas import EMAIL_PATTERN


class BetaStatus(BaseModel):
    limit: int
    signups: int
    spots_remaining: int = Field(..., ge=0)
    is_full: bool


class BetaSignupRequest(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    name: str | None = Field(None, max_length=255)


class BetaSignupResponse(BaseModel):
    success: bool
    message: str
    status: BetaStatus
