from datetime import datetime as dt

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserBase(BaseModel):
    id: int = Field(..., description="User id")
    email: str = Field(..., description="Login email")
    username: str | None = Field(None, description="Public username")


class UserDetailsResponse(UserBase):
    """Schema for returning user details."""

    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    subscription_tier: str = Field(..., description="basic, professional or master")
    subscription_status: str | None = Field(None, description="Stripe subscription status")
    referral_code: str | None = Field(None, description="Code other users sign up with")
    is_admin: bool = Field(False, description="Whether the user can use admin endpoints")
    created_at: dt

    model_config = {"from_attributes": True}


class UserUpdateRequest(BaseModel):
    """Schema for updating user profile."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=30)
    current_password: str | None = Field(
        None, min_length=1, description="Current password (required when changing password)"
    )
    new_password: str | None = Field(
        None, min_length=8, description="New password (min 8 characters)"
    )


class UserRegisterRequest(BaseModel):
    """Schema for user registration."""

    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255, description="Login email")
    username: str = Field(
        ..., min_length=3, max_length=100, description="Username for the new account"
    )
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=30)
    referred_by: str | None = Field(
        None, description="Username or referral code of the user who referred this account"
    )

    @field_validator("email", mode="after")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()
