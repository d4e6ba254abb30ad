import logging
from typing import Annotated

from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
from slowapi import Limiter
from slowapi.util import get_remote_address

from plumbprep import schemas
from plumbprep.config import get_settings
from plumbprep.database import DatabaseSession
from plumbprep.repositories import UserRepository
from plumbprep.services import UserService
from plumbprep.services.auth_service import (
    REFRESH_TOKEN_EXPIRE_DAYS,
    TokenWithRefresh,
    authenticate_user,
    create_token_pair,
    verify_refresh_token,
)

logger = logging.getLogger(__name__)
settings = get_settings()
router = APIRouter(prefix="/auth", tags=["auth"])
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)

REFRESH_COOKIE_PATH = f"{settings.API_V1_PREFIX}/auth"


class RefreshTokenRequest(BaseModel):
    """Request body for refresh token (used by mobile clients)."""

    refresh_token: str | None = None


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Set the refresh token as an httpOnly cookie."""
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
        max_age=REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key="refresh_token",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="strict",
        path=REFRESH_COOKIE_PATH,
    )


@router.post("/register")
async def register(
    response: Response, register_data: schemas.UserRegisterRequest, db: DatabaseSession
) -> TokenWithRefresh:
    """
    Register a new account on the basic plan and log it in.

    An optional `referred_by` username or referral code credits the referrer
    once the new user subscribes.
    """
    token_pair = UserService(db).register_user(register_data)
    set_refresh_cookie(response, token_pair.refresh_token)
    return token_pair


@router.post("/login")
@limiter.limit("5/minute")  # type: ignore[misc]
async def login(
    request: Request,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: DatabaseSession,
) -> TokenWithRefresh:
    # OAuth2PasswordRequestForm uses 'username' field, but we use it for email
    user = authenticate_user(form_data.username, form_data.password, db)
    if user is None:
        logger.info("Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token_pair = create_token_pair(user.id)
    set_refresh_cookie(response, token_pair.refresh_token)
    return token_pair


@router.post("/refresh")
@limiter.limit("10/minute")  # type: ignore[misc]
async def refresh(
    request: Request,
    response: Response,
    db: DatabaseSession,
    body: RefreshTokenRequest | None = None,
    refresh_token: Annotated[str | None, Cookie()] = None,
) -> TokenWithRefresh:
    """
    Refresh the access token using a refresh token.

    The refresh token can be provided either:
    - In an httpOnly cookie (for web clients)
    - In the request body (for mobile clients)
    """
    token = refresh_token
    if not token and body and body.refresh_token:
        token = body.refresh_token

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Refresh token required",
        )

    user_id = verify_refresh_token(token)
    user = UserRepository(db).get_by_id(user_id) if user_id is not None else None
    if user is None or not user.is_active:
        _clear_refresh_cookie(response)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    token_pair = create_token_pair(user.id)
    set_refresh_cookie(response, token_pair.refresh_token)
    return token_pair


@router.post("/logout")
async def logout(response: Response) -> dict[str, str]:
    """
    Log out by clearing the refresh token cookie.

    The access token stays valid until it expires.
    """
    _clear_refresh_cookie(response)
    return {"message": "Logged out successfully"}
