from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Annotated

import jwt
from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from jwt import InvalidTokenError
from pwdlib import PasswordHash
from pydantic import BaseModel

from plumbprep.config import get_settings
from plumbprep.database import DatabaseSession
from plumbprep.exceptions import CredentialsException
from plumbprep.models import User
from plumbprep.repositories import UserRepository

settings = get_settings()
SECRET_KEY = settings.SECRET_KEY
REFRESH_TOKEN_SECRET_KEY = settings.REFRESH_TOKEN_SECRET_KEY or SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS
PASSWORD_PEPPER = settings.PASSWORD_PEPPER


class TokenWithRefresh(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


class TokenData(BaseModel):
    user_id: str | None = None


password_hash = PasswordHash.recommended()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login", auto_error=False)


def hash_password(plain_password: str) -> str:
    """Hash a plain password for storage with pepper."""
    return password_hash.hash(plain_password + PASSWORD_PEPPER)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a peppered hash."""
    return password_hash.verify(plain_password + PASSWORD_PEPPER, hashed_password)


@lru_cache
def _dummy_hash() -> str:
    return password_hash.hash("dummy-password-for-timing")


def authenticate_user(email: str, password: str, db: DatabaseSession) -> User | None:
    user = UserRepository(db).get_by_email(email)
    if not user:
        verify_password(password, _dummy_hash())  # Constant time to avoid timing difference
        return None
    if not user.is_active:
        return None
    if not user.hashed_password or not verify_password(password, user.hashed_password):
        return None
    return user


def create_access_token(user_id: int) -> str:
    expire = datetime.now(UTC) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(user_id), "exp": expire, "type": "access"}
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_refresh_token(user_id: int) -> str:
    expire = datetime.now(UTC) + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    to_encode = {"sub": str(user_id), "exp": expire, "type": "refresh"}
    return jwt.encode(to_encode, REFRESH_TOKEN_SECRET_KEY, algorithm=ALGORITHM)


def verify_refresh_token(token: str) -> int | None:
    """Verify a refresh token and return the user_id if valid."""
    try:
        payload = jwt.decode(token, REFRESH_TOKEN_SECRET_KEY, algorithms=[ALGORITHM])
        if payload.get("type") != "refresh":
            return None
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return int(user_id)
    except (InvalidTokenError, ValueError):
        return None


def create_token_pair(user_id: int) -> TokenWithRefresh:
    return TokenWithRefresh(
        access_token=create_access_token(user_id),
        refresh_token=create_refresh_token(user_id),
        token_type="bearer",  # noqa: S106
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def _user_from_access_token(token: str, db: DatabaseSession) -> User:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        # Refresh tokens are only accepted by the /auth/refresh endpoint
        if payload.get("type") == "refresh":
            raise CredentialsException
        user_id = payload.get("sub")
        if user_id is None:
            raise CredentialsException
        token_data = TokenData(user_id=user_id)
    except InvalidTokenError:
        raise CredentialsException from InvalidTokenError

    if token_data.user_id is None:
        raise CredentialsException
    user = UserRepository(db).get_by_id(int(token_data.user_id))
    if user is None or not user.is_active:
        raise CredentialsException
    return user


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)], db: DatabaseSession
) -> User:
    return _user_from_access_token(token, db)


async def get_current_user_for_beacon(
    db: DatabaseSession,
    header_token: Annotated[str | None, Depends(optional_oauth2_scheme)],
    token: Annotated[str | None, Query(description="Access token for navigator.sendBeacon")] = None,
) -> User:
    """Authenticate from the Authorization header or, for beacons, a ``token`` query param."""
    access_token = header_token or token
    if not access_token:
        raise CredentialsException
    return _user_from_access_token(access_token, db)
