"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt) and JWT token management. Access and
refresh tokens are signed with different secrets and carry a ``typ`` claim,
so one can never be accepted in place of the other.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import Settings
from app.core.config import settings as default_settings
from app.core.exceptions import ForbiddenError, UnauthorizedError

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class Principal:
    """The authenticated caller as asserted by a verified token."""

    user_id: int
    role: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def _encode(
    user_id: int,
    role: str,
    token_type: str,
    secret: str,
    expires_delta: timedelta,
    algorithm: str,
) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "role": role,
        "typ": token_type,
        "iat": now,
        "exp": now + expires_delta,
        # Unique per token so a rotated refresh token never equals its predecessor
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def create_access_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a short-lived JWT access token.

    Args:
        user_id: Subject of the token
        role: Role claim (RECRUITER or CANDIDATE)
        expires_delta: Optional custom expiration time
        settings: Secrets and lifetimes to use, defaults to the process settings

    Returns:
        The encoded JWT token string
    """
    settings = settings or default_settings
    return _encode(
        user_id,
        role,
        ACCESS_TOKEN_TYPE,
        settings.JWT_SECRET,
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        settings.ALGORITHM,
    )


def create_refresh_token(
    user_id: int,
    role: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Create a long-lived JWT refresh token."""
    settings = settings or default_settings
    return _encode(
        user_id,
        role,
        REFRESH_TOKEN_TYPE,
        settings.REFRESH_SECRET,
        expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        settings.ALGORITHM,
    )


def issue_token_pair(user_id: int, role: str, settings: Optional[Settings] = None) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user_id, role, settings=settings),
        refresh_token=create_refresh_token(user_id, role, settings=settings),
    )


def _decode(token: str, secret: str, token_type: str, algorithm: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except InvalidTokenError:
        return None
    if payload.get("typ") != token_type:
        return None
    return payload


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[dict]:
    """
    Decode and validate a JWT access token.

    Returns:
        The decoded token payload, or None if invalid, expired or not an
        access token
    """
    settings = settings or default_settings
    return _decode(token, settings.JWT_SECRET, ACCESS_TOKEN_TYPE, settings.ALGORITHM)


def decode_refresh_token(token: str, settings: Optional[Settings] = None) -> Optional[dict]:
    """Decode and validate a JWT refresh token, or return None."""
    settings = settings or default_settings
    return _decode(token, settings.REFRESH_SECRET, REFRESH_TOKEN_TYPE, settings.ALGORITHM)


def _principal_from(payload: Optional[dict]) -> Principal:
    if payload is None:
        raise UnauthorizedError()
    try:
        user_id = int(payload["sub"])
        role = str(payload["role"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError()
    return Principal(user_id=user_id, role=role)


def authenticate(token: Optional[str], settings: Optional[Settings] = None) -> Principal:
    """
    Resolve a bearer access token into the calling principal.

    Raises:
        UnauthorizedError: token missing, malformed, expired or of the
        refresh kind
    """
    if not token:
        raise UnauthorizedError()
    return _principal_from(decode_access_token(token, settings))


def verify_refresh_token(token: Optional[str], settings: Optional[Settings] = None) -> Principal:
    """Resolve a refresh token into its principal, or raise UnauthorizedError."""
    if not token:
        raise UnauthorizedError("No refresh token", code="NoRefreshToken")
    payload = decode_refresh_token(token, settings)
    if payload is None:
        raise UnauthorizedError("Invalid refresh token", code="InvalidRefreshToken")
    return _principal_from(payload)


def authorize_role(principal: Principal, required: str) -> Principal:
    """Fail with Forbidden unless the principal holds the required role."""
    if principal.role != required:
        raise ForbiddenError()
    return principal
