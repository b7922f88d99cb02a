"""
Authentication API endpoints.

Handles registration, login, refresh-token rotation and password changes.
Access tokens travel in the Authorization header; the refresh token is set
as an HttpOnly cookie and may also be posted in the body.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import ConflictError, UnauthorizedError
from app.core.security import (
    Principal,
    authenticate,
    authorize_role,
    get_password_hash,
    issue_token_pair,
    verify_password,
    verify_refresh_token,
)
from app.crud import profiles as profiles_crud
from app.crud import users as users_crud
from app.db.session import get_db
from app.models import User
from app.models.enums import Role
from app.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    RefreshRequest,
    UserLogin,
    UserRegister,
    UserResponse,
)

router = APIRouter()

# OAuth2 scheme for token authentication; missing tokens are reported as our own 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ============== Dependencies ==============


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the running app was built with."""
    return request.app.state.settings


async def get_current_principal(
    token: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
) -> Principal:
    """Dependency resolving the bearer access token into a principal."""
    return authenticate(token, settings)


async def get_current_user(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises UnauthorizedError if the token is invalid or the user no longer exists.
    """
    user = users_crud.get_user(db, principal.user_id)
    if user is None:
        raise UnauthorizedError()
    return user


def require_role(role: Role):
    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        return authorize_role(principal, role.value)

    return dependency


require_recruiter = require_role(Role.RECRUITER)
require_candidate = require_role(Role.CANDIDATE)


# ============== Helper Functions ==============


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    user = users_crud.get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def _set_refresh_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path="/",
        domain=settings.COOKIE_DOMAIN or None,
        secure=settings.COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def _clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path="/",
        domain=settings.COOKIE_DOMAIN or None,
    )


def _sign_in(response: Response, user: User, settings: Settings) -> AuthResponse:
    tokens = issue_token_pair(user.id, user.role.value, settings)
    _set_refresh_cookie(response, tokens.refresh_token, settings)
    return AuthResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserResponse.model_validate(user),
    )


# ============== API Endpoints ==============


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Register a new user.

    Creates the account with an empty profile for its role and signs it in.
    """
    if users_crud.get_user_by_email(db, user_data.email):
        raise ConflictError("Email already registered", code="EmailTaken")

    try:
        user = users_crud.create_user(
            db,
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            role=user_data.role,
            name=user_data.name,
            phone=user_data.phone,
        )
    except IntegrityError:
        # Lost a race with a concurrent registration
        db.rollback()
        raise ConflictError("Email already registered", code="EmailTaken")

    if user.role == Role.CANDIDATE:
        profiles_crud.upsert_candidate_profile(db, user.id, {})
    else:
        profiles_crud.upsert_recruiter_profile(db, user.id, {})

    return _sign_in(response, user, settings)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password; returns an access token and sets the refresh cookie."""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise UnauthorizedError("Incorrect email or password", code="InvalidCredentials")
    return _sign_in(response, user, settings)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get current authenticated user.

    Requires valid JWT token in Authorization header.
    """
    return current_user


@router.post("/refresh", response_model=AuthResponse)
async def refresh(
    request: Request,
    response: Response,
    payload: Optional[RefreshRequest] = Body(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Exchange a refresh token for a new token pair.

    The refresh token is read from the body when given, otherwise from the
    cookie. Every successful call rotates the refresh token.
    """
    token = payload.refresh_token if payload is not None and payload.refresh_token else None
    if token is None:
        token = request.cookies.get(settings.REFRESH_COOKIE_NAME)

    principal = verify_refresh_token(token, settings)
    user = users_crud.get_user(db, principal.user_id)
    if user is None:
        raise UnauthorizedError("Invalid refresh token", code="InvalidRefreshToken")
    return _sign_in(response, user, settings)


@router.post("/logout")
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    _clear_refresh_cookie(response, settings)
    return {"ok": True}


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    response: Response,
        current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Change the caller's password; the refresh cookie is cleared to force a new login."""
    if not verify_password(data.current_password, current_user.password_hash):
        raise UnauthorizedError("Current password is incorrect", code="InvalidCurrentPassword")

    users_crud.set_password_hash(db, current_user, get_password_hash(data.new_password))
    _clear_refresh_cookie(response, settings)
    return {"ok": True}

