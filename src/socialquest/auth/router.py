"""Authentication router: all /auth/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from socialquest.auth.schemas import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenPairResponse,
)
from socialquest.auth.service import login_user, logout_user, refresh_session, register_user
from socialquest.database import get_session
from socialquest.users.router import user_response

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> RegisterResponse:
    """Register with username + password. Seeds one daily and one weekly challenge."""
    user = await register_user(db, body.username, body.password)
    return RegisterResponse(user_id=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Login with username + password; updates the daily streak."""
    user, tokens = await login_user(db, body.username, body.password)
    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=user_response(user),
    )


@router.post("/refresh", response_model=TokenPairResponse)
async def refresh(
    body: RefreshRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenPairResponse:
    """Exchange the active refresh token for a new token pair."""
    tokens = await refresh_session(db, body.refresh_token)
    return TokenPairResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/logout")
async def logout(
    body: LogoutRequest,
    db: AsyncSession = Depends(get_session),
) -> dict[str, str]:
    """Invalidate the active refresh token."""
    await logout_user(db, body.refresh_token)
    return {"status": "logged_out"}
