"""Authentication routes for the NusaDana API.

Routes:
- POST /api/auth/register - Create account, return user + token
- POST /api/auth/login    - Verify credentials, return user + token
- GET  /api/auth/me       - Current user from the bearer token
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nusadana.config import AppConfig
from nusadana.db.models import UserModel
from nusadana.web.auth import (
    CurrentUser,
    create_access_token,
    hash_password,
    require_user,
    verify_password,
)
from nusadana.web.dependencies import get_app_config, get_db_session
from nusadana.web.models import AuthResponse, LoginRequest, RegisterRequest, UserOut

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    config: AppConfig = Depends(get_app_config),
):
    """Create a user account.

    A duplicate email surfaces as the database's integrity error (HTTP 500).
    """
    user = UserModel(
        name=payload.name,
        email=payload.email,
        password_hash=await asyncio.to_thread(
            hash_password, payload.password, config.auth.bcrypt_rounds
        ),
        role=payload.role,
    )
    session.add(user)
    await session.commit()

    logger.info("user_registered", user_id=user.id, role=user.role)
    return AuthResponse(
        user=UserOut.model_validate(user),
        token=create_access_token(user, config.auth),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
    config: AppConfig = Depends(get_app_config),
):
    result = await session.execute(select(UserModel).where(UserModel.email == payload.email))
    user = result.scalars().first()

    if user is None or not await asyncio.to_thread(
        verify_password, payload.password, user.password_hash
    ):
        logger.info("login_failed", email=payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    logger.info("login_succeeded", user_id=user.id)
    return AuthResponse(
        user=UserOut.model_validate(user),
        token=create_access_token(user, config.auth),
    )


@router.get("/me", response_model=UserOut)
async def me(
    current: CurrentUser = Depends(require_user),
    session: AsyncSession = Depends(get_db_session),
):
    if current.id is None:
        raise HTTPException(status_code=401, detail="Authentication required")

    user = await session.get(UserModel, current.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user
