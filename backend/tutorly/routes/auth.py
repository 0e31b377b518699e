# backend/tutorly/routes/auth.py
"""
Authentication routes for the Tutorly platform.

Thin controller endpoints; all business logic lives in AuthService.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from ..api.dependencies.auth import get_current_active_user
from ..api.dependencies.services import get_auth_service
from ..core.exceptions import DomainException
from ..models.user import User
from ..schemas.user import AuthResponse, UserLogin, UserProfileUpdate, UserRegister, UserResponse
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a student or teacher account and sign it in.

    Raises:
        HTTPException: 400 if the email is taken or role fields are missing
    """
    try:
        user = await asyncio.to_thread(auth_service.register_user, payload)
    except DomainException as e:
        raise e.to_http_exception()

    logger.info(f"Registered {user.role} account {user.id}")
    return AuthResponse(token=AuthService.issue_token(user), user=UserResponse.from_user(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    try:
        token, user = await asyncio.to_thread(auth_service.login, payload.email, payload.password)
    except DomainException as e:
        raise e.to_http_exception()
    return AuthResponse(token=token, user=UserResponse.from_user(user))


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: User = Depends(get_current_active_user)) -> UserResponse:
    return UserResponse.from_user(current_user)


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    payload: UserProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Update the caller's profile; teacher and student fields apply to their own role only."""
    try:
        user = await asyncio.to_thread(auth_service.update_profile, current_user, payload)
    except DomainException as e:
        raise e.to_http_exception()
    return UserResponse.from_user(user)
