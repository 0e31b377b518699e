# backend/tutorly/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The user lookup runs through asyncio.to_thread so the sync SQLAlchemy
query never blocks the event loop.
"""

import asyncio
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user_id
from ...core.exceptions import DomainException, ForbiddenException
from ...models.user import User
from ...services.auth_service import AuthService
from .database import get_db

logger = logging.getLogger(__name__)


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user from the database.

    Raises:
        HTTPException: 401 if the account no longer exists or is inactive
    """
    try:
        return await asyncio.to_thread(AuthService(db).get_user, user_id)
    except DomainException as e:
        raise e.to_http_exception()


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    if not current_user.is_active:
        raise ForbiddenException().to_http_exception()
    return current_user


async def get_current_teacher(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """
    Get the current authenticated teacher.

    Raises:
        HTTPException: 403 if the user is not a teacher
    """
    if not current_user.is_teacher:
        logger.info(f"User {current_user.id} denied teacher-only endpoint")
        raise ForbiddenException().to_http_exception()
    return current_user


async def get_current_student(
    current_user: User = Depends(get_current_active_user),
) -> User:
    """
    Get the current authenticated student.

    Raises:
        HTTPException: 403 if the user is not a student
    """
    if not current_user.is_student:
        logger.info(f"User {current_user.id} denied student-only endpoint")
        raise ForbiddenException().to_http_exception()
    return current_user


async def require_admin(user: User = Depends(get_current_active_user)) -> User:
    if not user.is_admin:
        logger.info(f"User {user.id} denied admin endpoint")
        raise ForbiddenException().to_http_exception()
    return user
