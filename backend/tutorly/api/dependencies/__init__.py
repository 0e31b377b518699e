# backend/tutorly/api/dependencies/__init__.py
"""
FastAPI dependencies: database sessions, the authenticated user, role
guards and service factories.
"""

from .auth import (
    get_current_active_user,
    get_current_student,
    get_current_teacher,
    get_current_user,
    require_admin,
)
from .database import get_db

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_current_student",
    "get_current_teacher",
    "require_admin",
]
