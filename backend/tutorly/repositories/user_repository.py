# backend/tutorly/repositories/user_repository.py
"""
User Repository for the Tutorly platform.

Handles account lookups, registration writes and the account counts used by
the admin overview.
"""

from datetime import datetime
import logging
from typing import Any, Dict, Optional, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.enums import RoleName
from ..core.exceptions import RepositoryException
from ..models.teacher import TeacherProfile
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        """Initialize with User model."""
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    # ==========================================
    # Basic Lookups
    # ==========================================

    def get_by_id(self, id: Any, load_relationships: bool = True) -> Optional[User]:
        if id is None:
            return None
        try:
            query = self.db.query(User).filter(User.id == str(id))
            if load_relationships:
                query = query.options(
                    selectinload(User.teacher_profile), selectinload(User.subjects)
                )
            return cast(Optional[User], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by ID {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive lookup; emails are stored lowercased."""
        try:
            return cast(
                Optional[User],
                self.db.query(User).filter(User.email == email.strip().lower()).first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve user: {str(e)}")

    def email_exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    # ==========================================
    # Counts (admin overview)
    # ==========================================

    def count_all(self) -> int:
        return self.db.query(func.count(User.id)).scalar() or 0

    def count_by_role(self) -> Dict[str, int]:
        """Account counts keyed by role; every role is present."""
        rows = self.db.query(User.role, func.count(User.id)).group_by(User.role).all()
        counts = {role.value: 0 for role in RoleName}
        for role, total in rows:
            counts[role] = int(total)
        return counts

    def count_created_since(self, since: datetime) -> int:
        return self.db.query(func.count(User.id)).filter(User.created_at >= since).scalar() or 0

    def count_verified_teachers(self) -> int:
        return (
            self.db.query(func.count(TeacherProfile.id))
            .join(User, User.id == TeacherProfile.teacher_id)
            .filter(TeacherProfile.is_verified.is_(True), User.role == RoleName.TEACHER.value)
            .scalar()
            or 0
        )
