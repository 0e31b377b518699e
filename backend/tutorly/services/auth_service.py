# backend/tutorly/services/auth_service.py
"""
Authentication Service for the Tutorly platform.

Handles registration, credential checks, token issuance, current-user
lookup and profile updates. Follows the service layer pattern to keep
business logic out of routes.
"""

from decimal import Decimal
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..auth import (
    DUMMY_HASH_FOR_TIMING_ATTACK,
    create_access_token,
    get_password_hash,
    verify_password,
)
from ..core.enums import RoleName
from ..core.exceptions import UnauthorizedException, ValidationException
from ..models.teacher import TeacherProfile
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.user import UserProfileUpdate, UserRegister
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db: Session) -> None:
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token({"sub": user.id, "role": user.role})

    @BaseService.measure_operation("register_user")
    def register_user(self, data: UserRegister) -> User:
        """
        Register a new student or teacher.

        Raises:
            ValidationException: If the email is already registered
        """
        email = data.email.strip().lower()
        self.log_operation("register_user", email=email, role=data.role)

        if self.user_repository.email_exists(email):
            self.logger.warning(f"Registration failed - email already exists: {email}")
            raise ValidationException("Email already registered", code="EMAIL_TAKEN")

        hashed_password = get_password_hash(data.password)

        with self.transaction():
            user: User = self.user_repository.create(
                name=data.name,
                email=email,
                hashed_password=hashed_password,
                role=data.role,
                phone=data.phone,
                grade=data.grade if data.role == RoleName.STUDENT.value else None,
                interests=(data.interests or []) if data.role == RoleName.STUDENT.value else None,
            )

            if data.role == RoleName.TEACHER.value:
                self.teacher_repository.create(
                    teacher_id=user.id,
                    bio=data.bio,
                    hourly_rate=Decimal(str(data.hourly_rate)),
                )
                self.teacher_repository.replace_subjects(user, data.subjects or [])

        self.logger.info(f"Registered {data.role} account {user.id}")
        return self.get_user(user.id)

    @BaseService.measure_operation("authenticate_user")
    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user by email and password.

        Returns:
            User object if authentication successful, None otherwise
        """
        normalized = email.strip().lower()
        self.logger.info(f"Authentication attempt for user: {normalized}")

        user = self.user_repository.get_by_email(normalized)
        if not user:
            self.logger.warning(f"Authentication failed - user not found: {normalized}")
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            return None

        if not verify_password(password, user.hashed_password):
            self.logger.warning(f"Authentication failed - incorrect password: {normalized}")
            return None

        if not user.is_active:
            self.logger.warning(f"Authentication failed - account deactivated: {normalized}")
            return None

        return user

    def login(self, email: str, password: str) -> Tuple[str, User]:
        """Authenticate and issue a token; bad credentials raise an opaque 401."""
        user = self.authenticate_user(email, password)
        if user is None:
            raise UnauthorizedException("Invalid credentials", code="INVALID_CREDENTIALS")
        return self.issue_token(user), self.get_user(user.id)

    @BaseService.measure_operation("get_user")
    def get_user(self, user_id: str) -> User:
        """
        Load the account behind a token.

        Raises:
            UnauthorizedException: If the account no longer exists or is inactive
        """
        user = self.user_repository.get_by_id(user_id)
        if user is None or not user.is_active:
            raise UnauthorizedException("Could not validate credentials")
        return user

    @BaseService.measure_operation("update_profile")
    def update_profile(self, user: User, data: UserProfileUpdate) -> User:
        """Apply a partial profile update; role-specific fields only for their role."""
        changes = data.model_dump(exclude_unset=True)
        self.log_operation("update_profile", user_id=user.id, fields=sorted(changes))

        with self.transaction():
            for field in ("name", "phone", "avatar_url"):
                if field in changes:
                    setattr(user, field, changes[field])

            if user.is_student:
                if "grade" in changes:
                    user.grade = changes["grade"]
                if "interests" in changes:
                    user.interests = changes["interests"] or []

            if user.is_teacher:
                profile: Optional[TeacherProfile] = user.teacher_profile
                if profile is None:
                    raise ValidationException("Teacher profile is missing")
                if "bio" in changes:
                    profile.bio = changes["bio"]
                if changes.get("hourly_rate") is not None:
                    profile.hourly_rate = Decimal(str(changes["hourly_rate"]))
                if "subjects" in changes:
                    if not changes["subjects"]:
                        raise ValidationException("Teachers must list at least one subject")
                    self.teacher_repository.replace_subjects(user, changes["subjects"])

            self.db.flush()

        return self.get_user(user.id)

    @BaseService.measure_operation("create_admin")
    def create_admin(self, email: str, name: str, password: str) -> User:
        """Create an admin account; used by the management command only."""
        normalized = email.strip().lower()
        if self.user_repository.email_exists(normalized):
            raise ValidationException("Email already registered", code="EMAIL_TAKEN")

        with self.transaction():
            user: User = self.user_repository.create(
                name=name,
                email=normalized,
                hashed_password=get_password_hash(password),
                role=RoleName.ADMIN.value,
            )
        self.logger.info(f"Created admin account {user.id}")
        return user
