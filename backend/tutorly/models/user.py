# backend/tutorly/models/user.py
"""
User model for the Tutorly platform.

A single accounts table holds students, teachers and admins. The role is a
plain column; teacher-specific data lives in TeacherProfile and
TeacherSubject, student-specific data (grade, interests) sits on the account.

Classes:
    User: Main account model for authentication and role management
"""

import logging
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import RoleName
from ..database import Base

if TYPE_CHECKING:
    from .teacher import TeacherProfile

logger = logging.getLogger(__name__)


class User(Base):
    """
    Account used for authentication and profile management.

    Attributes:
        id: ULID primary key
        name: Display name
        email: Unique, lowercased login email
        hashed_password: Bcrypt hash
        role: student, teacher or admin
        is_active: Whether the account may sign in
        avatar_url: Optional profile picture URL
        phone: Optional phone number
        grade: Student grade level (students only)
        interests: Student interests (students only)

    Relationships:
        teacher_profile: One-to-one with TeacherProfile (teachers only)
        subjects: Subjects taught (teachers only)
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    name = Column(String(100), nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default=RoleName.STUDENT.value, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    avatar_url = Column(String, nullable=True)
    phone = Column(String(20), nullable=True)

    # Student attributes
    grade = Column(String(50), nullable=True)
    interests = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    teacher_profile = relationship(
        "TeacherProfile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    subjects = relationship(
        "TeacherSubject",
        back_populates="teacher",
        cascade="all, delete-orphan",
        order_by="TeacherSubject.name",
    )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"

    @property
    def is_teacher(self) -> bool:
        return self.role == RoleName.TEACHER.value

    @property
    def is_student(self) -> bool:
        return self.role == RoleName.STUDENT.value

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN.value

    @property
    def subject_names(self) -> List[str]:
        return [subject.name for subject in self.subjects]

    @property
    def profile(self) -> Optional["TeacherProfile"]:
        """Alias kept for response building."""
        return self.teacher_profile
