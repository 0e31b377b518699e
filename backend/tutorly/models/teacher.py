# backend/tutorly/models/teacher.py
"""
Teacher profile models for the Tutorly platform.

TeacherProfile extends a teacher account with pricing, verification and the
aggregate rating. TeacherSubject stores one row per subject taught so that
subject filters and popularity counts stay plain SQL.
"""

import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class TeacherProfile(Base):
    """
    Teacher-specific data, one-to-one with a teacher account.

    Attributes:
        teacher_id: Foreign key to users (one-to-one)
        bio: Free-form biography
        hourly_rate: Price per hour
        is_verified: Set by admins
        rating: Mean of all review ratings (0 when unrated)
        total_reviews: Number of reviewed bookings
        rating_sum: Sum of all review ratings
        booking_sequence: Incremented on every booking attempt; the UPDATE
            serializes concurrent bookings for the same teacher

    Business Rules:
        - rating == rating_sum / total_reviews whenever total_reviews > 0
    """

    __tablename__ = "teacher_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    bio = Column(Text, nullable=True)
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    rating = Column(Float, default=0.0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)
    rating_sum = Column(Integer, default=0, nullable=False)

    booking_sequence = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="teacher_profile")

    __table_args__ = (
        CheckConstraint("hourly_rate > 0", name="check_hourly_rate_positive"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<TeacherProfile {self.teacher_id}: rate={self.hourly_rate} rating={self.rating}>"


class TeacherSubject(Base):
    """A subject a teacher offers."""

    __tablename__ = "teacher_subjects"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(
        String(26),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(100), nullable=False, index=True)

    teacher = relationship("User", back_populates="subjects")

    __table_args__ = (UniqueConstraint("teacher_id", "name", name="uq_teacher_subject"),)

    def __repr__(self) -> str:
        return f"<TeacherSubject {self.teacher_id}: {self.name}>"
