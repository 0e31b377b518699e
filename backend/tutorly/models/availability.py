# backend/tutorly/models/availability.py
"""
Availability models for the Tutorly platform.

Availability is a set of recurring weekly windows per teacher. Each window
is keyed by weekday (0 = Sunday) and can be switched off without deleting it.

Classes:
    AvailabilitySlot: A teacher's recurring weekly window
"""

import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class AvailabilitySlot(Base):
    """Recurring weekly availability window for a teacher."""

    __tablename__ = "availability_slots"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    teacher_id = Column(String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(SmallInteger, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    teacher = relationship("User")

    __table_args__ = (
        UniqueConstraint(
            "teacher_id",
            "day_of_week",
            "start_time",
            "end_time",
            name="uq_availability_teacher_day_window",
        ),
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="check_day_of_week_range"),
        CheckConstraint("start_time < end_time", name="check_slot_time_order"),
        Index("idx_availability_teacher_day", "teacher_id", "day_of_week"),
    )

    def __repr__(self) -> str:
        return (
            f"<AvailabilitySlot {self.teacher_id} day={self.day_of_week} "
            f"{self.start_time}-{self.end_time} available={self.is_available}>"
        )
