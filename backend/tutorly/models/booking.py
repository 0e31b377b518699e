# backend/tutorly/models/booking.py
"""
Booking model for the Tutorly platform.

A booking reserves [start_time, end_time) on booking_date with a teacher.
The times are stored directly on the booking so that later availability
edits never rewrite history.
"""

import logging
from typing import Any

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.constants import MAX_NOTES_LENGTH, MAX_REVIEW_LENGTH
from ..core.enums import BookingStatus
from ..database import Base

logger = logging.getLogger(__name__)

_ACTIVE_STATUS_SQL = "status IN ('pending', 'confirmed')"


class Booking(Base):
    """
    Lesson booking between a student and a teacher.

    Attributes:
        duration: Length in minutes; end_time == start_time + duration
        amount: hourly_rate * duration / 60, two decimals
        meeting_link: Placeholder video link derived from the booking id
        rating/review/reviewed_at: Filled once by the student after completion
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    teacher_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)

    subject = Column(String(100), nullable=False)
    booking_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    duration = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    meeting_link = Column(String, nullable=True)

    notes = Column(String(MAX_NOTES_LENGTH), nullable=True)
    student_notes = Column(String(MAX_NOTES_LENGTH), nullable=True)
    teacher_notes = Column(String(MAX_NOTES_LENGTH), nullable=True)

    rating = Column(SmallInteger, nullable=True)
    review = Column(Text(MAX_REVIEW_LENGTH), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("User", foreign_keys=[student_id])
    teacher = relationship("User", foreign_keys=[teacher_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'no-show')",
            name="ck_bookings_status",
        ),
        CheckConstraint("duration > 0", name="check_duration_positive"),
        CheckConstraint("amount >= 0", name="check_amount_non_negative"),
        CheckConstraint("start_time < end_time", name="check_time_order"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)", name="check_rating_range"
        ),
        # Second guard behind the per-teacher lock: two active bookings can
        # never share a start on the same day.
        Index(
            "uq_bookings_active_teacher_start",
            "teacher_id",
            "booking_date",
            "start_time",
            unique=True,
            postgresql_where=text(_ACTIVE_STATUS_SQL),
            sqlite_where=text(_ACTIVE_STATUS_SQL),
        ),
        Index("idx_bookings_teacher_date_status", "teacher_id", "booking_date", "status"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: student={self.student_id}, "
            f"teacher={self.teacher_id}, date={self.booking_date}, "
            f"time={self.start_time}-{self.end_time}, status={self.status}>"
        )

    @property
    def is_active(self) -> bool:
        return self.status in {status.value for status in BookingStatus.active()}

    @property
    def is_cancellable(self) -> bool:
        return self.status not in {status.value for status in BookingStatus.terminal_for_cancel()}

    def is_party(self, user_id: str) -> bool:
        return user_id in (self.student_id, self.teacher_id)
