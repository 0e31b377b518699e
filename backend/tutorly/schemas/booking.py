# backend/tutorly/schemas/booking.py
"""
Booking schemas for the Tutorly platform.

The lesson date is accepted either as YYYY-MM-DD or as a full ISO datetime,
in which case only the calendar date is kept.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from ..core.config import settings
from ..core.constants import (
    MAX_NOTES_LENGTH,
    MAX_RATING,
    MAX_REVIEW_LENGTH,
    MIN_RATING,
    TIME_PATTERN,
)
from ..core.enums import BookingStatus
from ..models.booking import Booking
from ..models.user import User
from ..utils.time_helpers import coerce_date
from ._strict_base import StrictRequestModel
from .base import ClockTime, Money, StandardizedModel


class BookingCreate(StrictRequestModel):
    teacher_id: str = Field(min_length=1)
    subject: str = Field(min_length=1, max_length=100)
    booking_date: date = Field(alias="date")
    start_time: str = Field(pattern=TIME_PATTERN, examples=["10:00"])
    duration: int = Field(description="Minutes")
    notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)

    @field_validator("duration")
    @classmethod
    def _duration_in_bounds(cls, value: int) -> int:
        if not settings.min_booking_duration <= value <= settings.max_booking_duration:
            raise ValueError(
                f"Duration must be between {settings.min_booking_duration} and "
                f"{settings.max_booking_duration} minutes"
            )
        return value

    @field_validator("booking_date", mode="before")
    @classmethod
    def _date_only(cls, value: Any) -> Any:
        if isinstance(value, (str, datetime)):
            try:
                return coerce_date(value)
            except ValueError as exc:
                raise ValueError("Invalid date") from exc
        return value


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus
    teacher_notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)


class BookingReviewCreate(StrictRequestModel):
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    review: Optional[str] = Field(default=None, max_length=MAX_REVIEW_LENGTH)


class BookingParty(StandardizedModel):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None

    @classmethod
    def from_user(cls, user: Optional[User]) -> Optional["BookingParty"]:
        if user is None:
            return None
        return cls(id=user.id, name=user.name, email=user.email, avatar_url=user.avatar_url)


class BookingResponse(StandardizedModel):
    id: str
    student_id: str
    teacher_id: str
    student: Optional[BookingParty] = None
    teacher: Optional[BookingParty] = None
    subject: str
    booking_date: date = Field(alias="date")
    start_time: ClockTime
    end_time: ClockTime
    duration: int
    status: str
    amount: Money
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    student_notes: Optional[str] = None
    teacher_notes: Optional[str] = None
    rating: Optional[int] = None
    review: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            student_id=booking.student_id,
            teacher_id=booking.teacher_id,
            student=BookingParty.from_user(booking.student),
            teacher=BookingParty.from_user(booking.teacher),
            subject=booking.subject,
            booking_date=booking.booking_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            duration=booking.duration,
            status=booking.status,
            amount=booking.amount,
            meeting_link=booking.meeting_link,
            notes=booking.notes,
            student_notes=booking.student_notes,
            teacher_notes=booking.teacher_notes,
            rating=booking.rating,
            review=booking.review,
            reviewed_at=booking.reviewed_at,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
