# backend/tutorly/core/enums.py
"""
Core enums for the Tutorly platform.

Roles are a fixed column on the account rather than an RBAC table; every
account has exactly one role.
"""

from enum import Enum


class RoleName(str, Enum):
    """Account roles."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Created by a student, awaiting the teacher
    CONFIRMED = "confirmed"  # Accepted by the teacher
    COMPLETED = "completed"  # Lesson took place
    CANCELLED = "cancelled"  # Declined or cancelled by either party
    NO_SHOW = "no-show"  # Student didn't attend

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """Statuses that hold a teacher's time."""
        return (cls.PENDING, cls.CONFIRMED)

    @classmethod
    def terminal_for_cancel(cls) -> tuple["BookingStatus", ...]:
        """Statuses from which a booking can no longer be cancelled."""
        return (cls.COMPLETED, cls.CANCELLED)


# Teacher-driven transitions through the status endpoint
BOOKING_STATUS_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}
