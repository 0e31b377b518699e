# backend/tutorly/services/booking_service.py
"""
Booking Service for the Tutorly platform.

Creates bookings against a teacher's recurring availability, lists and
reads them for the parties involved, and drives the status lifecycle.

Creation is atomic per teacher: the availability check, the overlap check
and the insert run in one transaction that starts by bumping the teacher's
booking_sequence, which serializes concurrent attempts for that teacher.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.enums import BOOKING_STATUS_TRANSITIONS, BookingStatus, RoleName
from ..core.exceptions import (
    BookingConflictException,
    ConflictException,
    DomainException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    TeacherUnavailableException,
    ValidationException,
)
from ..core.ulid_helper import generate_ulid
from ..models.booking import Booking
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCreate, BookingStatusUpdate
from ..utils.time_helpers import (
    add_minutes,
    crosses_midnight,
    day_of_week_index,
    string_to_time,
    time_to_string,
)
from .base import BaseService

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def calculate_amount(hourly_rate: Decimal, duration_minutes: int) -> Decimal:
    """hourly_rate * duration / 60, rounded to cents."""
    return (Decimal(hourly_rate) * Decimal(duration_minutes) / Decimal(60)).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )


def build_meeting_link(booking_id: str) -> str:
    return f"{settings.meeting_link_base.rstrip('/')}/class-{booking_id}"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Args:
        db: Database session
        today: Callable returning the server-local date; injectable for tests
    """

    def __init__(self, db: Session, today: Optional[Callable[[], date]] = None):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self._today = today or date.today

    @staticmethod
    def _reject(reason: str, exc: DomainException) -> DomainException:
        prometheus_metrics.record_booking_rejection(reason)
        return exc

    @BaseService.measure_operation("create_booking")
    def create_booking(self, student: User, data: BookingCreate) -> Booking:
        """
        Create a pending booking for the student.

        Raises:
            NotFoundException: Teacher missing or not a teacher
            ValidationException: Past date, bad duration, midnight crossing,
                or no covering availability window
            BookingConflictException: Overlaps an active booking
        """
        teacher = self.teacher_repository.get_teacher(data.teacher_id)
        if teacher is None:
            raise self._reject(
                "not_found", NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")
            )

        if data.booking_date <= self._today():
            raise self._reject(
                "validation",
                ValidationException(
                    "Booking date must be in the future",
                    code="BOOKING_DATE_NOT_IN_FUTURE",
                    details={"date": data.booking_date.isoformat()},
                ),
            )

        if not settings.min_booking_duration <= data.duration <= settings.max_booking_duration:
            raise self._reject(
                "validation",
                ValidationException(
                    f"Duration must be between {settings.min_booking_duration} and "
                    f"{settings.max_booking_duration} minutes",
                    code="INVALID_DURATION",
                    details={"duration": data.duration},
                ),
            )

        start_time = string_to_time(data.start_time)
        if crosses_midnight(start_time, data.duration):
            raise self._reject(
                "validation",
                ValidationException(
                    "Booking cannot extend past midnight",
                    code="BOOKING_CROSSES_MIDNIGHT",
                ),
            )
        end_time = add_minutes(start_time, data.duration)
        day_of_week = day_of_week_index(data.booking_date)

        self.log_operation(
            "create_booking",
            student_id=student.id,
            teacher_id=teacher.id,
            booking_date=data.booking_date.isoformat(),
            start_time=data.start_time,
            duration=data.duration,
        )

        with self.transaction():
            if not self.teacher_repository.acquire_booking_lock(teacher.id):
                raise self._reject(
                    "not_found",
                    NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND"),
                )

            if not self.availability_repository.find_covering_slot(
                teacher.id, day_of_week, start_time, end_time
            ):
                raise self._reject(
                    "unavailable",
                    TeacherUnavailableException(
                        details={
                            "day_of_week": day_of_week,
                            "start_time": time_to_string(start_time),
                            "end_time": time_to_string(end_time),
                        }
                    ),
                )

            if self.booking_repository.find_overlapping(
                teacher.id, data.booking_date, start_time, end_time
            ):
                raise self._reject("conflict", BookingConflictException())

            booking_id = generate_ulid()
            booking = self.booking_repository.create_booking(
                id=booking_id,
                student_id=student.id,
                teacher_id=teacher.id,
                subject=data.subject,
                booking_date=data.booking_date,
                start_time=start_time,
                end_time=end_time,
                duration=data.duration,
                status=BookingStatus.PENDING.value,
                amount=calculate_amount(teacher.teacher_profile.hourly_rate, data.duration),
                meeting_link=build_meeting_link(booking_id),
                notes=data.notes,
                student_notes=data.notes,
            )

        prometheus_metrics.record_booking_created()
        self.logger.info(f"Booking {booking.id} created for teacher {teacher.id}")
        return self._load(booking.id)

    def _load(self, booking_id: str) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        user: User,
        *,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> Tuple[List[Booking], int]:
        """
        Bookings visible to the caller: students see their own, teachers see
        theirs, admins see everything.
        """
        scope = {}
        if user.role == RoleName.STUDENT.value:
            scope["student_id"] = user.id
        elif user.role == RoleName.TEACHER.value:
            scope["teacher_id"] = user.id
        return self.booking_repository.list_for_user(
            status=status, offset=(page - 1) * limit, limit=limit, **scope
        )

    @BaseService.measure_operation("get_booking")
    def get_booking(self, user: User, booking_id: str) -> Booking:
        """A booking the caller takes part in (admins may read any)."""
        booking = self._load(booking_id)
        if not booking.is_party(user.id) and not user.is_admin:
            raise ForbiddenException()
        return booking

    @BaseService.measure_operation("update_status")
    def update_status(self, teacher: User, booking_id: str, data: BookingStatusUpdate) -> Booking:
        """
        Teacher-driven status change along the allowed transitions.

        Raises:
            ForbiddenException: Caller is not the booking's teacher
            InvalidStatusTransitionException: Transition not allowed
        """
        booking = self._load(booking_id)
        if booking.teacher_id != teacher.id:
            raise ForbiddenException()

        current = BookingStatus(booking.status)
        requested = BookingStatus(data.status)
        if requested not in BOOKING_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionException(current.value, requested.value)

        with self.transaction():
            booking.status = requested.value
            if data.teacher_notes is not None:
                booking.teacher_notes = data.teacher_notes
            self.booking_repository.flush()

        self.log_operation(
            "update_status",
            booking_id=booking.id,
            from_status=current.value,
            to_status=requested.value,
        )
        return self._load(booking.id)

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, user: User, booking_id: str) -> Booking:
        """
        Cancel on behalf of either party.

        Raises:
            ForbiddenException: Caller is not a party to the booking
            ConflictException: Booking is already completed or cancelled
        """
        booking = self._load(booking_id)
        if not booking.is_party(user.id):
            raise ForbiddenException()

        if not booking.is_cancellable:
            raise ConflictException(
                f"Cannot cancel a {booking.status} booking",
                code="BOOKING_NOT_CANCELLABLE",
                details={"current_status": booking.status},
            )

        previous = booking.status
        with self.transaction():
            booking.status = BookingStatus.CANCELLED.value
            self.booking_repository.flush()

        self.log_operation(
            "cancel_booking", booking_id=booking.id, cancelled_by=user.id, from_status=previous
        )
        return self._load(booking.id)
