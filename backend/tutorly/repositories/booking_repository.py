# backend/tutorly/repositories/booking_repository.py
"""
Booking Repository for the Tutorly platform.

Implements booking data access: role-scoped listing, the overlap query used
for conflict detection and the aggregate counts used by the admin overview.
"""

from datetime import date, datetime, time
import logging
from typing import Dict, List, Optional, Tuple, cast

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.enums import BookingStatus
from ..core.exceptions import BookingConflictException, RepositoryException
from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = [status.value for status in BookingStatus.active()]

ACTIVE_START_INDEX = "uq_bookings_active_teacher_start"

# SQLite reports the indexed columns rather than the index name
_SQLITE_ACTIVE_START_MESSAGE = (
    "UNIQUE constraint failed: bookings.teacher_id, bookings.booking_date, bookings.start_time"
)


def is_active_start_violation(exc: IntegrityError) -> bool:
    """True when the insert collided with another active booking's start."""
    message = str(exc.orig)
    return ACTIVE_START_INDEX in message or _SQLITE_ACTIVE_START_MESSAGE in message


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def _apply_eager_loading(self, query):
        return query.options(joinedload(Booking.student), joinedload(Booking.teacher))

    def create_booking(self, **kwargs) -> Booking:
        """
        Insert a booking. Does NOT commit.

        A collision on the active-start index is a booking conflict; any other
        integrity failure is a RepositoryException.
        """
        try:
            booking = Booking(**kwargs)
            self.db.add(booking)
            self.db.flush()
            return booking
        except IntegrityError as exc:
            self.db.rollback()
            if is_active_start_violation(exc):
                self.logger.warning("Active booking index rejected insert: %s", exc.orig)
                raise BookingConflictException() from exc
            self.logger.error("Integrity error creating booking: %s", exc.orig)
            raise RepositoryException(f"Failed to create booking: {exc.orig}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating booking: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create booking: {str(e)}")

    def find_overlapping(
        self,
        teacher_id: str,
        booking_date: date,
        start_time: time,
        end_time: time,
    ) -> List[Booking]:
        """
        Active bookings of the teacher on the date whose interval intersects
        [start_time, end_time).
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.teacher_id == teacher_id,
                Booking.booking_date == booking_date,
                Booking.status.in_(_ACTIVE_STATUSES),
                Booking.start_time < end_time,
                Booking.end_time > start_time,
            )
            return cast(List[Booking], query.all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking booking overlap: {str(e)}")
            raise RepositoryException(f"Failed to check booking conflicts: {str(e)}")

    def list_for_user(
        self,
        *,
        student_id: Optional[str] = None,
        teacher_id: Optional[str] = None,
        status: Optional[str] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Booking], int]:
        """
        Paginated bookings scoped to a student or a teacher (neither means all).

        Soonest lesson first (date, then start time).
        """
        try:
            query = self.db.query(Booking)
            if student_id:
                query = query.filter(Booking.student_id == student_id)
            if teacher_id:
                query = query.filter(Booking.teacher_id == teacher_id)
            if status:
                query = query.filter(Booking.status == status)

            total = query.count()
            bookings = (
                self._apply_eager_loading(query)
                .order_by(Booking.booking_date.asc(), Booking.start_time.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return cast(List[Booking], bookings), total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def record_review(
        self,
        booking_id: str,
        student_id: str,
        rating: int,
        review: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        """
        Write the review only if the booking is the student's, completed and
        still unrated. The guard and the write are one UPDATE, so of several
        concurrent submissions exactly one matches.

        Returns:
            True if this call stored the review
        """
        result = self.db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.student_id == student_id,
                Booking.status == BookingStatus.COMPLETED.value,
                Booking.rating.is_(None),
            )
            .values(rating=rating, review=review, reviewed_at=reviewed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def count_by_status(self) -> Dict[str, int]:
        """Booking counts keyed by status; every status is present."""
        rows = self.db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
        counts = {status.value: 0 for status in BookingStatus}
        for status, total in rows:
            counts[status] = int(total)
        return counts

    def count_all(self) -> int:
        return self.db.query(func.count(Booking.id)).scalar() or 0
