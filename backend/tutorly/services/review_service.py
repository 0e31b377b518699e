# backend/tutorly/services/review_service.py
"""
Review Service for the Tutorly platform.

A student reviews a completed booking once. The teacher's aggregate is
kept as a running mean (rating_sum / total_reviews). It is folded in only
when the conditional review UPDATE matched, in the same transaction, so
repeated or concurrent submissions are counted once.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus
from ..core.exceptions import ConflictException, ForbiddenException, NotFoundException
from ..models.booking import Booking
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingReviewCreate
from .base import BaseService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)

    @BaseService.measure_operation("submit_review")
    def submit_review(self, student: User, booking_id: str, data: BookingReviewCreate) -> Booking:
        """
        Attach a rating (and optional text) to a completed booking.

        Raises:
            NotFoundException: Booking missing
            ForbiddenException: Caller is not the booking's student
            ConflictException: Booking not completed, or already reviewed
        """
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if booking.student_id != student.id:
            raise ForbiddenException()
        if booking.status != BookingStatus.COMPLETED.value:
            raise ConflictException(
                "Can only review completed bookings",
                code="BOOKING_NOT_COMPLETED",
                details={"current_status": booking.status},
            )
        if booking.rating is not None:
            raise ConflictException("Booking already reviewed", code="ALREADY_REVIEWED")

        teacher_id = booking.teacher_id
        with self.transaction():
            stored = self.booking_repository.record_review(
                booking_id,
                student.id,
                data.rating,
                data.review,
                datetime.now(timezone.utc),
            )
            if not stored:
                # Another submission for this booking committed first
                raise ConflictException("Booking already reviewed", code="ALREADY_REVIEWED")
            self.teacher_repository.apply_review_rating(teacher_id, data.rating)

        self.log_operation(
            "submit_review", booking_id=booking_id, teacher_id=teacher_id, rating=data.rating
        )
        return self.booking_repository.get_by_id(booking_id)
