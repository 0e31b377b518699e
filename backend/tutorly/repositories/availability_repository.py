# backend/tutorly/repositories/availability_repository.py
"""
Availability Repository for the Tutorly platform.

Data access for recurring weekly availability windows, including the
coverage query the booking engine runs before inserting a booking.
"""

from datetime import time
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilitySlot
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[AvailabilitySlot]):
    """Repository for availability slots."""

    def __init__(self, db: Session):
        super().__init__(db, AvailabilitySlot)

    def get_teacher_slots(
        self,
        teacher_id: str,
        day_of_week: Optional[int] = None,
        only_available: bool = False,
    ) -> List[AvailabilitySlot]:
        """Slots for a teacher sorted by (day_of_week, start_time)."""
        try:
            query = self.db.query(AvailabilitySlot).filter(
                AvailabilitySlot.teacher_id == teacher_id
            )
            if day_of_week is not None:
                query = query.filter(AvailabilitySlot.day_of_week == day_of_week)
            if only_available:
                query = query.filter(AvailabilitySlot.is_available.is_(True))
            return cast(
                List[AvailabilitySlot],
                query.order_by(AvailabilitySlot.day_of_week, AvailabilitySlot.start_time).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting slots for teacher {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to get availability: {str(e)}")

    def find_duplicate(
        self,
        teacher_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
        exclude_slot_id: Optional[str] = None,
    ) -> Optional[AvailabilitySlot]:
        """Another slot of the teacher with exactly the same window, if any."""
        query = self.db.query(AvailabilitySlot).filter(
            AvailabilitySlot.teacher_id == teacher_id,
            AvailabilitySlot.day_of_week == day_of_week,
            AvailabilitySlot.start_time == start_time,
            AvailabilitySlot.end_time == end_time,
        )
        if exclude_slot_id:
            query = query.filter(AvailabilitySlot.id != exclude_slot_id)
        return cast(Optional[AvailabilitySlot], query.first())

    def find_covering_slot(
        self, teacher_id: str, day_of_week: int, start_time: time, end_time: time
    ) -> Optional[AvailabilitySlot]:
        """An available slot with start <= start_time and end >= end_time."""
        try:
            return cast(
                Optional[AvailabilitySlot],
                self.db.query(AvailabilitySlot)
                .filter(
                    AvailabilitySlot.teacher_id == teacher_id,
                    AvailabilitySlot.day_of_week == day_of_week,
                    AvailabilitySlot.is_available.is_(True),
                    AvailabilitySlot.start_time <= start_time,
                    AvailabilitySlot.end_time >= end_time,
                )
                .first(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slot coverage for {teacher_id}: {str(e)}")
            raise RepositoryException(f"Failed to check availability: {str(e)}")

    def delete_all_for_teacher(self, teacher_id: str) -> int:
        deleted = (
            self.db.query(AvailabilitySlot)
            .filter(AvailabilitySlot.teacher_id == teacher_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return int(deleted)
