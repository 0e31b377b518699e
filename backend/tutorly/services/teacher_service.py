# backend/tutorly/services/teacher_service.py
"""
Teacher directory service.

Public listing with subject/rating/price filters, profile detail, popular
subjects and the read-only availability views shown on a teacher's page.
"""

from datetime import date
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import DEFAULT_PAGE_LIMIT
from ..core.exceptions import NotFoundException
from ..models.availability import AvailabilitySlot
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..utils.time_helpers import day_of_week_index
from .base import BaseService

logger = logging.getLogger(__name__)


class TeacherService(BaseService):
    """Read side of the teacher directory."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)

    @BaseService.measure_operation("list_teachers")
    def list_teachers(
        self,
        *,
        subject: Optional[str] = None,
        min_rating: Optional[float] = None,
        max_price: Optional[float] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> Tuple[List[User], int]:
        """
        Filtered directory page sorted by rating then review count.

        Returns:
            (teachers on the page, total matching)
        """
        return self.teacher_repository.list_teachers(
            subject=subject,
            min_rating=min_rating,
            max_price=max_price,
            offset=(page - 1) * limit,
            limit=limit,
        )

    @BaseService.measure_operation("get_teacher")
    def get_teacher(self, teacher_id: str) -> User:
        teacher = self.teacher_repository.get_teacher(teacher_id)
        if teacher is None:
            raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")
        return teacher

    @BaseService.measure_operation("popular_subjects")
    def popular_subjects(self, limit: Optional[int] = None) -> List[Tuple[str, int]]:
        return self.teacher_repository.popular_subjects(limit or settings.popular_subjects_limit)

    def get_availability_for_date(
        self, teacher_id: str, target_date: date
    ) -> Tuple[int, List[AvailabilitySlot]]:
        """Open windows that apply on the weekday of target_date."""
        self.get_teacher(teacher_id)
        day = day_of_week_index(target_date)
        slots = self.availability_repository.get_teacher_slots(
            teacher_id, day_of_week=day, only_available=True
        )
        return day, slots

    def get_weekly_schedule(self, teacher_id: str) -> Dict[str, List[AvailabilitySlot]]:
        """Open windows grouped by weekday; all seven keys present."""
        self.get_teacher(teacher_id)
        schedule: Dict[str, List[AvailabilitySlot]] = {str(day): [] for day in range(7)}
        for slot in self.availability_repository.get_teacher_slots(
            teacher_id, only_available=True
        ):
            schedule[str(slot.day_of_week)].append(slot)
        return schedule
