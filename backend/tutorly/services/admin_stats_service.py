# backend/tutorly/services/admin_stats_service.py
"""
Platform overview numbers for the admin dashboard.
"""

from datetime import datetime, timedelta, timezone
import logging

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import BookingStatus, RoleName
from ..repositories.factory import RepositoryFactory
from ..schemas.admin import PlatformOverview
from ..schemas.teacher import TeacherResponse
from .base import BaseService

logger = logging.getLogger(__name__)


class AdminStatsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.user_repository = RepositoryFactory.create_user_repository(db)
        self.teacher_repository = RepositoryFactory.create_teacher_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("platform_overview")
    def get_overview(self) -> PlatformOverview:
        """Counts by role and booking status, recent sign-ups and the top-rated teachers."""
        by_role = self.user_repository.count_by_role()
        since = datetime.now(timezone.utc) - timedelta(days=settings.recent_registration_days)

        by_status = {status.value: 0 for status in BookingStatus}
        by_status.update(self.booking_repository.count_by_status())

        top_teachers = self.teacher_repository.top_rated(settings.top_teachers_limit)

        return PlatformOverview(
            total_users=self.user_repository.count_all(),
            total_students=by_role.get(RoleName.STUDENT.value, 0),
            total_teachers=by_role.get(RoleName.TEACHER.value, 0),
            verified_teachers=self.user_repository.count_verified_teachers(),
            recent_registrations=self.user_repository.count_created_since(since),
            total_bookings=self.booking_repository.count_all(),
            bookings_by_status=by_status,
            top_teachers=[TeacherResponse.from_user(teacher) for teacher in top_teachers],
        )
