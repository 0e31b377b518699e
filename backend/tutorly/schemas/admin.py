"""Admin overview schemas."""

from typing import Dict, List

from .base import StandardizedModel
from .teacher import TeacherResponse


class PlatformOverview(StandardizedModel):
    total_users: int
    total_students: int
    total_teachers: int
    verified_teachers: int
    recent_registrations: int
    total_bookings: int
    bookings_by_status: Dict[str, int]
    top_teachers: List[TeacherResponse]
