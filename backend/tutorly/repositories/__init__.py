# backend/tutorly/repositories/__init__.py
"""Repository layer for the Tutorly platform."""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .teacher_repository import TeacherRepository
from .user_repository import UserRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "RepositoryFactory",
    "TeacherRepository",
    "UserRepository",
]
