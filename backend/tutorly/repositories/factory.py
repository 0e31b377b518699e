# backend/tutorly/repositories/factory.py
"""
Repository Factory for the Tutorly platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from sqlalchemy.orm import Session

from .availability_repository import AvailabilityRepository
from .booking_repository import BookingRepository
from .teacher_repository import TeacherRepository
from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation so services never construct them directly.
    """

    @staticmethod
    def create_user_repository(db: Session) -> UserRepository:
        return UserRepository(db)

    @staticmethod
    def create_teacher_repository(db: Session) -> TeacherRepository:
        return TeacherRepository(db)

    @staticmethod
    def create_availability_repository(db: Session) -> AvailabilityRepository:
        """Create repository for availability operations."""
        return AvailabilityRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> BookingRepository:
        """Create repository for booking operations."""
        return BookingRepository(db)
