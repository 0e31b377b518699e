# backend/tutorly/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from functools import lru_cache
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.admin_stats_service import AdminStatsService
from ...services.auth_service import AuthService
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.email import EmailService
from ...services.notification_service import NotificationService
from ...services.review_service import ReviewService
from ...services.teacher_service import TeacherService
from ...services.template_service import TemplateService
from ...services.video_service import NullVideoSessionProvider, VideoService, VideoSessionProvider
from .database import get_db

logger = logging.getLogger(__name__)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_teacher_service(db: Session = Depends(get_db)) -> TeacherService:
    return TeacherService(db)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_admin_stats_service(db: Session = Depends(get_db)) -> AdminStatsService:
    return AdminStatsService(db)


@lru_cache(maxsize=1)
def get_notification_service() -> NotificationService:
    """
    Get the process-wide notification service.

    It holds no database session; background dispatch outlives the request.
    """
    logger.debug("Creating NotificationService singleton")
    return NotificationService(TemplateService(), EmailService())


@lru_cache(maxsize=1)
def get_video_provider() -> VideoSessionProvider:
    """Room membership lives in the provider, so it is shared across requests."""
    return NullVideoSessionProvider()


def get_video_service(
    db: Session = Depends(get_db),
    provider: VideoSessionProvider = Depends(get_video_provider),
) -> VideoService:
    return VideoService(db, provider)
