# backend/tutorly/models/__init__.py
"""
Database models for the Tutorly platform.

Importing this package registers every table on Base.metadata.
"""

from .availability import AvailabilitySlot
from .booking import Booking
from .teacher import TeacherProfile, TeacherSubject
from .user import User

__all__ = [
    "AvailabilitySlot",
    "Booking",
    "TeacherProfile",
    "TeacherSubject",
    "User",
]
