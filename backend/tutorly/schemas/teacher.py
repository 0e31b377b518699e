"""Public teacher directory schemas."""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import Field

from ..models.user import User
from .availability import AvailabilitySlotResponse
from .base import Money, StandardizedModel


class TeacherResponse(StandardizedModel):
    """Public teacher profile; never carries credentials."""

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    hourly_rate: Money
    rating: float = 0.0
    total_reviews: int = 0
    is_verified: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "TeacherResponse":
        profile = user.teacher_profile
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar_url=user.avatar_url,
            subjects=user.subject_names,
            bio=profile.bio,
            hourly_rate=profile.hourly_rate,
            rating=float(profile.rating or 0),
            total_reviews=int(profile.total_reviews or 0),
            is_verified=bool(profile.is_verified),
            created_at=user.created_at,
        )


class PopularSubject(StandardizedModel):
    subject: str
    count: int


class TeacherDateAvailability(StandardizedModel):
    """A teacher's open windows for one calendar date."""

    teacher_id: str
    target_date: date = Field(alias="date")
    day_of_week: int
    slots: List[AvailabilitySlotResponse]


class TeacherSchedule(StandardizedModel):
    """Open windows grouped by weekday key "0".."6"."""

    teacher_id: str
    schedule: Dict[str, List[AvailabilitySlotResponse]]
