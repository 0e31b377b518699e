# backend/tutorly/schemas/availability.py
"""
Availability schemas for the Tutorly platform.

Slots are recurring weekly windows. Times travel as "HH:MM" strings;
ordering (start before end) is checked by the service so that partial
updates are validated against the stored values.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..core.constants import TIME_PATTERN
from ._strict_base import StrictRequestModel
from .base import ClockTime, StandardizedModel


class AvailabilitySlotCreate(StrictRequestModel):
    """Schema for creating a new availability slot."""

    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday ... 6 = Saturday")
    start_time: str = Field(pattern=TIME_PATTERN, examples=["09:00"])
    end_time: str = Field(pattern=TIME_PATTERN, examples=["12:00"])
    is_available: bool = True


class AvailabilitySlotUpdate(StrictRequestModel):
    """Schema for updating an availability slot."""

    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    is_available: Optional[bool] = None


class AvailabilityBulkReplace(StrictRequestModel):
    """Replace every slot of the caller with this list."""

    slots: List[AvailabilitySlotCreate] = Field(default_factory=list, max_length=200)


class AvailabilitySlotResponse(StandardizedModel):
    """Schema for returning availability slot data."""

    id: str
    teacher_id: str
    day_of_week: int
    start_time: ClockTime
    end_time: ClockTime
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
