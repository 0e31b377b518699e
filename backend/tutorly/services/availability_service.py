# backend/tutorly/services/availability_service.py
"""
Availability Service for the Tutorly platform.

Teachers manage recurring weekly windows (weekday + start/end). Windows of
the same teacher may overlap; only an exact duplicate of another window is
rejected.
"""

from datetime import time
import logging
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from ..core.exceptions import (
    DuplicateSlotException,
    ForbiddenException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..models.availability import AvailabilitySlot
from ..repositories.factory import RepositoryFactory
from ..schemas.availability import (
    AvailabilitySlotCreate,
    AvailabilitySlotUpdate,
)
from ..utils.time_helpers import string_to_time, time_to_string
from .base import BaseService

logger = logging.getLogger(__name__)


def _ordered_window(start: time, end: time) -> None:
    if start >= end:
        raise ValidationException(
            "End time must be after start time",
            code="INVALID_TIME_RANGE",
            details={"start_time": time_to_string(start), "end_time": time_to_string(end)},
        )


class AvailabilityService(BaseService):
    """Service for a teacher's recurring weekly availability."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_availability_repository(db)

    def _get_owned_slot(self, teacher_id: str, slot_id: str) -> AvailabilitySlot:
        slot = self.repository.get_by_id(slot_id, load_relationships=False)
        if slot is None:
            raise NotFoundException("Availability slot not found", code="SLOT_NOT_FOUND")
        if slot.teacher_id != teacher_id:
            self.logger.warning(f"Teacher {teacher_id} tried to modify slot {slot_id}")
            raise ForbiddenException()
        return slot

    @BaseService.measure_operation("create_slot")
    def create_slot(self, teacher_id: str, data: AvailabilitySlotCreate) -> AvailabilitySlot:
        """
        Create a recurring weekly window.

        Raises:
            ValidationException: If start is not before end
            DuplicateSlotException: If the exact window already exists
        """
        start = string_to_time(data.start_time)
        end = string_to_time(data.end_time)
        _ordered_window(start, end)
        self.log_operation("create_slot", teacher_id=teacher_id, day_of_week=data.day_of_week)

        if self.repository.find_duplicate(teacher_id, data.day_of_week, start, end):
            raise DuplicateSlotException(data.day_of_week, data.start_time, data.end_time)

        with self.transaction():
            try:
                slot = self.repository.create(
                    teacher_id=teacher_id,
                    day_of_week=data.day_of_week,
                    start_time=start,
                    end_time=end,
                    is_available=data.is_available,
                )
            except RepositoryException:
                # Lost a race with an identical insert
                raise DuplicateSlotException(data.day_of_week, data.start_time, data.end_time)
        return slot

    @BaseService.measure_operation("get_own_slots")
    def get_slots_grouped(self, teacher_id: str) -> Dict[str, List[AvailabilitySlot]]:
        """All of the teacher's windows grouped by weekday key "0".."6"."""
        grouped: Dict[str, List[AvailabilitySlot]] = {str(day): [] for day in range(7)}
        for slot in self.repository.get_teacher_slots(teacher_id):
            grouped[str(slot.day_of_week)].append(slot)
        return grouped

    @BaseService.measure_operation("get_teacher_slots")
    def get_teacher_slots(
        self, teacher_id: str, day_of_week: Optional[int] = None
    ) -> List[AvailabilitySlot]:
        """Public read, sorted by (day, start)."""
        return self.repository.get_teacher_slots(teacher_id, day_of_week=day_of_week)

    @BaseService.measure_operation("update_slot")
    def update_slot(
        self, teacher_id: str, slot_id: str, data: AvailabilitySlotUpdate
    ) -> AvailabilitySlot:
        """
        Partially update a window owned by the caller.

        Ordering is re-validated against the merged values whenever a time
        changes.
        """
        slot = self._get_owned_slot(teacher_id, slot_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        start = string_to_time(changes["start_time"]) if "start_time" in changes else slot.start_time
        end = string_to_time(changes["end_time"]) if "end_time" in changes else slot.end_time
        times_changed = "start_time" in changes or "end_time" in changes

        if times_changed:
            _ordered_window(start, end)
            if self.repository.find_duplicate(
                teacher_id, slot.day_of_week, start, end, exclude_slot_id=slot.id
            ):
                raise DuplicateSlotException(
                    slot.day_of_week, time_to_string(start), time_to_string(end)
                )

        with self.transaction():
            slot.start_time = start
            slot.end_time = end
            if "is_available" in changes:
                slot.is_available = changes["is_available"]
            self.repository.flush()

        self.log_operation("update_slot", teacher_id=teacher_id, slot_id=slot_id)
        return slot

    @BaseService.measure_operation("delete_slot")
    def delete_slot(self, teacher_id: str, slot_id: str) -> None:
        slot = self._get_owned_slot(teacher_id, slot_id)
        with self.transaction():
            self.repository.delete(slot.id)
        self.log_operation("delete_slot", teacher_id=teacher_id, slot_id=slot_id)

    @BaseService.measure_operation("replace_slots")
    def replace_slots(
        self, teacher_id: str, slots: List[AvailabilitySlotCreate]
    ) -> Dict[str, List[AvailabilitySlot]]:
        """
        Replace all of the teacher's windows in one transaction.

        Every entry is validated first; duplicates inside the payload are
        rejected before anything is deleted.
        """
        parsed: List[Tuple[AvailabilitySlotCreate, time, time]] = []
        seen: Set[Tuple[int, time, time]] = set()
        for entry in slots:
            start = string_to_time(entry.start_time)
            end = string_to_time(entry.end_time)
            _ordered_window(start, end)
            key = (entry.day_of_week, start, end)
            if key in seen:
                raise DuplicateSlotException(entry.day_of_week, entry.start_time, entry.end_time)
            seen.add(key)
            parsed.append((entry, start, end))

        with self.transaction():
            removed = self.repository.delete_all_for_teacher(teacher_id)
            for entry, start, end in parsed:
                self.repository.create(
                    teacher_id=teacher_id,
                    day_of_week=entry.day_of_week,
                    start_time=start,
                    end_time=end,
                    is_available=entry.is_available,
                )

        self.log_operation(
            "replace_slots", teacher_id=teacher_id, slots_removed=removed, slots_created=len(parsed)
        )
        return self.get_slots_grouped(teacher_id)
