# backend/tests/services/test_availability_service.py
from datetime import time

import pytest

from tutorly.core.exceptions import (
    DuplicateSlotException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from tutorly.models.availability import AvailabilitySlot
from tutorly.schemas.availability import AvailabilitySlotCreate, AvailabilitySlotUpdate
from tutorly.services.availability_service import AvailabilityService


def _slot(day=1, start="09:00", end="12:00", available=True) -> AvailabilitySlotCreate:
    return AvailabilitySlotCreate(day_of_week=day, start_time=start, end_time=end, is_available=available)


class TestCreateSlot:
    def test_create(self, db, test_teacher):
        slot = AvailabilityService(db).create_slot(test_teacher.id, _slot())
        assert slot.id
        assert slot.teacher_id == test_teacher.id
        assert (slot.start_time, slot.end_time) == (time(9, 0), time(12, 0))

    @pytest.mark.parametrize("start,end", [("12:00", "09:00"), ("10:00", "10:00")])
    def test_rejects_unordered_window(self, db, test_teacher, start, end):
        with pytest.raises(ValidationException) as exc_info:
            AvailabilityService(db).create_slot(test_teacher.id, _slot(start=start, end=end))
        assert exc_info.value.code == "INVALID_TIME_RANGE"

    def test_rejects_exact_duplicate(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot())
        with pytest.raises(DuplicateSlotException):
            service.create_slot(test_teacher.id, _slot())

    def test_overlapping_windows_are_allowed(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(start="09:00", end="12:00"))
        service.create_slot(test_teacher.id, _slot(start="11:00", end="14:00"))
        assert db.query(AvailabilitySlot).count() == 2


class TestReadSlots:
    def test_grouped_has_every_weekday(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(day=3, start="14:00", end="16:00"))
        service.create_slot(test_teacher.id, _slot(day=3, start="08:00", end="10:00"))

        grouped = service.get_slots_grouped(test_teacher.id)
        assert sorted(grouped) == [str(day) for day in range(7)]
        assert [s.start_time for s in grouped["3"]] == [time(8, 0), time(14, 0)]
        assert grouped["0"] == []

    def test_public_read_sorted_and_filtered(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(day=5, start="10:00", end="11:00"))
        service.create_slot(test_teacher.id, _slot(day=1, start="15:00", end="16:00"))
        service.create_slot(test_teacher.id, _slot(day=1, start="09:00", end="10:00"))

        slots = service.get_teacher_slots(test_teacher.id)
        assert [(s.day_of_week, s.start_time) for s in slots] == [
            (1, time(9, 0)),
            (1, time(15, 0)),
            (5, time(10, 0)),
        ]
        assert len(service.get_teacher_slots(test_teacher.id, 5)) == 1


class TestUpdateDelete:
    def test_partial_update_validates_merged_window(self, db, test_teacher):
        service = AvailabilityService(db)
        slot = service.create_slot(test_teacher.id, _slot(start="09:00", end="12:00"))

        with pytest.raises(ValidationException):
            service.update_slot(test_teacher.id, slot.id, AvailabilitySlotUpdate(start_time="13:00"))

        updated = service.update_slot(
            test_teacher.id, slot.id, AvailabilitySlotUpdate(end_time="13:00", is_available=False)
        )
        assert updated.start_time == time(9, 0)
        assert updated.end_time == time(13, 0)
        assert updated.is_available is False

    def test_update_into_duplicate(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(start="09:00", end="10:00"))
        other = service.create_slot(test_teacher.id, _slot(start="10:00", end="11:00"))
        with pytest.raises(DuplicateSlotException):
            service.update_slot(
                test_teacher.id, other.id, AvailabilitySlotUpdate(start_time="09:00", end_time="10:00")
            )

    def test_only_owner_may_change(self, db, test_teacher, make_teacher):
        other = make_teacher(email="other.teacher@example.com", name="Other Teacher")
        service = AvailabilityService(db)
        slot = service.create_slot(test_teacher.id, _slot())

        with pytest.raises(ForbiddenException):
            service.update_slot(other.id, slot.id, AvailabilitySlotUpdate(is_available=False))
        with pytest.raises(ForbiddenException):
            service.delete_slot(other.id, slot.id)

    def test_delete(self, db, test_teacher):
        service = AvailabilityService(db)
        slot = service.create_slot(test_teacher.id, _slot())
        service.delete_slot(test_teacher.id, slot.id)
        assert db.query(AvailabilitySlot).count() == 0
        with pytest.raises(NotFoundException):
            service.delete_slot(test_teacher.id, slot.id)


class TestReplaceSlots:
    def test_replaces_everything(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(day=2))

        grouped = service.replace_slots(
            test_teacher.id, [_slot(day=1, start="09:00", end="12:00"), _slot(day=4, start="13:00", end="15:00")]
        )
        assert len(grouped["1"]) == 1
        assert len(grouped["4"]) == 1
        assert grouped["2"] == []

    def test_invalid_entry_keeps_existing_slots(self, db, test_teacher):
        service = AvailabilityService(db)
        service.create_slot(test_teacher.id, _slot(day=2))

        with pytest.raises(DuplicateSlotException):
            service.replace_slots(test_teacher.id, [_slot(day=1), _slot(day=1)])
        with pytest.raises(ValidationException):
            service.replace_slots(test_teacher.id, [_slot(day=1, start="12:00", end="09:00")])

        assert db.query(AvailabilitySlot).filter(AvailabilitySlot.day_of_week == 2).count() == 1
