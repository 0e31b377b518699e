# backend/tests/services/test_booking_service.py
"""
BookingService tests: creation rules, the Monday scenario, listing scope
and the status lifecycle.
"""

from datetime import datetime, time, timedelta
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError
import pytest

from tutorly.core.exceptions import (
    BookingConflictException,
    ConflictException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    TeacherUnavailableException,
    ValidationException,
)
from tutorly.models.booking import Booking
from tutorly.schemas.booking import BookingCreate, BookingStatusUpdate
from tutorly.services.booking_service import BookingService, calculate_amount


def _request(teacher_id, booking_date, start="10:00", duration=60, subject="Mathematics", notes=None):
    return BookingCreate(
        teacher_id=teacher_id,
        subject=subject,
        booking_date=booking_date,
        start_time=start,
        duration=duration,
        notes=notes,
    )


class TestCreateBooking:
    def test_monday_scenario(self, db, test_student, test_student_2, test_teacher, monday_slot, next_monday):
        service = BookingService(db)

        booking = service.create_booking(
            test_student, _request(test_teacher.id, next_monday, "10:00", 60, notes="Algebra")
        )
        assert booking.status == "pending"
        assert booking.start_time == time(10, 0)
        assert booking.end_time == time(11, 0)
        assert booking.amount == Decimal("40.00")
        assert booking.meeting_link.endswith(f"/class-{booking.id}")
        assert booking.student_notes == "Algebra"

        with pytest.raises(BookingConflictException):
            service.create_booking(test_student_2, _request(test_teacher.id, next_monday, "10:30", 60))

        adjacent = service.create_booking(
            test_student_2, _request(test_teacher.id, next_monday, "11:00", 60)
        )
        assert adjacent.end_time == time(12, 0)

        with pytest.raises(TeacherUnavailableException):
            service.create_booking(test_student, _request(test_teacher.id, next_monday, "11:30", 60))

        assert db.query(Booking).count() == 2

    def test_cancelled_booking_frees_the_interval(
        self, db, test_student, test_student_2, test_teacher, monday_slot, next_monday
    ):
        service = BookingService(db)
        first = service.create_booking(test_student, _request(test_teacher.id, next_monday))
        service.cancel_booking(test_student, first.id)

        second = service.create_booking(test_student_2, _request(test_teacher.id, next_monday))
        assert second.status == "pending"

    def test_rejects_today_and_past(self, db, test_student, test_teacher, monday_slot, next_monday):
        service = BookingService(db, today=lambda: next_monday)
        with pytest.raises(ValidationException) as exc_info:
            service.create_booking(test_student, _request(test_teacher.id, next_monday))
        assert exc_info.value.code == "BOOKING_DATE_NOT_IN_FUTURE"

        with pytest.raises(ValidationException):
            service.create_booking(
                test_student, _request(test_teacher.id, next_monday - timedelta(days=7))
            )

    def test_iso_datetime_keeps_calendar_date(self, db, test_student, test_teacher, monday_slot, next_monday):
        service = BookingService(db)
        payload = BookingCreate.model_validate(
            {
                "teacherId": test_teacher.id,
                "subject": "Mathematics",
                "date": datetime.combine(next_monday, time(23, 59)).isoformat() + "Z",
                "startTime": "09:00",
                "duration": 30,
            }
        )
        booking = service.create_booking(test_student, payload)
        assert booking.booking_date == next_monday

    @pytest.mark.parametrize("duration", [10, 481])
    def test_schema_rejects_duration_out_of_bounds(self, test_teacher, next_monday, duration):
        with pytest.raises(PydanticValidationError) as exc_info:
            _request(test_teacher.id, next_monday, duration=duration)
        assert exc_info.value.errors()[0]["loc"] == ("duration",)

    def test_service_still_guards_duration(self, db, test_student, test_teacher, monday_slot, next_monday):
        payload = BookingCreate.model_construct(
            **{
                "teacherId": test_teacher.id,
                "subject": "Mathematics",
                "date": next_monday,
                "startTime": "10:00",
                "duration": 481,
                "notes": None,
            }
        )
        with pytest.raises(ValidationException) as exc_info:
            BookingService(db).create_booking(test_student, payload)
        assert exc_info.value.code == "INVALID_DURATION"

    def test_rejects_interval_crossing_midnight(self, db, test_student, test_teacher, next_monday):
        service = BookingService(db)
        with pytest.raises(ValidationException) as exc_info:
            service.create_booking(test_student, _request(test_teacher.id, next_monday, "23:30", 60))
        assert exc_info.value.code == "BOOKING_CROSSES_MIDNIGHT"

    def test_rejects_when_slot_is_unavailable(self, db, test_student, test_teacher, monday_slot, next_monday):
        monday_slot.is_available = False
        db.commit()

        with pytest.raises(TeacherUnavailableException):
            BookingService(db).create_booking(test_student, _request(test_teacher.id, next_monday))

    def test_rejects_other_weekday(self, db, test_student, test_teacher, monday_slot, next_monday):
        with pytest.raises(TeacherUnavailableException):
            BookingService(db).create_booking(
                test_student, _request(test_teacher.id, next_monday + timedelta(days=1))
            )

    def test_unknown_teacher(self, db, test_student, test_student_2, next_monday):
        service = BookingService(db)
        with pytest.raises(NotFoundException):
            service.create_booking(test_student, _request("01ARZ3NDEKTSV4RRFFQ69G5FAV", next_monday))
        # A student id is not a teacher
        with pytest.raises(NotFoundException):
            service.create_booking(test_student, _request(test_student_2.id, next_monday))

    def test_failed_check_rolls_back_the_lock_bump(
        self, db, test_student, test_teacher, monday_slot, next_monday
    ):
        sequence_before = test_teacher.teacher_profile.booking_sequence
        with pytest.raises(TeacherUnavailableException):
            BookingService(db).create_booking(
                test_student, _request(test_teacher.id, next_monday, "13:00", 30)
            )
        db.expire_all()
        assert test_teacher.teacher_profile.booking_sequence == sequence_before

    def test_missing_profile_row_is_not_found(
        self, db, test_student, test_teacher, monday_slot, next_monday, monkeypatch
    ):
        service = BookingService(db)
        monkeypatch.setattr(service.teacher_repository, "acquire_booking_lock", lambda teacher_id: False)
        with pytest.raises(NotFoundException) as exc_info:
            service.create_booking(test_student, _request(test_teacher.id, next_monday))
        assert exc_info.value.code == "TEACHER_NOT_FOUND"
        assert db.query(Booking).count() == 0


class TestAmount:
    def test_rounds_to_cents(self):
        assert calculate_amount(Decimal("45.00"), 50) == Decimal("37.50")
        assert calculate_amount(Decimal("33.33"), 20) == Decimal("11.11")
        assert calculate_amount(Decimal("40"), 90) == Decimal("60.00")


class TestListAndGet:
    def test_scope_by_role(
        self, db, test_student, test_student_2, test_teacher, test_admin, make_booking, next_monday
    ):
        mine = make_booking(test_student, test_teacher, next_monday)
        make_booking(test_student_2, test_teacher, next_monday, time(11, 0), time(12, 0))
        service = BookingService(db)

        student_items, student_total = service.list_bookings(test_student)
        assert student_total == 1
        assert [b.id for b in student_items] == [mine.id]

        _, teacher_total = service.list_bookings(test_teacher)
        assert teacher_total == 2

        _, admin_total = service.list_bookings(test_admin)
        assert admin_total == 2

    def test_status_filter_and_pagination(self, db, test_student, test_teacher, make_booking, next_monday):
        for week in range(3):
            make_booking(test_student, test_teacher, next_monday + timedelta(weeks=week))
        make_booking(
            test_student, test_teacher, next_monday + timedelta(weeks=3), status="cancelled"
        )
        service = BookingService(db)

        items, total = service.list_bookings(test_student, status="pending", page=1, limit=2)
        assert total == 3
        assert len(items) == 2
        # Soonest lesson first
        assert [b.booking_date for b in items] == [next_monday, next_monday + timedelta(weeks=1)]

        items, total = service.list_bookings(test_student, status="cancelled")
        assert total == 1

    def test_get_booking_requires_party(
        self, db, test_student, test_student_2, test_teacher, test_admin, make_booking, next_monday
    ):
        booking = make_booking(test_student, test_teacher, next_monday)
        service = BookingService(db)

        assert service.get_booking(test_student, booking.id).id == booking.id
        assert service.get_booking(test_teacher, booking.id).id == booking.id
        assert service.get_booking(test_admin, booking.id).id == booking.id
        with pytest.raises(ForbiddenException):
            service.get_booking(test_student_2, booking.id)
        with pytest.raises(NotFoundException):
            service.get_booking(test_student, "01ARZ3NDEKTSV4RRFFQ69G5FAV")


class TestStatusLifecycle:
    def test_teacher_confirms_then_completes(self, db, test_student, test_teacher, make_booking, next_monday):
        booking = make_booking(test_student, test_teacher, next_monday)
        service = BookingService(db)

        confirmed = service.update_status(
            test_teacher, booking.id, BookingStatusUpdate(status="confirmed", teacher_notes="See you")
        )
        assert confirmed.status == "confirmed"
        assert confirmed.teacher_notes == "See you"

        completed = service.update_status(test_teacher, booking.id, BookingStatusUpdate(status="completed"))
        assert completed.status == "completed"

    def test_invalid_transition(self, db, test_student, test_teacher, make_booking, next_monday):
        booking = make_booking(test_student, test_teacher, next_monday)
        with pytest.raises(InvalidStatusTransitionException):
            BookingService(db).update_status(
                test_teacher, booking.id, BookingStatusUpdate(status="completed")
            )

    def test_only_the_booking_teacher(self, db, test_student, test_teacher, make_teacher, make_booking, next_monday):
        other = make_teacher(email="other.teacher@example.com", name="Other Teacher")
        booking = make_booking(test_student, test_teacher, next_monday)
        with pytest.raises(ForbiddenException):
            BookingService(db).update_status(other, booking.id, BookingStatusUpdate(status="confirmed"))


class TestCancel:
    @pytest.mark.parametrize("status", ["pending", "confirmed", "no-show"])
    def test_either_party_can_cancel(self, db, test_student, test_teacher, make_booking, next_monday, status):
        booking = make_booking(test_student, test_teacher, next_monday, status=status)
        cancelled = BookingService(db).cancel_booking(test_teacher, booking.id)
        assert cancelled.status == "cancelled"

    @pytest.mark.parametrize("status", ["completed", "cancelled"])
    def test_terminal_statuses_conflict(self, db, test_student, test_teacher, make_booking, next_monday, status):
        booking = make_booking(test_student, test_teacher, next_monday, status=status)
        with pytest.raises(ConflictException) as exc_info:
            BookingService(db).cancel_booking(test_student, booking.id)
        assert exc_info.value.code == "BOOKING_NOT_CANCELLABLE"
        db.expire_all()
        assert db.get(Booking, booking.id).status == status

    def test_outsider_cannot_cancel(self, db, test_student, test_student_2, test_teacher, make_booking, next_monday):
        booking = make_booking(test_student, test_teacher, next_monday)
        with pytest.raises(ForbiddenException):
            BookingService(db).cancel_booking(test_student_2, booking.id)
