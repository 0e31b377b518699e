# backend/tests/services/test_teacher_service.py
from datetime import time, timedelta

import pytest

from tutorly.core.exceptions import NotFoundException
from tutorly.models.availability import AvailabilitySlot
from tutorly.services.teacher_service import TeacherService


@pytest.fixture
def directory(db, make_teacher):
    """Three teachers with different subjects, prices and ratings."""
    alice = make_teacher(
        email="alice@example.com", name="Alice", subjects=("Mathematics", "Physics"), hourly_rate="50.00"
    )
    bob = make_teacher(email="bob@example.com", name="Bob", subjects=("English",), hourly_rate="25.00")
    cara = make_teacher(
        email="cara@example.com", name="Cara", subjects=("Applied Mathematics",), hourly_rate="35.00"
    )
    for teacher, rating, reviews in ((alice, 4.5, 10), (bob, 4.9, 3), (cara, 4.5, 12)):
        teacher.teacher_profile.rating = rating
        teacher.teacher_profile.total_reviews = reviews
    db.commit()
    return {"alice": alice, "bob": bob, "cara": cara}


def test_list_sorted_by_rating_then_reviews(db, directory):
    teachers, total = TeacherService(db).list_teachers()
    assert total == 3
    assert [t.name for t in teachers] == ["Bob", "Cara", "Alice"]


def test_subject_filter_is_case_insensitive_partial(db, directory):
    teachers, total = TeacherService(db).list_teachers(subject="math")
    assert total == 2
    assert {t.name for t in teachers} == {"Alice", "Cara"}


@pytest.mark.parametrize("subject", ["_", "%", "%%", "Math_matics"])
def test_subject_filter_treats_wildcards_literally(db, directory, subject):
    teachers, total = TeacherService(db).list_teachers(subject=subject)
    assert total == 0
    assert teachers == []


def test_rating_and_price_filters(db, directory):
    service = TeacherService(db)
    teachers, _ = service.list_teachers(min_rating=4.8)
    assert [t.name for t in teachers] == ["Bob"]

    teachers, _ = service.list_teachers(max_price=35)
    assert {t.name for t in teachers} == {"Bob", "Cara"}


def test_pagination(db, directory):
    teachers, total = TeacherService(db).list_teachers(page=2, limit=2)
    assert total == 3
    assert [t.name for t in teachers] == ["Alice"]


def test_inactive_teachers_hidden(db, directory):
    directory["bob"].is_active = False
    db.commit()
    _, total = TeacherService(db).list_teachers()
    assert total == 2
    with pytest.raises(NotFoundException):
        TeacherService(db).get_teacher(directory["bob"].id)


def test_get_teacher_rejects_students(db, test_student):
    with pytest.raises(NotFoundException):
        TeacherService(db).get_teacher(test_student.id)


def test_popular_subjects(db, directory, make_teacher):
    make_teacher(email="dan@example.com", name="Dan", subjects=("English", "History"))
    popular = TeacherService(db).popular_subjects()
    assert popular[0] == ("English", 2)
    assert ("Physics", 1) in popular


def test_availability_for_date(db, test_teacher, monday_slot, next_monday):
    db.add(
        AvailabilitySlot(
            teacher_id=test_teacher.id,
            day_of_week=1,
            start_time=time(14, 0),
            end_time=time(15, 0),
            is_available=False,
        )
    )
    db.commit()

    day, slots = TeacherService(db).get_availability_for_date(test_teacher.id, next_monday)
    assert day == 1
    assert [s.id for s in slots] == [monday_slot.id]

    day, slots = TeacherService(db).get_availability_for_date(
        test_teacher.id, next_monday + timedelta(days=6)
    )
    assert day == 0
    assert slots == []


def test_weekly_schedule_has_every_day(db, test_teacher, monday_slot):
    schedule = TeacherService(db).get_weekly_schedule(test_teacher.id)
    assert sorted(schedule) == [str(day) for day in range(7)]
    assert [s.id for s in schedule["1"]] == [monday_slot.id]
