# backend/tests/services/test_review_service.py
from datetime import timedelta

import pytest

from tutorly.core.exceptions import ConflictException, ForbiddenException, NotFoundException
from tutorly.models.teacher import TeacherProfile
from tutorly.schemas.booking import BookingReviewCreate
from tutorly.services.review_service import ReviewService


def _profile(db, teacher_id):
    db.expire_all()
    return db.query(TeacherProfile).filter(TeacherProfile.teacher_id == teacher_id).one()


def test_review_completed_booking(db, test_student, test_teacher, make_booking, next_monday):
    booking = make_booking(test_student, test_teacher, next_monday, status="completed")

    reviewed = ReviewService(db).submit_review(
        test_student, booking.id, BookingReviewCreate(rating=4, review="Very clear")
    )

    assert reviewed.rating == 4
    assert reviewed.review == "Very clear"
    assert reviewed.reviewed_at is not None
    profile = _profile(db, test_teacher.id)
    assert profile.total_reviews == 1
    assert profile.rating == pytest.approx(4.0)


def test_rating_is_mean_of_all_reviews(db, test_student, test_teacher, make_booking, next_monday):
    service = ReviewService(db)
    ratings = [5, 4, 4, 2]
    for week, rating in enumerate(ratings):
        booking = make_booking(
            test_student, test_teacher, next_monday + timedelta(weeks=week), status="completed"
        )
        service.submit_review(test_student, booking.id, BookingReviewCreate(rating=rating))

    profile = _profile(db, test_teacher.id)
    assert profile.total_reviews == len(ratings)
    assert profile.rating_sum == sum(ratings)
    assert profile.rating == pytest.approx(sum(ratings) / len(ratings))


@pytest.mark.parametrize("status", ["pending", "confirmed", "cancelled", "no-show"])
def test_only_completed_bookings(db, test_student, test_teacher, make_booking, next_monday, status):
    booking = make_booking(test_student, test_teacher, next_monday, status=status)
    with pytest.raises(ConflictException) as exc_info:
        ReviewService(db).submit_review(test_student, booking.id, BookingReviewCreate(rating=5))
    assert exc_info.value.code == "BOOKING_NOT_COMPLETED"


def test_second_review_rejected(db, test_student, test_teacher, make_booking, next_monday):
    booking = make_booking(test_student, test_teacher, next_monday, status="completed")
    service = ReviewService(db)
    service.submit_review(test_student, booking.id, BookingReviewCreate(rating=5))

    with pytest.raises(ConflictException) as exc_info:
        service.submit_review(test_student, booking.id, BookingReviewCreate(rating=1))
    assert exc_info.value.code == "ALREADY_REVIEWED"

    profile = _profile(db, test_teacher.id)
    assert profile.total_reviews == 1
    assert profile.rating == pytest.approx(5.0)


def test_only_the_booking_student(db, test_student, test_student_2, test_teacher, make_booking, next_monday):
    booking = make_booking(test_student, test_teacher, next_monday, status="completed")
    with pytest.raises(ForbiddenException):
        ReviewService(db).submit_review(test_student_2, booking.id, BookingReviewCreate(rating=3))


def test_missing_booking(db, test_student):
    with pytest.raises(NotFoundException):
        ReviewService(db).submit_review(
            test_student, "01ARZ3NDEKTSV4RRFFQ69G5FAV", BookingReviewCreate(rating=3)
        )
