# backend/tests/conftest.py
"""
Pytest configuration for the Tutorly backend.

Every test gets its own in-memory SQLite database. The API client shares
that session through a get_db override, so fixtures and requests see the
same rows.
"""

import os

# Set testing configuration BEFORE any tutorly imports
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["NOTIFICATION_RETRY_BACKOFF_SECONDS"] = "0"
os.environ["IS_TESTING"] = "true"

from datetime import date, time, timedelta
from decimal import Decimal
from typing import Callable, Dict, Iterator

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker

from tutorly.api.dependencies.database import get_db
from tutorly.auth import create_access_token, get_password_hash
from tutorly.core.config import settings
from tutorly.core.enums import RoleName
from tutorly.database import Base, build_engine
from tutorly.main import app
from tutorly.models.availability import AvailabilitySlot
from tutorly.models.booking import Booking
from tutorly.models.teacher import TeacherProfile, TeacherSubject
from tutorly.models.user import User

settings.is_testing = True

TEST_PASSWORD = "TestPassword123!"


def next_weekday(weekday: int, after: date | None = None) -> date:
    """Next date strictly after `after` with the given Python weekday (Monday = 0)."""
    start = after or date.today()
    days_ahead = (weekday - start.weekday()) % 7 or 7
    return start + timedelta(days=days_ahead)


@pytest.fixture
def db() -> Iterator[Session]:
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    TestSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create a test client bound to the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture
def make_student(db: Session) -> Callable[..., User]:
    def _make(email: str = "test.student@example.com", name: str = "Test Student") -> User:
        student = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=RoleName.STUDENT.value,
            grade="10",
            interests=["math"],
        )
        db.add(student)
        db.commit()
        return student

    return _make


@pytest.fixture
def make_teacher(db: Session) -> Callable[..., User]:
    def _make(
        email: str = "test.teacher@example.com",
        name: str = "Test Teacher",
        subjects: tuple = ("Mathematics",),
        hourly_rate: str = "40.00",
        is_verified: bool = False,
    ) -> User:
        teacher = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=RoleName.TEACHER.value,
        )
        teacher.teacher_profile = TeacherProfile(
            hourly_rate=Decimal(hourly_rate),
            bio=f"{name} teaches {', '.join(subjects)}",
            is_verified=is_verified,
        )
        teacher.subjects = [TeacherSubject(name=subject) for subject in subjects]
        db.add(teacher)
        db.commit()
        return teacher

    return _make


@pytest.fixture
def test_student(make_student) -> User:
    return make_student()


@pytest.fixture
def test_student_2(make_student) -> User:
    return make_student(email="second.student@example.com", name="Second Student")


@pytest.fixture
def test_teacher(make_teacher) -> User:
    return make_teacher()


@pytest.fixture
def test_admin(db: Session) -> User:
    admin = User(
        name="Test Admin",
        email="test.admin@example.com",
        hashed_password=get_password_hash(TEST_PASSWORD),
        role=RoleName.ADMIN.value,
    )
    db.add(admin)
    db.commit()
    return admin


@pytest.fixture
def monday_slot(db: Session, test_teacher: User) -> AvailabilitySlot:
    """Monday 09:00-12:00 (day_of_week 1)."""
    slot = AvailabilitySlot(
        teacher_id=test_teacher.id,
        day_of_week=1,
        start_time=time(9, 0),
        end_time=time(12, 0),
        is_available=True,
    )
    db.add(slot)
    db.commit()
    return slot


@pytest.fixture
def next_monday() -> date:
    return next_weekday(0)


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing the booking rules."""

    def _make(
        student: User,
        teacher: User,
        booking_date: date,
        start: time = time(10, 0),
        end: time = time(11, 0),
        status: str = "pending",
    ) -> Booking:
        duration = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
        booking = Booking(
            student_id=student.id,
            teacher_id=teacher.id,
            subject="Mathematics",
            booking_date=booking_date,
            start_time=start,
            end_time=end,
            duration=duration,
            status=status,
            amount=Decimal("40.00"),
            meeting_link="https://meet.jit.si/class-test",
        )
        db.add(booking)
        db.commit()
        return booking

    return _make


def _headers(user: User) -> Dict[str, str]:
    token = create_access_token(data={"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_student(test_student: User) -> Dict[str, str]:
    return _headers(test_student)


@pytest.fixture
def auth_headers_student_2(test_student_2: User) -> Dict[str, str]:
    return _headers(test_student_2)


@pytest.fixture
def auth_headers_teacher(test_teacher: User) -> Dict[str, str]:
    return _headers(test_teacher)


@pytest.fixture
def auth_headers_admin(test_admin: User) -> Dict[str, str]:
    return _headers(test_admin)
