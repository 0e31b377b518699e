# backend/tests/services/test_auth_service.py
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tutorly.auth import decode_access_token
from tutorly.core.exceptions import UnauthorizedException, ValidationException
from tutorly.schemas.user import UserProfileUpdate, UserRegister
from tutorly.services.auth_service import AuthService


def _teacher_payload(**overrides):
    data = {
        "name": "New Teacher",
        "email": "New.Teacher@Example.com",
        "password": "secret123",
        "role": "teacher",
        "subjects": ["Chemistry", " chemistry ", "Biology"],
        "hourlyRate": 30,
        "bio": "Lab nerd",
    }
    data.update(overrides)
    return UserRegister.model_validate(data)


def test_register_teacher_creates_profile_and_subjects(db):
    user = AuthService(db).register_user(_teacher_payload())

    assert user.email == "new.teacher@example.com"
    assert user.role == "teacher"
    assert user.teacher_profile.hourly_rate == Decimal("30.00")
    assert sorted(user.subject_names) == ["Biology", "Chemistry"]
    assert user.hashed_password != "secret123"


def test_register_student(db):
    user = AuthService(db).register_user(
        UserRegister(
            name="New Student",
            email="new.student@example.com",
            password="secret123",
            role="student",
            grade="8",
            interests=["chess"],
        )
    )
    assert user.role == "student"
    assert user.grade == "8"
    assert user.interests == ["chess"]
    assert user.teacher_profile is None


def test_duplicate_email_rejected(db, test_student):
    with pytest.raises(ValidationException) as exc_info:
        AuthService(db).register_user(
            UserRegister(
                name="Again",
                email="TEST.student@example.com",
                password="secret123",
                role="student",
                grade="9",
            )
        )
    assert exc_info.value.code == "EMAIL_TAKEN"


@pytest.mark.parametrize(
    "overrides",
    [{"subjects": []}, {"hourlyRate": None}, {"hourlyRate": 0}, {"role": "admin"}],
)
def test_register_teacher_field_rules(overrides):
    with pytest.raises(ValidationError):
        _teacher_payload(**overrides)


def test_student_requires_grade():
    with pytest.raises(ValidationError):
        UserRegister(name="No Grade", email="nograde@example.com", password="secret123", role="student")


def test_login_issues_token_with_user_id(db, test_student, test_password):
    token, user = AuthService(db).login("Test.Student@example.com", test_password)
    assert user.id == test_student.id
    assert decode_access_token(token)["sub"] == test_student.id


@pytest.mark.parametrize(
    "email,password",
    [("test.student@example.com", "wrong-password"), ("nobody@example.com", "whatever")],
)
def test_login_failures_are_opaque(db, test_student, email, password):
    with pytest.raises(UnauthorizedException) as exc_info:
        AuthService(db).login(email, password)
    assert exc_info.value.message == "Invalid credentials"


def test_inactive_account_cannot_authenticate(db, test_student, test_password):
    test_student.is_active = False
    db.commit()
    service = AuthService(db)
    with pytest.raises(UnauthorizedException):
        service.login(test_student.email, test_password)
    with pytest.raises(UnauthorizedException):
        service.get_user(test_student.id)


def test_update_profile_applies_role_fields_only(db, test_student, test_teacher):
    service = AuthService(db)

    student = service.update_profile(
        test_student, UserProfileUpdate(name="Renamed", grade="11", hourly_rate=99)
    )
    assert student.name == "Renamed"
    assert student.grade == "11"
    assert student.teacher_profile is None

    teacher = service.update_profile(
        test_teacher, UserProfileUpdate(subjects=["Statistics"], hourly_rate=55, grade="ignored")
    )
    assert teacher.subject_names == ["Statistics"]
    assert teacher.teacher_profile.hourly_rate == Decimal("55.00")
    assert teacher.grade is None


def test_create_admin(db):
    admin = AuthService(db).create_admin("Boss@Example.com", "Boss", "secret123")
    assert admin.role == "admin"
    assert admin.email == "boss@example.com"
