from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from ..core.constants import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH
from ..models.user import User
from ._strict_base import StrictRequestModel
from .base import Money, StandardizedModel


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [value.strip() for value in values if value and value.strip()]


class UserRegister(StrictRequestModel):
    name: str = Field(min_length=MIN_NAME_LENGTH, max_length=100)
    email: EmailStr
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=128)
    role: Literal["student", "teacher"]
    phone: Optional[str] = Field(default=None, max_length=20)

    # Teacher fields
    subjects: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(default=None, gt=0)
    bio: Optional[str] = Field(default=None, max_length=2000)

    # Student fields
    grade: Optional[str] = Field(default=None, max_length=50)
    interests: Optional[List[str]] = None

    _clean_subjects = field_validator("subjects", "interests")(_clean_list)

    @model_validator(mode="after")
    def _role_fields(self) -> "UserRegister":
        if self.role == "teacher":
            if not self.subjects:
                raise ValueError("Teachers must list at least one subject")
            if self.hourly_rate is None:
                raise ValueError("Teachers must set an hourly rate")
        elif not self.grade:
            raise ValueError("Students must provide a grade")
        return self


class UserLogin(StrictRequestModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserProfileUpdate(StrictRequestModel):
    name: Optional[str] = Field(default=None, min_length=MIN_NAME_LENGTH, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    avatar_url: Optional[str] = None

    # Teacher fields
    bio: Optional[str] = Field(default=None, max_length=2000)
    subjects: Optional[List[str]] = None
    hourly_rate: Optional[float] = Field(default=None, gt=0)

    # Student fields
    grade: Optional[str] = Field(default=None, max_length=50)
    interests: Optional[List[str]] = None

    _clean_subjects = field_validator("subjects", "interests")(_clean_list)


class UserResponse(StandardizedModel):
    """Account as seen by its owner."""

    id: str
    name: str
    email: EmailStr
    role: str
    is_active: bool = True
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    # Student
    grade: Optional[str] = None
    interests: List[str] = Field(default_factory=list)

    # Teacher
    subjects: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    hourly_rate: Optional[Money] = None
    rating: Optional[float] = None
    total_reviews: Optional[int] = None
    is_verified: Optional[bool] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        profile = user.teacher_profile
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_active=bool(user.is_active),
            avatar_url=user.avatar_url,
            phone=user.phone,
            created_at=user.created_at,
            grade=user.grade,
            interests=list(user.interests or []),
            subjects=user.subject_names,
            bio=profile.bio if profile else None,
            hourly_rate=profile.hourly_rate if profile else None,
            rating=float(profile.rating) if profile else None,
            total_reviews=int(profile.total_reviews) if profile else None,
            is_verified=bool(profile.is_verified) if profile else None,
        )


class AuthResponse(StandardizedModel):
    token: str
    user: UserResponse
