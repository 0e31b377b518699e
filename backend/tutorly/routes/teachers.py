# backend/tutorly/routes/teachers.py
"""
Public teacher directory routes.

Router Endpoints:
    GET / - Filtered, paginated teacher list
    GET /subjects/popular - Subjects by number of teachers offering them
    GET /{teacher_id} - Public teacher profile
    GET /{teacher_id}/availability?date= - Open windows for one date
    GET /{teacher_id}/schedule - Open windows for the whole week
"""

import asyncio
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.services import get_teacher_service
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.exceptions import DomainException
from ..schemas.availability import AvailabilitySlotResponse
from ..schemas.base_responses import PaginatedResponse
from ..schemas.teacher import (
    PopularSubject,
    TeacherDateAvailability,
    TeacherResponse,
    TeacherSchedule,
)
from ..services.teacher_service import TeacherService

router = APIRouter(prefix="/api/teachers", tags=["teachers"])


@router.get("", response_model=PaginatedResponse[TeacherResponse])
async def list_teachers(
    subject: Optional[str] = Query(None, description="Case-insensitive partial match"),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
    max_price: Optional[float] = Query(None, alias="maxPrice", gt=0),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> PaginatedResponse[TeacherResponse]:
    teachers, total = await asyncio.to_thread(
        teacher_service.list_teachers,
        subject=subject,
        min_rating=min_rating,
        max_price=max_price,
        page=page,
        limit=limit,
    )
    return PaginatedResponse[TeacherResponse].build(
        [TeacherResponse.from_user(teacher) for teacher in teachers], total, page, limit
    )


@router.get("/subjects/popular", response_model=List[PopularSubject])
async def popular_subjects(
    limit: Optional[int] = Query(None, ge=1, le=MAX_PAGE_LIMIT),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> List[PopularSubject]:
    rows = await asyncio.to_thread(teacher_service.popular_subjects, limit)
    return [PopularSubject(subject=name, count=count) for name, count in rows]


@router.get("/{teacher_id}", response_model=TeacherResponse)
async def get_teacher(
    teacher_id: str,
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> TeacherResponse:
    try:
        teacher = await asyncio.to_thread(teacher_service.get_teacher, teacher_id)
    except DomainException as e:
        raise e.to_http_exception()
    return TeacherResponse.from_user(teacher)


@router.get("/{teacher_id}/availability", response_model=TeacherDateAvailability)
async def get_teacher_availability_for_date(
    teacher_id: str,
    target_date: date = Query(..., alias="date"),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> TeacherDateAvailability:
    """Open windows that apply on the weekday of the given date."""
    try:
        day, slots = await asyncio.to_thread(
            teacher_service.get_availability_for_date, teacher_id, target_date
        )
    except DomainException as e:
        raise e.to_http_exception()
    return TeacherDateAvailability(
        teacher_id=teacher_id,
        target_date=target_date,
        day_of_week=day,
        slots=[AvailabilitySlotResponse.model_validate(slot) for slot in slots],
    )


@router.get("/{teacher_id}/schedule", response_model=TeacherSchedule)
async def get_teacher_schedule(
    teacher_id: str,
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> TeacherSchedule:
    try:
        schedule = await asyncio.to_thread(teacher_service.get_weekly_schedule, teacher_id)
    except DomainException as e:
        raise e.to_http_exception()
    return TeacherSchedule(
        teacher_id=teacher_id,
        schedule={
            day: [AvailabilitySlotResponse.model_validate(slot) for slot in slots]
            for day, slots in schedule.items()
        },
    )
