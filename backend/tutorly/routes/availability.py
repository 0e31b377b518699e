# backend/tutorly/routes/availability.py
"""
Availability routes for the Tutorly platform.

Teachers manage recurring weekly windows (day_of_week 0 = Sunday). The
per-teacher read is public so students can see when to book.

Router Endpoints:
    POST / - Create a window
    GET / - Caller's windows grouped by weekday
    PUT /{slot_id} - Update a window
    DELETE /{slot_id} - Delete a window
    POST /bulk - Replace all of the caller's windows
    GET /teacher/{teacher_id}?dayOfWeek= - Public read
"""

import asyncio
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..api.dependencies.auth import get_current_teacher
from ..api.dependencies.services import get_availability_service
from ..core.exceptions import DomainException
from ..models.availability import AvailabilitySlot
from ..models.user import User
from ..schemas.availability import (
    AvailabilityBulkReplace,
    AvailabilitySlotCreate,
    AvailabilitySlotResponse,
    AvailabilitySlotUpdate,
)
from ..schemas.base_responses import MessageResponse
from ..services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/availability", tags=["availability"])


def _grouped_response(
    grouped: Dict[str, List[AvailabilitySlot]],
) -> Dict[str, List[AvailabilitySlotResponse]]:
    return {
        day: [AvailabilitySlotResponse.model_validate(slot) for slot in slots]
        for day, slots in grouped.items()
    }


@router.post("", response_model=AvailabilitySlotResponse, status_code=status.HTTP_201_CREATED)
async def create_slot(
    payload: AvailabilitySlotCreate,
    current_user: User = Depends(get_current_teacher),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotResponse:
    try:
        slot = await asyncio.to_thread(availability_service.create_slot, current_user.id, payload)
    except DomainException as e:
        raise e.to_http_exception()
    return AvailabilitySlotResponse.model_validate(slot)


@router.get("", response_model=Dict[str, List[AvailabilitySlotResponse]])
async def get_my_slots(
    current_user: User = Depends(get_current_teacher),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> Dict[str, List[AvailabilitySlotResponse]]:
    """The caller's windows keyed "0".."6"; every weekday key is present."""
    grouped = await asyncio.to_thread(availability_service.get_slots_grouped, current_user.id)
    return _grouped_response(grouped)


@router.put("/{slot_id}", response_model=AvailabilitySlotResponse)
async def update_slot(
    slot_id: str,
    payload: AvailabilitySlotUpdate,
    current_user: User = Depends(get_current_teacher),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotResponse:
    try:
        slot = await asyncio.to_thread(
            availability_service.update_slot, current_user.id, slot_id, payload
        )
    except DomainException as e:
        raise e.to_http_exception()
    return AvailabilitySlotResponse.model_validate(slot)


@router.delete("/{slot_id}", response_model=MessageResponse)
async def delete_slot(
    slot_id: str,
    current_user: User = Depends(get_current_teacher),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> MessageResponse:
    try:
        await asyncio.to_thread(availability_service.delete_slot, current_user.id, slot_id)
    except DomainException as e:
        raise e.to_http_exception()
    return MessageResponse(message="Availability slot deleted")


@router.post("/bulk", response_model=Dict[str, List[AvailabilitySlotResponse]])
async def replace_slots(
    payload: AvailabilityBulkReplace,
    current_user: User = Depends(get_current_teacher),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> Dict[str, List[AvailabilitySlotResponse]]:
    """Replace every window of the caller atomically."""
    try:
        grouped = await asyncio.to_thread(
            availability_service.replace_slots, current_user.id, payload.slots
        )
    except DomainException as e:
        raise e.to_http_exception()
    return _grouped_response(grouped)


@router.get("/teacher/{teacher_id}", response_model=List[AvailabilitySlotResponse])
async def get_teacher_slots(
    teacher_id: str,
    day_of_week: Optional[int] = Query(None, alias="dayOfWeek", ge=0, le=6),
    availability_service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilitySlotResponse]:
    slots = await asyncio.to_thread(
        availability_service.get_teacher_slots, teacher_id, day_of_week
    )
    return [AvailabilitySlotResponse.model_validate(slot) for slot in slots]
