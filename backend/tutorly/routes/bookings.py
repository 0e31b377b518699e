# backend/tutorly/routes/bookings.py
"""
Booking routes for the Tutorly platform.

Router Endpoints:
    POST / - Create a booking (student)
    GET / - List the caller's bookings with status filter and pagination
    GET /{booking_id} - Booking details (parties and admins)
    PUT /{booking_id}/status - Teacher status transition
    PUT /{booking_id}/cancel - Cancel (either party)
    POST /{booking_id}/review - Rate a completed booking (student)
    POST /{booking_id}/video/join - Join the booking's video room
    POST /{booking_id}/video/leave - Leave the booking's video room

Booking-created emails go out as a background task after the response;
their failures never reach the client.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from ..api.dependencies.auth import get_current_active_user, get_current_student, get_current_teacher
from ..api.dependencies.services import (
    get_booking_service,
    get_notification_service,
    get_review_service,
    get_video_service,
)
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import BookingStatus
from ..core.exceptions import DomainException
from ..models.user import User
from ..schemas.base_responses import PaginatedResponse
from ..schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingReviewCreate,
    BookingStatusUpdate,
)
from ..schemas.video import VideoSessionResponse
from ..services.booking_service import BookingService
from ..services.notification_service import BookingNotice, NotificationService
from ..services.review_service import ReviewService
from ..services.video_service import VideoService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_student),
    booking_service: BookingService = Depends(get_booking_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> BookingResponse:
    """
    Create a pending booking for the current student.

    The interval must fit inside one of the teacher's available weekly
    windows and must not overlap another pending or confirmed booking.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.create_booking, current_user, booking_data
        )
    except DomainException as e:
        raise e.to_http_exception()

    background_tasks.add_task(
        notification_service.dispatch_booking_created, BookingNotice.from_booking(booking)
    )
    return BookingResponse.from_booking(booking)


@router.get("", response_model=PaginatedResponse[BookingResponse])
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    """Students see their bookings, teachers see theirs, admins see all."""
    try:
        bookings, total = await asyncio.to_thread(
            booking_service.list_bookings,
            current_user,
            status=status_filter.value if status_filter else None,
            page=page,
            limit=limit,
        )
    except DomainException as e:
        raise e.to_http_exception()

    return PaginatedResponse[BookingResponse].build(
        [BookingResponse.from_booking(booking) for booking in bookings], total, page, limit
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking, current_user, booking_id)
    except DomainException as e:
        raise e.to_http_exception()
    return BookingResponse.from_booking(booking)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    update_data: BookingStatusUpdate,
    current_user: User = Depends(get_current_teacher),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Confirm, complete, decline or mark no-show (booking's teacher only)."""
    try:
        booking = await asyncio.to_thread(
            booking_service.update_status, current_user, booking_id, update_data
        )
    except DomainException as e:
        raise e.to_http_exception()
    return BookingResponse.from_booking(booking)


@router.put("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.cancel_booking, current_user, booking_id)
    except DomainException as e:
        raise e.to_http_exception()
    return BookingResponse.from_booking(booking)


@router.post("/{booking_id}/review", response_model=BookingResponse)
async def review_booking(
    booking_id: str,
    review_data: BookingReviewCreate,
    current_user: User = Depends(get_current_student),
    review_service: ReviewService = Depends(get_review_service),
) -> BookingResponse:
    """Rate a completed booking; each booking can be reviewed once."""
    try:
        booking = await asyncio.to_thread(
            review_service.submit_review, current_user, booking_id, review_data
        )
    except DomainException as e:
        raise e.to_http_exception()
    return BookingResponse.from_booking(booking)


@router.post("/{booking_id}/video/join", response_model=VideoSessionResponse)
async def join_video(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    video_service: VideoService = Depends(get_video_service),
) -> VideoSessionResponse:
    try:
        session = await asyncio.to_thread(video_service.join, current_user, booking_id)
    except DomainException as e:
        raise e.to_http_exception()
    return VideoSessionResponse(**session)


@router.post("/{booking_id}/video/leave", response_model=VideoSessionResponse)
async def leave_video(
    booking_id: str,
    current_user: User = Depends(get_current_active_user),
    video_service: VideoService = Depends(get_video_service),
) -> VideoSessionResponse:
    try:
        session = await asyncio.to_thread(video_service.leave, current_user, booking_id)
    except DomainException as e:
        raise e.to_http_exception()
    return VideoSessionResponse(**session)
