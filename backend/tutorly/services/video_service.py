# backend/tutorly/services/video_service.py
"""VideoService: placeholder video rooms tied to bookings.

Rooms are named ``class-{booking_id}``. The actual media session is owned
by a VideoSessionProvider; the bundled NullVideoSessionProvider only keeps
membership in memory and logs, which is enough for the meeting-link flow.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List, Protocol, Set

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, ForbiddenException, NotFoundException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

PeerCallback = Callable[[str, str], None]


def room_id_for(booking_id: str) -> str:
    return f"class-{booking_id}"


class VideoSessionProvider(Protocol):
    """External video collaborator."""

    def join(self, room_id: str, user_id: str) -> List[str]:
        """Add the user to the room and return the current participants."""
        ...

    def leave(self, room_id: str, user_id: str) -> List[str]:
        """Remove the user from the room and return who is left."""
        ...

    def on_peer_joined(self, callback: PeerCallback) -> None:
        ...

    def on_peer_left(self, callback: PeerCallback) -> None:
        ...


class NullVideoSessionProvider:
    """In-memory provider for development and tests."""

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[str]] = {}
        self._joined_callbacks: List[PeerCallback] = []
        self._left_callbacks: List[PeerCallback] = []
        self._lock = threading.Lock()

    def join(self, room_id: str, user_id: str) -> List[str]:
        with self._lock:
            members = self._rooms.setdefault(room_id, set())
            is_new = user_id not in members
            members.add(user_id)
            participants = sorted(members)
        if is_new:
            logger.info(f"[video] {user_id} joined {room_id}")
            for callback in self._joined_callbacks:
                callback(room_id, user_id)
        return participants

    def leave(self, room_id: str, user_id: str) -> List[str]:
        with self._lock:
            members = self._rooms.get(room_id, set())
            was_member = user_id in members
            members.discard(user_id)
            if not members:
                self._rooms.pop(room_id, None)
            participants = sorted(members)
        if was_member:
            logger.info(f"[video] {user_id} left {room_id}")
            for callback in self._left_callbacks:
                callback(room_id, user_id)
        return participants

    def participants(self, room_id: str) -> List[str]:
        with self._lock:
            return sorted(self._rooms.get(room_id, set()))

    def on_peer_joined(self, callback: PeerCallback) -> None:
        self._joined_callbacks.append(callback)

    def on_peer_left(self, callback: PeerCallback) -> None:
        self._left_callbacks.append(callback)


class VideoService(BaseService):
    """Service layer for joining and leaving a booking's video room."""

    def __init__(self, db: Session, provider: VideoSessionProvider) -> None:
        super().__init__(db)
        self.provider = provider
        self.booking_repository = RepositoryFactory.create_booking_repository(db)

    def _joinable_booking(self, user: User, booking_id: str):
        booking = self.booking_repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if not booking.is_party(user.id):
            raise ForbiddenException()
        if not booking.is_active:
            raise ConflictException(
                "Video is only available for pending or confirmed bookings",
                code="BOOKING_NOT_ACTIVE",
                details={"current_status": booking.status},
            )
        return booking

    @BaseService.measure_operation("join_video")
    def join(self, user: User, booking_id: str) -> Dict[str, object]:
        booking = self._joinable_booking(user, booking_id)
        room_id = room_id_for(booking.id)
        participants = self.provider.join(room_id, user.id)
        self.log_operation("join_video", booking_id=booking.id, user_id=user.id)
        return {
            "booking_id": booking.id,
            "room_id": room_id,
            "meeting_link": booking.meeting_link,
            "participants": participants,
        }

    @BaseService.measure_operation("leave_video")
    def leave(self, user: User, booking_id: str) -> Dict[str, object]:
        booking = self._joinable_booking(user, booking_id)
        room_id = room_id_for(booking.id)
        participants = self.provider.leave(room_id, user.id)
        self.log_operation("leave_video", booking_id=booking.id, user_id=user.id)
        return {
            "booking_id": booking.id,
            "room_id": room_id,
            "meeting_link": booking.meeting_link,
            "participants": participants,
        }
