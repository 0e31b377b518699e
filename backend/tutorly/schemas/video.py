"""Video session schemas."""

from typing import List

from .base import StandardizedModel


class VideoSessionResponse(StandardizedModel):
    booking_id: str
    room_id: str
    meeting_link: str
    participants: List[str]
