# backend/tutorly/services/notification_service.py
"""
Notification Service for the Tutorly platform.

Sends the booking-created emails (confirmation to the student, heads-up to
the teacher) using Jinja2 templates. Dispatch runs as a background task
after the booking response is sent: every failure is logged and swallowed
so a booking is never affected by email trouble.
"""

import asyncio
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from functools import wraps
import logging
from typing import Awaitable, Callable, Optional, ParamSpec, TypeVar

from ..core.config import settings
from ..models.booking import Booking
from ..monitoring.prometheus_metrics import prometheus_metrics
from .base import BaseService
from .email import EmailService
from .template_service import TemplateService

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
    """
    Retry a failed send with exponential backoff.

    Attempts and initial backoff come from settings at call time.
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        max_attempts = settings.notification_max_attempts
        backoff_seconds = settings.notification_retry_backoff_seconds
        for attempt in range(max_attempts):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if attempt >= max_attempts - 1:
                    logger.error(f"All {max_attempts} attempts failed for {func.__name__}: {str(e)}")
                    raise
                wait_time = backoff_seconds * (2**attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{max_attempts} failed for {func.__name__}: {str(e)}. "
                    f"Retrying in {wait_time}s..."
                )
                await asyncio.sleep(wait_time)
        raise RuntimeError("Retry loop exited without a result")

    return wrapper


@dataclass(frozen=True)
class BookingNotice:
    """Detached snapshot of a booking, safe to hand to a background task."""

    booking_id: str
    subject: str
    booking_date: date
    start_time: time
    end_time: time
    duration: int
    amount: Decimal
    meeting_link: Optional[str]
    notes: Optional[str]
    student_name: str
    student_email: str
    teacher_name: str
    teacher_email: str

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingNotice":
        return cls(
            booking_id=booking.id,
            subject=booking.subject,
            booking_date=booking.booking_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            duration=booking.duration,
            amount=booking.amount,
            meeting_link=booking.meeting_link,
            notes=booking.notes,
            student_name=booking.student.name,
            student_email=booking.student.email,
            teacher_name=booking.teacher.name,
            teacher_email=booking.teacher.email,
        )


class NotificationService(BaseService):
    """Central notification service for booking emails."""

    STUDENT_CONFIRMATION_TEMPLATE = "email/booking/confirmation_student.html"
    TEACHER_NOTIFICATION_TEMPLATE = "email/booking/new_booking_teacher.html"

    def __init__(
        self,
        template_service: Optional[TemplateService] = None,
        email_service: Optional[EmailService] = None,
    ) -> None:
        super().__init__(None)  # type: ignore[arg-type]
        self.template_service = template_service or TemplateService()
        self.email_service = email_service or EmailService()

    @BaseService.measure_operation("dispatch_booking_created")
    async def dispatch_booking_created(self, notice: BookingNotice) -> bool:
        """
        Send both booking-created emails.

        Never raises: failures are logged and reported through the return
        value only.

        Returns:
            True if both emails were sent
        """
        self.logger.info(f"Sending booking emails for booking {notice.booking_id}")
        student_ok = await self._deliver(
            self._send_student_confirmation, notice, self.STUDENT_CONFIRMATION_TEMPLATE
        )
        teacher_ok = await self._deliver(
            self._send_teacher_notification, notice, self.TEACHER_NOTIFICATION_TEMPLATE
        )
        if not (student_ok and teacher_ok):
            self.logger.warning(f"Some booking emails failed for booking {notice.booking_id}")
        return student_ok and teacher_ok

    async def _deliver(
        self,
        sender: Callable[[BookingNotice], Awaitable[bool]],
        notice: BookingNotice,
        template: str,
    ) -> bool:
        try:
            await sender(notice)
        except Exception as e:
            self.logger.error(
                f"Notification {template} failed for booking {notice.booking_id}: {str(e)}",
                exc_info=True,
            )
            prometheus_metrics.record_notification(template, "error")
            return False
        prometheus_metrics.record_notification(template, "success")
        return True

    @retry
    async def _send_student_confirmation(self, notice: BookingNotice) -> bool:
        subject = f"Class Booking Confirmation: {notice.subject} with {notice.teacher_name}"
        html_content = self.template_service.render_template(
            self.STUDENT_CONFIRMATION_TEMPLATE,
            {"notice": notice, "subject": subject},
        )
        await asyncio.to_thread(
            self.email_service.send_email,
            to_email=notice.student_email,
            subject=subject,
            html_content=html_content,
        )
        self.logger.info(f"Student confirmation email sent for booking {notice.booking_id}")
        return True

    @retry
    async def _send_teacher_notification(self, notice: BookingNotice) -> bool:
        subject = f"New Class Booking: {notice.subject} with {notice.student_name}"
        html_content = self.template_service.render_template(
            self.TEACHER_NOTIFICATION_TEMPLATE,
            {"notice": notice, "subject": subject},
        )
        await asyncio.to_thread(
            self.email_service.send_email,
            to_email=notice.teacher_email,
            subject=subject,
            html_content=html_content,
        )
        self.logger.info(f"Teacher notification email sent for booking {notice.booking_id}")
        return True
