# backend/tutorly/services/email.py
"""
Email Service for the Tutorly platform.

Two providers, chosen by settings.email_provider:
- console: log the message and report success (development and tests)
- resend: deliver through the Resend API
"""

import logging
import re
from typing import Any, Dict, Optional

import resend
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from .base import BaseService

logger = logging.getLogger(__name__)


class EmailService(BaseService):
    """Service for sending transactional email."""

    def __init__(self, db: Optional[Session] = None, provider: Optional[str] = None):
        super().__init__(db)  # type: ignore[arg-type]
        self.provider = (provider or settings.email_provider).lower()
        self.from_email = settings.from_email

        if self.provider == "resend":
            api_key = settings.resend_api_key
            if not api_key:
                raise ServiceException("Resend API key not configured")
            resend.api_key = api_key

        self.logger.debug(f"EmailService initialized with provider={self.provider}")

    @staticmethod
    def _html_to_text(html_content: str) -> str:
        """Convert HTML content to plain text for better deliverability"""
        text = re.sub(r"<[^>]+>", "", html_content)
        return re.sub(r"\s+", " ", text).strip()

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send one email.

        Returns:
            Provider response (console returns a synthetic id)

        Raises:
            ServiceException: If the provider rejects the message
        """
        if not text_content:
            text_content = self._html_to_text(html_content)

        if self.provider == "console":
            self.logger.info(f"[console email] to={to_email} subject={subject!r}")
            self.logger.debug(text_content)
            return {"id": "console", "to": to_email}

        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content,
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self.logger.error(f"Failed to send email to {to_email}: {str(e)}")
            raise ServiceException(f"Email sending failed: {str(e)}")

        self.log_operation("email_sent", to_email=to_email, subject=subject)
        return dict(response) if response else {}
