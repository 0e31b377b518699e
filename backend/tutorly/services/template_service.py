# backend/tutorly/services/template_service.py
"""
Template rendering service for the Tutorly platform.

Provides centralized Jinja2 rendering for notification emails.
"""

from datetime import date, datetime, time
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import BRAND_NAME
from .base import BaseService

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


class TemplateService(BaseService):
    """
    Centralized template rendering service using Jinja2.

    Rendering never touches the database.
    """

    def __init__(self, db: Optional[Session] = None, template_dir: Optional[Path] = None):
        super().__init__(db)  # type: ignore[arg-type]

        self.env = Environment(
            loader=FileSystemLoader(template_dir or TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,  # Remove trailing newlines from blocks
            lstrip_blocks=True,  # Remove leading whitespace from blocks
        )
        self._register_custom_filters()

    def _register_custom_filters(self) -> None:
        def currency(value: Any) -> str:
            """Format a number as currency."""
            return f"${float(value):,.2f}"

        def format_date(value: Union[date, str], format_str: str = "%A, %B %d, %Y") -> str:
            if isinstance(value, str):
                return value  # Already formatted
            return value.strftime(format_str)

        def format_time(value: Union[time, datetime, str], format_str: str = "%H:%M") -> str:
            if isinstance(value, str):
                return value
            return value.strftime(format_str)

        self.env.filters["currency"] = currency
        self.env.filters["format_date"] = format_date
        self.env.filters["format_time"] = format_time

    def get_common_context(self) -> Dict[str, Any]:
        """Common context variables used across all templates."""
        return {
            "brand_name": BRAND_NAME,
            "current_year": datetime.now().year,
            "frontend_url": settings.frontend_url,
            "support_email": settings.from_email,
        }

    @BaseService.measure_operation("render_template")
    def render_template(
        self, template_name: str, context: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Path to template relative to templates directory
            context: Dictionary of template variables
            **kwargs: Additional template variables

        Raises:
            TemplateNotFound: If template doesn't exist
        """
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            self.logger.error(f"Template not found: {template_name}")
            raise

        full_context = self.get_common_context()
        if context:
            full_context.update(context)
        full_context.update(kwargs)

        rendered = template.render(full_context)
        self.logger.debug(f"Successfully rendered template: {template_name}")
        return rendered
