# backend/tutorly/routes/health.py
"""
Health check endpoint for the application.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..api.dependencies.database import get_db
from ..core.config import settings
from ..core.constants import API_VERSION, BRAND_NAME
from ..schemas.base_responses import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Service status with a database round-trip."""
    try:
        db.execute(text("SELECT 1"))
        status = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        status = "degraded"

    return HealthResponse(
        status=status,
        service=f"{BRAND_NAME.lower()}-api",
        version=API_VERSION,
        environment=settings.environment,
    )
