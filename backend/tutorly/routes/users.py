# backend/tutorly/routes/users.py
"""
User administration routes.
"""

import asyncio

from fastapi import APIRouter, Depends

from ..api.dependencies.auth import require_admin
from ..api.dependencies.services import get_admin_stats_service
from ..models.user import User
from ..schemas.admin import PlatformOverview
from ..services.admin_stats_service import AdminStatsService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/stats/overview", response_model=PlatformOverview)
async def platform_overview(
    _: User = Depends(require_admin),
    stats_service: AdminStatsService = Depends(get_admin_stats_service),
) -> PlatformOverview:
    """Platform-wide counts for the admin dashboard."""
    return await asyncio.to_thread(stats_service.get_overview)
