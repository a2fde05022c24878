"""Stats Routes — admin dashboard totals with month-over-month change, public live counts."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.api.dependencies import get_current_claims
from blood_center.infrastructure.database import get_db
from blood_center.infrastructure.identity_verifier import Claims
from blood_center.services.dashboard_stats import StatsService

router = APIRouter(tags=["stats"])


@router.get("/admin-dashboard-stats")
async def admin_dashboard_stats(
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await StatsService(db).dashboard(datetime.now(timezone.utc))


@router.get("/live-counts")
async def live_counts(db: AsyncSession = Depends(get_db)):
    return await StatsService(db).live_counts()
