"""Dashboard Stats — live aggregations over users, requests, and fundings.

Invariants:
    - Read-only; recomputed on every call (no caching)
    - Month windows and percentage math come from core/stats.py
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.domain_types import DonationStatus, Role
from blood_center.core.stats import build_dashboard_stats, money, month_windows
from blood_center.models.donation_request import DonationRequest
from blood_center.models.funding import Funding
from blood_center.models.user import User


class StatsService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def dashboard(self, now: datetime) -> dict:
        this_start, last_start = month_windows(now)
        totals = await self._window(None, None)
        current = await self._window(this_start, None)
        last = await self._window(last_start, this_start)
        return build_dashboard_stats(totals, current, last)

    async def live_counts(self) -> dict:
        return {
            "totalDonors": await self._count(User, User.role == Role.DONOR.value),
            "totalVolunteers": await self._count(
                User, User.role == Role.VOLUNTEER.value,
            ),
            "totalFunding": money(await self._funding_sum()),
            "totalRequests": await self._count(DonationRequest),
            "totalSuccessfulDonations": await self._count(
                DonationRequest,
                DonationRequest.donation_status == DonationStatus.DONE.value,
            ),
        }

    async def _window(
        self, start: datetime | None, end: datetime | None,
    ) -> dict[str, float]:
        """Counts/sums for rows created in [start, end)."""
        return {
            "users": await self._count(User, *_between(User.created_at, start, end)),
            "requests": await self._count(
                DonationRequest, *_between(DonationRequest.created_at, start, end),
            ),
            "funding": money(await self._funding_sum(
                *_between(Funding.created_at, start, end),
            )),
        }

    async def _count(self, model, *clauses) -> int:
        query = select(func.count()).select_from(model)
        for clause in clauses:
            query = query.where(clause)
        return (await self.db.execute(query)).scalar_one()

    async def _funding_sum(self, *clauses):
        query = select(func.coalesce(func.sum(Funding.amount), 0))
        for clause in clauses:
            query = query.where(clause)
        return (await self.db.execute(query)).scalar_one()


def _between(column, start: datetime | None, end: datetime | None) -> list:
    clauses = []
    if start is not None:
        clauses.append(column >= start)
    if end is not None:
        clauses.append(column < end)
    return clauses
