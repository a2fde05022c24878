"""Funding Service — append-only contribution records.

Invariants:
    - No update/delete methods exist: fundings are immutable once written
    - name/email/user_id copied from the contributor's User row
    - Writing a funding is independent of the payment intent call; there is no
      reconciliation between the two
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.pagination import page_offset
from blood_center.models.funding import Funding
from blood_center.models.user import User

logger = logging.getLogger(__name__)


class FundingService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, contributor: User, amount: Decimal) -> Funding:
        funding = Funding(
            user_id=contributor.id,
            name=contributor.name,
            email=contributor.email,
            amount=amount,
        )
        self.db.add(funding)
        await self.db.commit()
        logger.info(
            f"Funding recorded: {amount}",
            extra={"user_email": contributor.email, "resource_id": str(funding.id)},
        )
        return funding

    async def list_fundings(self, page: int, limit: int) -> tuple[list[Funding], int]:
        total = (await self.db.execute(
            select(func.count()).select_from(Funding),
        )).scalar_one()
        result = await self.db.execute(
            select(Funding)
            .order_by(Funding.created_at.desc(), Funding.id.desc())
            .limit(limit)
            .offset(page_offset(page, limit)),
        )
        return list(result.scalars().all()), total
