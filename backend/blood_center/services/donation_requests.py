"""Donation Request Service — creation, queries, and the guarded lifecycle writes.

Invariants:
    - New requests start pending with an empty donorInfo, whatever the input
    - Every status write is a conditional UPDATE whose WHERE clause lists the
      legal source states (core/request_lifecycle.source_states_for); a zero
      row-count is resolved into NotFound or InvalidTransition
    - A confirmation is one INSERT into donor_confirmations in the same
      transaction as the status write — no read-modify-write of the donor list
    - Search results are always pending, whatever the query says
    - Generic edits never touch donationStatus/donorInfo

Design Decisions:
    - Conditional UPDATE over SELECT ... FOR UPDATE: works identically on
      PostgreSQL and SQLite and holds no row lock across awaits
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.access_policy import (
    authorize_donor_confirmation, authorize_request_deletion,
)
from blood_center.core.domain_types import DonationStatus
from blood_center.core.errors import (
    ForbiddenError, InvalidInputError, InvalidTransitionError, ResourceNotFoundError,
)
from blood_center.core.pagination import page_offset
from blood_center.core.request_lifecycle import (
    PROTECTED_FIELDS,
    build_donor_entry,
    check_staff_target,
    check_transition,
    confirmable_states,
    find_protected_fields,
    source_states_for,
)
from blood_center.core.user_rules import check_active, normalize_email
from blood_center.models.donation_request import DonationRequest, DonorConfirmation
from blood_center.models.user import User
from blood_center.schemas.donation_request import (
    ConfirmDonation, DonationRequestCreate, DonationRequestUpdate,
)

logger = logging.getLogger(__name__)

RECENT_LIMIT = 3


def normalize_blood_group(value: str) -> str:
    """Undo '+' → ' ' from unencoded query strings ("B+" arrives as "B ")."""
    return value.replace(" ", "+").strip().upper()


class DonationRequestService:
    """Persistence and lifecycle rules for donation requests."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Create / read ────────────────────────────────────────────

    async def create(
        self, body: DonationRequestCreate, requester: User | None,
    ) -> DonationRequest:
        """Public create. A blocked registered requester is refused."""
        if requester is not None:
            denial = check_active(requester)
            if denial:
                raise ForbiddenError(denial["message"], denial["code"])

        data = body.model_dump(mode="json")
        request = DonationRequest(
            **data, donation_status=DonationStatus.PENDING.value, donor_info=[],
        )
        self.db.add(request)
        await self.db.commit()
        logger.info(
            "Donation request created",
            extra={"user_email": request.requester_email, "resource_id": str(request.id)},
        )
        return request

    async def get(self, request_id: UUID) -> DonationRequest:
        request = await self.db.get(DonationRequest, request_id)
        if not request:
            raise ResourceNotFoundError("DonationRequest", str(request_id))
        return request

    async def recent(self, email: str, limit: int = RECENT_LIMIT) -> list[DonationRequest]:
        result = await self.db.execute(
            select(DonationRequest)
            .where(DonationRequest.requester_email == normalize_email(email))
            .order_by(DonationRequest.created_at.desc(), DonationRequest.id.desc())
            .limit(limit),
        )
        return list(result.scalars().all())

    async def list_requests(
        self,
        page: int,
        limit: int,
        email: str | None = None,
        status: DonationStatus | None = None,
    ) -> tuple[list[DonationRequest], int]:
        filters = []
        if email:
            filters.append(DonationRequest.requester_email == normalize_email(email))
        if status:
            filters.append(DonationRequest.donation_status == status.value)
        return await self._page(filters, page, limit)

    async def search(
        self,
        blood_group: str | None = None,
        district: str | None = None,
        upazila: str | None = None,
    ) -> list[DonationRequest]:
        """Pending requests only, optionally narrowed by group and location."""
        query = select(DonationRequest).where(
            DonationRequest.donation_status == DonationStatus.PENDING.value,
        )
        if blood_group:
            query = query.where(
                DonationRequest.blood_group == normalize_blood_group(blood_group),
            )
        if district:
            query = query.where(DonationRequest.recipient_district == district.strip())
        if upazila:
            query = query.where(DonationRequest.recipient_upazila == upazila.strip())
        result = await self.db.execute(
            query.order_by(DonationRequest.created_at.desc(), DonationRequest.id.desc()),
        )
        return list(result.scalars().all())

    # ─── Lifecycle writes ─────────────────────────────────────────

    async def confirm(
        self, request_id: UUID, donor: User | None, body: ConfirmDonation,
    ) -> dict:
        """pending|inprogress → inprogress and append one donor entry."""
        denial = authorize_donor_confirmation(donor, body.donor_email)
        if denial:
            raise ForbiddenError(denial["message"], denial["code"])

        result = await self.db.execute(
            update(DonationRequest)
            .where(DonationRequest.id == request_id)
            .where(DonationRequest.donation_status.in_(
                [s.value for s in confirmable_states()],
            ))
            .values(donation_status=DonationStatus.IN_PROGRESS.value),
        )
        if result.rowcount == 0:
            await self._raise_unmatched(request_id, DonationStatus.IN_PROGRESS)

        entry = build_donor_entry(
            body.donor_name or donor.name,
            body.donor_email or donor.email,
            datetime.now(timezone.utc),
        )
        self.db.add(DonorConfirmation(request_id=request_id, **entry))
        await self.db.commit()
        logger.info(
            "Donation confirmed",
            extra={"user_email": entry["donor_email"], "resource_id": str(request_id)},
        )
        return {"matched_count": 1, "modified_count": 1}

    async def set_status(self, request_id: UUID, target: DonationStatus) -> dict:
        """Staff move to a terminal status; the source state must allow it."""
        error = check_staff_target(target.value)
        if error:
            raise InvalidInputError(error["message"], fields=["status"])

        result = await self.db.execute(
            update(DonationRequest)
            .where(DonationRequest.id == request_id)
            .where(DonationRequest.donation_status.in_(
                [s.value for s in source_states_for(target)],
            ))
            .values(donation_status=target.value),
        )
        if result.rowcount == 0:
            await self._raise_unmatched(request_id, target)
        await self.db.commit()
        logger.info(
            f"Donation request set to {target.value}",
            extra={"resource_id": str(request_id)},
        )
        return {"matched_count": 1, "modified_count": 1}

    async def edit(self, request_id: UUID, body: DonationRequestUpdate) -> dict:
        """Admin edit of descriptive fields only."""
        extras = body.model_extra or {}
        protected = find_protected_fields(extras)
        if protected:
            raise InvalidInputError(
                f"Fields cannot be edited directly: {', '.join(protected)}",
                fields=protected,
            )
        unknown = sorted(k for k in extras if k not in PROTECTED_FIELDS)
        if unknown:
            raise InvalidInputError(
                f"Unknown fields: {', '.join(unknown)}", fields=unknown,
            )

        request = await self.get(request_id)
        changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "requester_email" in changes:
            changes["requester_email"] = normalize_email(changes["requester_email"])
        modified = any(getattr(request, k) != v for k, v in changes.items())
        for key, value in changes.items():
            setattr(request, key, value)
        await self.db.commit()
        return {"matched_count": 1, "modified_count": int(modified)}

    async def delete(self, request_id: UUID, caller: User | None) -> dict:
        request = await self.get(request_id)
        denial = authorize_request_deletion(caller, request.requester_email)
        if denial:
            raise ForbiddenError(denial["message"], denial["code"])
        await self.db.delete(request)
        await self.db.commit()
        logger.info(
            "Donation request deleted",
            extra={"user_email": caller.email, "resource_id": str(request_id)},
        )
        return {"deleted_count": 1}

    # ─── Staff view ───────────────────────────────────────────────

    async def list_for_staff(
        self, page: int, limit: int, status: DonationStatus | None = None,
    ) -> tuple[list[DonationRequest], int]:
        filters = []
        if status:
            filters.append(DonationRequest.donation_status == status.value)
        return await self._page(filters, page, limit)

    # ─── Helpers ──────────────────────────────────────────────────

    async def _page(
        self, filters: list, page: int, limit: int,
    ) -> tuple[list[DonationRequest], int]:
        query = select(DonationRequest)
        count_query = select(func.count()).select_from(DonationRequest)
        for clause in filters:
            query = query.where(clause)
            count_query = count_query.where(clause)

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(
            query
            .order_by(DonationRequest.created_at.desc(), DonationRequest.id.desc())
            .limit(limit)
            .offset(page_offset(page, limit)),
        )
        return list(result.scalars().all()), total

    async def _raise_unmatched(self, request_id: UUID, target: DonationStatus) -> None:
        """Explain why a conditional status UPDATE matched no row."""
        await self.db.rollback()
        current = (await self.db.execute(
            select(DonationRequest.donation_status)
            .where(DonationRequest.id == request_id),
        )).scalar_one_or_none()
        if current is None:
            raise ResourceNotFoundError("DonationRequest", str(request_id))
        error = check_transition(current, target.value)
        raise InvalidTransitionError(
            error["message"] if error else f"Request is {current}; retry.",
        )
