"""Donation Request Routes — public create/read, donor confirmation, staff triage.

Invariants:
    - Reads and creation are public; search is forced to pending
    - confirm-donation requires a verified, registered, active caller
    - status changes need admin/volunteer; generic edits need admin
    - delete needs admin or the requester who posted it (ownership compared on the
      fetched record, not on anything the client sends)
    - /donation-requests/recent registered before /donation-requests/{id}

Design Decisions:
    - Routes stay thin: lifecycle rules live in services + core/request_lifecycle
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.api.dependencies import (
    get_current_user, require_admin, require_staff,
)
from blood_center.core.domain_types import DonationStatus
from blood_center.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from blood_center.infrastructure.database import get_db
from blood_center.models.user import User
from blood_center.schemas.common import CreatedResponse, DeleteResult, UpdateResult
from blood_center.schemas.donation_request import (
    ConfirmDonation,
    DonationRequestCreate,
    DonationRequestPage,
    DonationRequestResponse,
    DonationRequestUpdate,
    DonationStatusUpdate,
)
from blood_center.services.donation_requests import DonationRequestService
from blood_center.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)
router = APIRouter(tags=["donation-requests"])


@router.post(
    "/donation-requests", response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_donation_request(
    body: DonationRequestCreate, db: AsyncSession = Depends(get_db),
):
    requester = await UserDirectory(db).get_by_email(body.requester_email)
    request = await DonationRequestService(db).create(body, requester)
    return CreatedResponse(message="Donation request created", id=str(request.id))


@router.get(
    "/donation-requests/recent", response_model=list[DonationRequestResponse],
)
async def recent_donation_requests(
    email: str = Query(..., min_length=3, max_length=320),
    db: AsyncSession = Depends(get_db),
):
    """A requester's three newest requests."""
    return await DonationRequestService(db).recent(email)


@router.get("/donation-requests", response_model=DonationRequestPage)
async def list_donation_requests(
    email: str | None = Query(None, max_length=320),
    status_filter: DonationStatus | None = Query(None, alias="status"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_db),
):
    requests, total = await DonationRequestService(db).list_requests(
        page, limit, email=email, status=status_filter,
    )
    return DonationRequestPage(
        requests=[DonationRequestResponse.model_validate(r) for r in requests],
        total=total,
    )


@router.get(
    "/search-donation-requests", response_model=list[DonationRequestResponse],
)
async def search_donation_requests(
    blood_group: str | None = Query(None, max_length=3),
    district: str | None = Query(None, max_length=100),
    upazila: str | None = Query(None, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """Pending requests matching blood group and location."""
    return await DonationRequestService(db).search(
        blood_group=blood_group, district=district, upazila=upazila,
    )


@router.get(
    "/donation-requests/{request_id}", response_model=DonationRequestResponse,
)
async def get_donation_request(
    request_id: UUID, db: AsyncSession = Depends(get_db),
):
    return await DonationRequestService(db).get(request_id)


@router.patch(
    "/donation-requests/{request_id}/confirm-donation",
    response_model=UpdateResult,
)
async def confirm_donation(
    request_id: UUID,
    body: ConfirmDonation,
    donor: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """A donor commits to a pending (or already claimed) request."""
    return await DonationRequestService(db).confirm(request_id, donor, body)


@router.patch(
    "/donation-requests/{request_id}/status", response_model=UpdateResult,
)
async def set_donation_status(
    request_id: UUID,
    body: DonationStatusUpdate,
    staff: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Staff close a request as done or canceled."""
    return await DonationRequestService(db).set_status(request_id, body.status)


@router.patch("/donation-requests/{request_id}", response_model=UpdateResult)
async def edit_donation_request(
    request_id: UUID,
    body: DonationRequestUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await DonationRequestService(db).edit(request_id, body)


@router.delete("/donation-requests/{request_id}", response_model=DeleteResult)
async def delete_donation_request(
    request_id: UUID,
    caller: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await DonationRequestService(db).delete(request_id, caller)


@router.get("/admin/donation-requests", response_model=DonationRequestPage)
async def list_donation_requests_for_staff(
    status_filter: DonationStatus | None = Query(None, alias="status"),
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    staff: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    requests, total = await DonationRequestService(db).list_for_staff(
        page, limit, status=status_filter,
    )
    return DonationRequestPage(
        requests=[DonationRequestResponse.model_validate(r) for r in requests],
        total=total,
    )
