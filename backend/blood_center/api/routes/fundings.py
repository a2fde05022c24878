"""Funding Routes — payment intents and the append-only funding ledger.

Invariants:
    - All endpoints require a verified bearer token
    - Recording a funding requires a registered user (name/email come from it)
    - Intent creation and funding write are separate calls; no reconciliation
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.api.dependencies import (
    get_current_claims, get_current_user, get_payment_gateway,
)
from blood_center.core.errors import ResourceNotFoundError
from blood_center.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from blood_center.infrastructure.database import get_db
from blood_center.infrastructure.identity_verifier import Claims
from blood_center.infrastructure.payment_gateway import StripePaymentGateway
from blood_center.models.user import User
from blood_center.schemas.common import CreatedResponse
from blood_center.schemas.funding import (
    FundingCreate,
    FundingPage,
    FundingResponse,
    PaymentIntentCreate,
    PaymentIntentResponse,
)
from blood_center.services.fundings import FundingService

router = APIRouter(tags=["fundings"])


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentCreate,
    claims: Claims = Depends(get_current_claims),
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
):
    client_secret = await gateway.create_intent(body.amount)
    return PaymentIntentResponse(clientSecret=client_secret)


@router.post(
    "/fundings", response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_funding(
    body: FundingCreate,
    user: User | None = Depends(get_current_user),
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    if user is None:
        raise ResourceNotFoundError("User", claims.email)
    funding = await FundingService(db).record(user, body.amount)
    return CreatedResponse(message="Funding recorded", id=str(funding.id))


@router.get("/fundings", response_model=FundingPage)
async def list_fundings(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    fundings, total = await FundingService(db).list_fundings(page, limit)
    return FundingPage(
        fundings=[FundingResponse.model_validate(f) for f in fundings],
        total=total,
    )
