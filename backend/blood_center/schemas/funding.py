"""Funding & Payment Schemas — amounts are positive decimals in currency units.

Invariants:
    - amount > 0 with at most two decimal places
    - FundingResponse.amount serialized as a JSON number (not a Decimal string)
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from blood_center.schemas.common import CamelInput, CamelOutput


class PaymentIntentCreate(CamelInput):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class PaymentIntentResponse(BaseModel):
    clientSecret: str


class FundingCreate(CamelInput):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class FundingResponse(CamelOutput):
    id: UUID
    user_id: UUID
    name: str
    email: str
    amount: float
    created_at: datetime


class FundingPage(CamelOutput):
    fundings: list[FundingResponse]
    total: int
