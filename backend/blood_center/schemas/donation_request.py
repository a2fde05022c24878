"""Donation Request Schemas — creation, edits, confirmation, status, and responses.

Invariants:
    - New requests never carry a status or donor list: the service sets pending
      and an empty donorInfo regardless of input
    - DonationRequestUpdate keeps unknown keys (extra="allow") so protected
      lifecycle fields can be rejected by name (core/request_lifecycle)
    - ConfirmDonation fields are optional: omitted values come from the caller
"""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from blood_center.core.domain_types import BloodGroup, DonationStatus
from blood_center.schemas.common import CamelInput, CamelOutput


class DonationRequestCreate(CamelInput):
    requester_name: str = Field(min_length=1, max_length=200)
    requester_email: str = Field(min_length=3, max_length=320)
    recipient_name: str = Field(min_length=1, max_length=200)
    recipient_district: str = Field(min_length=1, max_length=100)
    recipient_upazila: str = Field(min_length=1, max_length=100)
    hospital_name: str = Field(min_length=1, max_length=300)
    full_address: str = Field(min_length=1, max_length=2000)
    blood_group: BloodGroup
    donation_date: str = Field(min_length=1, max_length=20)
    donation_time: str = Field(min_length=1, max_length=20)
    request_message: str = Field("", max_length=5000)

    @field_validator("requester_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("requesterEmail must contain @")
        return v.lower()


class DonationRequestUpdate(CamelInput):
    """Admin edit — every field optional; lifecycle fields rejected by the service."""
    model_config = ConfigDict(extra="allow")

    requester_name: str | None = Field(None, min_length=1, max_length=200)
    requester_email: str | None = Field(None, min_length=3, max_length=320)
    recipient_name: str | None = Field(None, min_length=1, max_length=200)
    recipient_district: str | None = Field(None, min_length=1, max_length=100)
    recipient_upazila: str | None = Field(None, min_length=1, max_length=100)
    hospital_name: str | None = Field(None, min_length=1, max_length=300)
    full_address: str | None = Field(None, min_length=1, max_length=2000)
    blood_group: BloodGroup | None = None
    donation_date: str | None = Field(None, min_length=1, max_length=20)
    donation_time: str | None = Field(None, min_length=1, max_length=20)
    request_message: str | None = Field(None, max_length=5000)


class ConfirmDonation(CamelInput):
    donor_name: str | None = Field(None, min_length=1, max_length=200)
    donor_email: str | None = Field(None, min_length=3, max_length=320)


class DonationStatusUpdate(CamelInput):
    status: DonationStatus


class DonorEntry(CamelOutput):
    donor_name: str
    donor_email: str
    confirmed_at: datetime


class DonationRequestResponse(CamelOutput):
    id: UUID
    requester_name: str
    requester_email: str
    recipient_name: str
    recipient_district: str
    recipient_upazila: str
    hospital_name: str
    full_address: str
    blood_group: str
    donation_date: str
    donation_time: str
    request_message: str
    donation_status: str
    donor_info: list[DonorEntry]
    created_at: datetime


class DonationRequestPage(CamelOutput):
    requests: list[DonationRequestResponse]
    total: int
