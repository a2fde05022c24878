"""DonationRequest ORM — one row per blood request, plus its donor confirmations.

Invariants:
    - donation_status starts at "pending"; transitions governed by
      core/request_lifecycle.py LEGAL_TRANSITIONS
    - donor_info is append-only: each confirmation is one INSERT into
      donor_confirmations, never a rewrite of a list
    - donor_info order = DonorConfirmation.id order (autoincrement)
    - deleting a request cascades to its confirmations

Design Decisions:
    - Child table over a JSON array column: an INSERT is atomic, so two donors
      confirming at the same time cannot lose each other's entry
    - lazy="selectin" on donor_info: every read of a request returns the
      sequence without N+1 queries
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from blood_center.db.base import Base


class DonationRequest(Base):
    """A recipient's request for blood."""
    __tablename__ = "donation_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    requester_name: Mapped[str] = mapped_column(String(200), nullable=False)
    requester_email: Mapped[str] = mapped_column(
        String(320), nullable=False, index=True,
    )
    recipient_name: Mapped[str] = mapped_column(String(200), nullable=False)
    recipient_district: Mapped[str] = mapped_column(String(100), nullable=False)
    recipient_upazila: Mapped[str] = mapped_column(String(100), nullable=False)
    hospital_name: Mapped[str] = mapped_column(String(300), nullable=False)
    full_address: Mapped[str] = mapped_column(Text, nullable=False)
    blood_group: Mapped[str] = mapped_column(String(3), nullable=False)
    donation_date: Mapped[str] = mapped_column(String(20), nullable=False)
    donation_time: Mapped[str] = mapped_column(String(20), nullable=False)
    request_message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    donation_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending", index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    donor_info: Mapped[list["DonorConfirmation"]] = relationship(
        "DonorConfirmation", back_populates="request",
        cascade="all, delete-orphan",
        order_by="DonorConfirmation.id", lazy="selectin",
    )


class DonorConfirmation(Base):
    """One donor committing to fulfil a request (one donorInfo entry)."""
    __tablename__ = "donor_confirmations"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    request_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("donation_requests.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    donor_name: Mapped[str] = mapped_column(String(200), nullable=False)
    donor_email: Mapped[str] = mapped_column(String(320), nullable=False)
    confirmed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    request: Mapped["DonationRequest"] = relationship(
        "DonationRequest", back_populates="donor_info",
    )
