"""User ORM — one row per registered participant; ground truth for role and status.

Invariants:
    - email is UNIQUE at the store level (registration race cannot duplicate it)
    - email stored lower-cased (normalised by the service before insert)
    - role ∈ {donor, volunteer, admin}, status ∈ {active, blocked}

Design Decisions:
    - String columns for role/status (not native enums): migrations stay trivial
      and values compare directly against the str Enums in core/domain_types
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from blood_center.db.base import Base


class User(Base):
    """Registered participant."""
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    photo: Mapped[str] = mapped_column(String(1000), nullable=False)
    blood_group: Mapped[str] = mapped_column(String(3), nullable=False)
    district: Mapped[str] = mapped_column(String(100), nullable=False)
    upazila: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="donor",
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
