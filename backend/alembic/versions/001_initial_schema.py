"""Initial schema — users, donation_requests, donor_confirmations, blogs, fundings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("photo", sa.String(1000), nullable=False),
        sa.Column("blood_group", sa.String(3), nullable=False),
        sa.Column("district", sa.String(100), nullable=False),
        sa.Column("upazila", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="donor"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "donation_requests",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("requester_name", sa.String(200), nullable=False),
        sa.Column("requester_email", sa.String(320), nullable=False),
        sa.Column("recipient_name", sa.String(200), nullable=False),
        sa.Column("recipient_district", sa.String(100), nullable=False),
        sa.Column("recipient_upazila", sa.String(100), nullable=False),
        sa.Column("hospital_name", sa.String(300), nullable=False),
        sa.Column("full_address", sa.Text, nullable=False),
        sa.Column("blood_group", sa.String(3), nullable=False),
        sa.Column("donation_date", sa.String(20), nullable=False),
        sa.Column("donation_time", sa.String(20), nullable=False),
        sa.Column("request_message", sa.Text, nullable=False, server_default=""),
        sa.Column("donation_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_donation_requests_requester_email", "donation_requests", ["requester_email"],
    )
    op.create_index(
        "ix_donation_requests_donation_status", "donation_requests", ["donation_status"],
    )

    op.create_table(
        "donor_confirmations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "request_id", UUID(as_uuid=True),
            sa.ForeignKey("donation_requests.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("donor_name", sa.String(200), nullable=False),
        sa.Column("donor_email", sa.String(320), nullable=False),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_donor_confirmations_request_id", "donor_confirmations", ["request_id"],
    )

    op.create_table(
        "blogs",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("thumbnail", sa.String(1000), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_blogs_status", "blogs", ["status"])

    op.create_table(
        "fundings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_fundings_user_id", "fundings", ["user_id"])


def downgrade() -> None:
    op.drop_table("fundings")
    op.drop_table("blogs")
    op.drop_table("donor_confirmations")
    op.drop_table("donation_requests")
    op.drop_table("users")
