"""Domain Types — enums and constants shared by every layer.

Invariants:
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON and compare equal to stored column values
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """User roles — maps to users.role."""
    DONOR = "donor"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


class UserStatus(str, Enum):
    """User account status — maps to users.status."""
    ACTIVE = "active"
    BLOCKED = "blocked"


class DonationStatus(str, Enum):
    """Donation request lifecycle — maps to donation_requests.donation_status."""
    PENDING = "pending"
    IN_PROGRESS = "inprogress"
    DONE = "done"
    CANCELED = "canceled"


class BlogStatus(str, Enum):
    """Blog publication state."""
    DRAFT = "draft"
    PUBLISHED = "published"


class BloodGroup(str, Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class Policy(str, Enum):
    """Access policies attached to endpoints."""
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    STAFF = "staff"   # admin or volunteer
    ADMIN = "admin"


STAFF_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.VOLUNTEER})
TERMINAL_STATUSES: frozenset[DonationStatus] = frozenset(
    {DonationStatus.DONE, DonationStatus.CANCELED},
)
