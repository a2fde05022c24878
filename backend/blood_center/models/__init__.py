"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - users.email is the identity key for authorization lookups

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from blood_center.models.user import User  # noqa: F401
from blood_center.models.donation_request import (  # noqa: F401
    DonationRequest, DonorConfirmation,
)
from blood_center.models.blog import Blog  # noqa: F401
from blood_center.models.funding import Funding  # noqa: F401
