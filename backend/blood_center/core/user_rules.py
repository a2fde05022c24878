"""User Directory Rules — registration defaults, role/status mutation guards.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Self-registration ALWAYS yields role=donor, status=active
    - Emails are compared and stored lower-cased and stripped
    - An admin never changes their own role or status (lockout protection)

Design Decisions:
    - Requested elevated role on registration is ignored, not rejected: the
      web client sends role/status on sign-up; the returned "ignored" list
      lets the shell log it
"""

from blood_center.core.domain_types import Role, UserStatus
from blood_center.core.repository_protocols import UserLike
from blood_center.core.access_policy import same_email


REQUIRED_REGISTRATION_FIELDS: tuple[str, ...] = (
    "name", "email", "photo", "blood_group", "district", "upazila",
)

PROFILE_EDITABLE_FIELDS: frozenset[str] = frozenset({
    "name", "photo", "blood_group", "district", "upazila",
})


def normalize_email(email: str) -> str:
    return email.strip().lower()


def missing_registration_fields(payload: dict) -> list[str]:
    """Required fields that are absent or blank."""
    missing = []
    for name in REQUIRED_REGISTRATION_FIELDS:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    return missing


def registration_defaults(
    requested_role: str | None, requested_status: str | None,
) -> tuple[Role, UserStatus, list[str]]:
    """Role and status for a self-registered user, plus ignored request keys."""
    ignored = []
    if requested_role and requested_role != Role.DONOR.value:
        ignored.append("role")
    if requested_status and requested_status != UserStatus.ACTIVE.value:
        ignored.append("status")
    return Role.DONOR, UserStatus.ACTIVE, ignored


def check_self_modification(actor: UserLike, target: UserLike) -> dict | None:
    """Admins may not demote or block themselves."""
    if same_email(actor.email, target.email):
        return {
            "code": "SELF_MODIFICATION",
            "message": "Admins cannot change their own role or status.",
        }
    return None


def check_active(user: UserLike) -> dict | None:
    if user.status == UserStatus.BLOCKED.value:
        return {
            "code": "USER_BLOCKED",
            "message": "This account is blocked.",
        }
    return None


def find_non_editable_profile_fields(keys) -> list[str]:
    return sorted(k for k in keys if k not in PROFILE_EDITABLE_FIELDS)
