"""Access Guard — pure authorization decisions from a stored user record.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return None to allow, a deny dict {code, message} to refuse
    - Identity verification happens BEFORE these run (api/dependencies.py);
      a missing user record is denied here, never treated as a guest
    - A blocked user is denied every STAFF/ADMIN policy whatever their role

Design Decisions:
    - Return dicts (not exceptions): the shell decides how to surface a denial,
      and tests assert on codes without pytest.raises
    - Ownership checks separate from role checks: deletion is "admin OR owner",
      which is not expressible as a single role set
"""

from blood_center.core.domain_types import Policy, Role, UserStatus, STAFF_ROLES
from blood_center.core.repository_protocols import UserLike


POLICY_ROLES: dict[Policy, frozenset[Role]] = {
    Policy.STAFF: STAFF_ROLES,
    Policy.ADMIN: frozenset({Role.ADMIN}),
}


def authorize(user: UserLike | None, policy: Policy) -> dict | None:
    """Decide whether a (possibly unregistered) caller satisfies a policy."""
    if policy == Policy.PUBLIC:
        return None

    if user is None:
        return _deny(
            "USER_NOT_REGISTERED",
            "No registered user matches the verified identity.",
        )

    if policy == Policy.AUTHENTICATED:
        return None

    if user.status == UserStatus.BLOCKED.value:
        return _deny("USER_BLOCKED", "Blocked users cannot perform this action.")

    allowed = POLICY_ROLES[policy]
    if not has_role(user, allowed):
        names = " or ".join(sorted(r.value for r in allowed))
        return _deny("ROLE_REQUIRED", f"Requires role {names}.")

    return None


def authorize_request_deletion(
    user: UserLike | None, requester_email: str,
) -> dict | None:
    """Admins may delete any request; everyone else only their own."""
    if user is None:
        return _deny(
            "USER_NOT_REGISTERED",
            "No registered user matches the verified identity.",
        )
    if user.role == Role.ADMIN.value and user.status != UserStatus.BLOCKED.value:
        return None
    if same_email(user.email, requester_email):
        return None
    return _deny(
        "NOT_REQUEST_OWNER",
        "Only the requester or an admin can delete this request.",
    )


def authorize_profile_edit(user: UserLike | None, target_email: str) -> dict | None:
    """Users edit their own profile; admins edit anyone's."""
    if user is None:
        return _deny(
            "USER_NOT_REGISTERED",
            "No registered user matches the verified identity.",
        )
    if same_email(user.email, target_email):
        return None
    return authorize(user, Policy.ADMIN)


def authorize_donor_confirmation(
    user: UserLike | None, donor_email: str | None,
) -> dict | None:
    """Active registered users confirm as themselves only."""
    if user is None:
        return _deny(
            "USER_NOT_REGISTERED",
            "Register before confirming a donation.",
        )
    if user.status == UserStatus.BLOCKED.value:
        return _deny("USER_BLOCKED", "Blocked users cannot confirm donations.")
    if donor_email is not None and not same_email(user.email, donor_email):
        return _deny(
            "DONOR_MISMATCH",
            "donorEmail must match the signed-in user.",
        )
    return None


def has_role(user: UserLike, roles: frozenset[Role]) -> bool:
    return user.role in {r.value for r in roles}


def same_email(a: str | None, b: str | None) -> bool:
    """Case-insensitive email equality; None never matches."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def _deny(code: str, message: str) -> dict:
    return {"code": code, "message": message}
