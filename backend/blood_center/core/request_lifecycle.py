"""Donation Request Lifecycle — guarded status transitions and edit rules.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - LEGAL_TRANSITIONS is the single source of truth for status changes
    - Nothing leaves a terminal status (done, canceled)
    - donationStatus and donorInfo are never writable through the generic edit path
    - Donor entries are append-only; build_donor_entry only constructs, never merges

State machine:
    pending ──confirm──▶ inprogress ──staff──▶ done
       │                  │   ▲
       │                  └───┘ confirm (additional donor)
       └──staff──▶ canceled ◀──staff── inprogress

Design Decisions:
    - Fixed (from, to) table over if/else chains: reviewable in one place and
      reused by the shell to build conditional UPDATEs (source_states_for)
    - pending → canceled allowed: staff can close a request nobody claimed
"""

from datetime import datetime

from blood_center.core.domain_types import DonationStatus, TERMINAL_STATUSES


LEGAL_TRANSITIONS: frozenset[tuple[DonationStatus, DonationStatus]] = frozenset({
    (DonationStatus.PENDING, DonationStatus.IN_PROGRESS),
    (DonationStatus.IN_PROGRESS, DonationStatus.IN_PROGRESS),
    (DonationStatus.IN_PROGRESS, DonationStatus.DONE),
    (DonationStatus.IN_PROGRESS, DonationStatus.CANCELED),
    (DonationStatus.PENDING, DonationStatus.CANCELED),
})

# Lifecycle and identity keys; the edit path rejects them.
PROTECTED_FIELDS: frozenset[str] = frozenset({
    "donationStatus", "donation_status",
    "donorInfo", "donor_info",
    "id", "_id",
    "createdAt", "created_at",
})


def check_transition(current: str, target: str) -> dict | None:
    """Return an error dict if current → target is not in LEGAL_TRANSITIONS."""
    try:
        src = DonationStatus(current)
        dst = DonationStatus(target)
    except ValueError:
        return _error(
            "INVALID_STATUS",
            f"Unknown donation status: {current!r} → {target!r}.",
        )

    if (src, dst) in LEGAL_TRANSITIONS:
        return None

    if src in TERMINAL_STATUSES:
        return _error(
            "INVALID_TRANSITION",
            f"Request is already {src.value}; no further changes allowed.",
        )
    return _error(
        "INVALID_TRANSITION",
        f"Cannot move a request from {src.value} to {dst.value}.",
    )


def check_staff_target(target: str) -> dict | None:
    """Staff may only set terminal statuses; inprogress comes from confirmation."""
    try:
        dst = DonationStatus(target)
    except ValueError:
        return _error("INVALID_STATUS", f"Unknown donation status: {target!r}.")
    if dst not in TERMINAL_STATUSES:
        return _error(
            "INVALID_STATUS",
            "Status can only be set to done or canceled.",
        )
    return None


def source_states_for(target: DonationStatus) -> frozenset[DonationStatus]:
    """All statuses from which target is reachable."""
    return frozenset(src for src, dst in LEGAL_TRANSITIONS if dst == target)


def confirmable_states() -> frozenset[DonationStatus]:
    return source_states_for(DonationStatus.IN_PROGRESS)


def build_donor_entry(donor_name: str, donor_email: str, now: datetime) -> dict:
    """One donorInfo entry. Caller supplies now (core stays deterministic)."""
    return {
        "donor_name": donor_name.strip(),
        "donor_email": donor_email.strip().lower(),
        "confirmed_at": now,
    }


def find_protected_fields(keys) -> list[str]:
    """Keys of an edit payload that the generic edit path must not touch."""
    return sorted(k for k in keys if k in PROTECTED_FIELDS)


def _error(code: str, message: str) -> dict:
    return {"code": code, "message": message}
