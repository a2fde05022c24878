"""Donation request lifecycle tests — transition table and edit guards."""

from datetime import datetime, timezone

from blood_center.core.domain_types import DonationStatus
from blood_center.core.request_lifecycle import (
    LEGAL_TRANSITIONS,
    build_donor_entry,
    check_staff_target,
    check_transition,
    confirmable_states,
    find_protected_fields,
    source_states_for,
)


def test_every_legal_transition_passes():
    for src, dst in LEGAL_TRANSITIONS:
        assert check_transition(src.value, dst.value) is None


def test_pending_to_done_is_rejected():
    error = check_transition("pending", "done")
    assert error["code"] == "INVALID_TRANSITION"
    assert "pending to done" in error["message"]


def test_terminal_states_never_move():
    for terminal in ("done", "canceled"):
        for target in ("pending", "inprogress", "done", "canceled"):
            error = check_transition(terminal, target)
            assert error["code"] == "INVALID_TRANSITION"
            assert f"already {terminal}" in error["message"]


def test_nothing_returns_to_pending():
    for src in DonationStatus:
        assert (src, DonationStatus.PENDING) not in LEGAL_TRANSITIONS


def test_unknown_status_reported():
    assert check_transition("pending", "approved")["code"] == "INVALID_STATUS"


def test_staff_may_only_target_terminal_statuses():
    assert check_staff_target("done") is None
    assert check_staff_target("canceled") is None
    assert check_staff_target("inprogress")["code"] == "INVALID_STATUS"
    assert check_staff_target("pending")["code"] == "INVALID_STATUS"


def test_confirmable_states_are_pending_and_inprogress():
    assert confirmable_states() == {DonationStatus.PENDING, DonationStatus.IN_PROGRESS}


def test_done_reachable_only_from_inprogress():
    assert source_states_for(DonationStatus.DONE) == {DonationStatus.IN_PROGRESS}


def test_canceled_reachable_from_pending_and_inprogress():
    assert source_states_for(DonationStatus.CANCELED) == {
        DonationStatus.PENDING, DonationStatus.IN_PROGRESS,
    }


def test_build_donor_entry_normalizes_email():
    now = datetime(2026, 3, 1, tzinfo=timezone.utc)
    entry = build_donor_entry(" Rahim ", " Rahim@Mail.COM ", now)
    assert entry == {
        "donor_name": "Rahim",
        "donor_email": "rahim@mail.com",
        "confirmed_at": now,
    }


def test_find_protected_fields_catches_both_spellings():
    keys = {"hospitalName", "donationStatus", "donor_info", "createdAt"}
    assert find_protected_fields(keys) == ["createdAt", "donationStatus", "donor_info"]


def test_find_protected_fields_empty_for_descriptive_edit():
    assert find_protected_fields({"hospitalName", "donationTime"}) == []
