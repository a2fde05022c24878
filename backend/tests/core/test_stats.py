"""Dashboard math tests — percentage change and month windows, no IO."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from blood_center.core.stats import (
    build_dashboard_stats, get_change, money, month_windows,
)


def test_change_from_zero_to_zero_is_zero():
    assert get_change(0, 0) == 0


def test_change_from_zero_is_one_hundred():
    assert get_change(100, 0) == 100


def test_change_rounds_to_one_decimal():
    assert get_change(150, 100) == 50.0
    assert get_change(2, 3) == -33.3


def test_month_windows_mid_year():
    this_start, last_start = month_windows(
        datetime(2026, 5, 17, 13, 4, tzinfo=timezone.utc),
    )
    assert this_start == datetime(2026, 5, 1, tzinfo=timezone.utc)
    assert last_start == datetime(2026, 4, 1, tzinfo=timezone.utc)


def test_month_windows_january_rolls_back_a_year():
    this_start, last_start = month_windows(
        datetime(2026, 1, 3, tzinfo=timezone.utc),
    )
    assert this_start == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert last_start == datetime(2025, 12, 1, tzinfo=timezone.utc)


def test_month_windows_converts_to_utc():
    """00:30 on the 1st at UTC+6 is still the previous month in UTC."""
    dhaka = timezone(timedelta(hours=6))
    this_start, _ = month_windows(datetime(2026, 6, 1, 0, 30, tzinfo=dhaka))
    assert this_start == datetime(2026, 5, 1, tzinfo=timezone.utc)


def test_money_handles_decimal_and_none():
    assert money(Decimal("40.50")) == 40.5
    assert money(7) == 7.0
    assert money(None) == 0.0


def test_build_dashboard_stats():
    stats = build_dashboard_stats(
        totals={"users": 12, "funding": 500.0, "requests": 7},
        current={"users": 4, "funding": 300.0, "requests": 0},
        last={"users": 2, "funding": 0.0, "requests": 0},
    )
    assert stats == {
        "totalUsers": 12,
        "totalFunding": 500.0,
        "totalRequests": 7,
        "usersChange": 100.0,
        "fundingChange": 100,
        "requestsChange": 0,
    }
