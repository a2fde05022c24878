"""Dashboard Stats — pure month-over-month math for the stats endpoints.

Invariants:
    - get_change never divides by zero and never raises
    - month_windows returns UTC-aware boundaries; "current" is [this_start, now],
      "last" is [last_start, this_start)
    - Funding totals are floats rounded to cents (0.0 when no rows)

Design Decisions:
    - Pure functions, no DB: the service runs the counts, core does the math
"""

from datetime import datetime, timezone
from decimal import Decimal


def get_change(current: float, last: float) -> float:
    """Percentage change from last to current, rounded to one decimal."""
    if current == 0 and last == 0:
        return 0
    if last == 0:
        return 100
    return round((current - last) / last * 100, 1)


def month_windows(now: datetime) -> tuple[datetime, datetime]:
    """(start of this month, start of last month) in UTC."""
    now = now.astimezone(timezone.utc)
    this_start = datetime(now.year, now.month, 1, tzinfo=timezone.utc)
    if now.month == 1:
        last_start = datetime(now.year - 1, 12, 1, tzinfo=timezone.utc)
    else:
        last_start = datetime(now.year, now.month - 1, 1, tzinfo=timezone.utc)
    return this_start, last_start


def money(total: Decimal | float | int | None) -> float:
    if total is None:
        return 0.0
    return round(float(total), 2)


def build_dashboard_stats(
    totals: dict[str, float], current: dict[str, float], last: dict[str, float],
) -> dict:
    """Assemble the admin dashboard payload from raw counts/sums."""
    return {
        "totalUsers": int(totals["users"]),
        "totalFunding": money(totals["funding"]),
        "totalRequests": int(totals["requests"]),
        "usersChange": get_change(current["users"], last["users"]),
        "fundingChange": get_change(current["funding"], last["funding"]),
        "requestsChange": get_change(current["requests"], last["requests"]),
    }
