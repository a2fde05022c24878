"""Pagination — page/limit → offset, shared by every list endpoint."""

DEFAULT_PAGE: int = 1
DEFAULT_LIMIT: int = 10
MAX_LIMIT: int = 100


def page_offset(page: int, limit: int) -> int:
    """Zero-based row offset for a 1-based page."""
    return (max(page, 1) - 1) * limit
