"""Boundary Protocols — structural contracts between core and shell.

Invariants:
    - Core NEVER imports ORM models — it sees records through these Protocols
    - Implementations are the SQLAlchemy models in models/ (structural match)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Attribute types are plain str so tests can pass SimpleNamespace stand-ins
"""

from typing import Protocol


class UserLike(Protocol):
    """What the access guard and user rules need to know about a user."""
    email: str
    role: str
    status: str
