"""Route Modules — one file per resource.

Invariants:
    - Each module defines its own APIRouter with tags
    - Routes never contain business logic (delegate to services)
    - Paths match the public contract exactly (no version prefix)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
