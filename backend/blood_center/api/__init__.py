"""API Layer — FastAPI routes, request dependencies, middleware, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON; errors share one {message, error} shape
"""
