"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain enums from core/ used for status/role fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - camelCase on the wire for request/blog/funding resources, snake_case
      attribute names in Python (alias generators bridge the two)
"""
