"""Services Layer — imperative shell around the pure core.

Invariants:
    - One service class per table; each takes an AsyncSession in __init__
    - Authorization and lifecycle DECISIONS come from core/; services only
      turn deny/error dicts into exceptions and run the queries
"""
