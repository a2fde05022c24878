"""Infrastructure Layer — database, logging, and external oracle adapters.

Invariants:
    - Every external SDK (SQLAlchemy, firebase-admin, stripe) is wrapped here;
      SDK exceptions never cross into services/ or api/
    - Adapters are constructed once in the lifespan and held on app.state
"""
