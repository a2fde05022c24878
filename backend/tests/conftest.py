"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach real identity/payment providers or a server DB
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_fake_key")
os.environ.setdefault("FIREBASE_PROJECT_ID", "blood-center-test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
