"""Pytest configuration shared by every test module under src/."""

import os

# Read at import time by api.security and services.passwords
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
# Keep the app from reaching a real database during route tests
os.environ.pop("MONGO_URL", None)
