"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to real gateways or a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-with-enough-bytes-for-hs256")
os.environ.setdefault("RAZORPAY_KEY_ID", "rzp_test_key")
os.environ.setdefault("RAZORPAY_KEY_SECRET", "rzp-test-secret")
os.environ.setdefault("EMAIL_PROVIDER", "log")
os.environ.setdefault("LOG_FORMAT", "text")
