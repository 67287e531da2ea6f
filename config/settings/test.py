"""
Test settings – in-memory SQLite, fast password hashing, no admin cache.
"""
from .base import *  # noqa: F401, F403

SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LLMOPS_SUPER_ADMIN_CACHE_TTL = 0
LLMOPS_REQUIRE_SUPER_ADMIN = True

LOGGING["root"]["level"] = "WARNING"  # noqa: F405
