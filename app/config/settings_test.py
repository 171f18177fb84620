"""
Test settings.

Layers test overrides on top of config.settings: SQLite instead of
PostgreSQL, in-memory cache, eager Celery and fake provider/admin
credentials. Selected via DJANGO_SETTINGS_MODULE in pyproject.toml.
"""

import os

# Required by config.settings; must exist before it is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_FILE_NAME", "test.log")

from config.settings import *  # noqa: E402,F403

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]
SECURE_SSL_REDIRECT = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# Celery runs tasks inline
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

APP_BASE_URL = "https://hackathon.test"

FAPSHI_API_BASE_URL = "https://sandbox.fapshi.test"
FAPSHI_API_USER = "test-api-user"
FAPSHI_API_KEY = "test-api-key"
FAPSHI_API_TIMEOUT_SECONDS = 5
FAPSHI_WEBHOOK_SECRET = ""

REGISTRATION_FEE_AMOUNT = 1000
REGISTRATION_FEE_CURRENCY = "XAF"
REGISTRATION_REFERENCE_PREFIX = "HACKATHON"

HACKATHON_ADMIN_PASSWORD = "test-admin-password"
HACKATHON_ADMIN_TOKEN = "test-admin-token"
