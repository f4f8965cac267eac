"""
Settings per i test: database in memoria, storage in memoria, password nota.
"""

import hashlib

from .base import *  # noqa: F401,F403
from .base import LOGGING, METRI_AUTH

DEBUG = False

SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_TASK_ALWAYS_EAGER = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

METRI_AUTH["PASSWORD_HASH"] = hashlib.sha256(b"segreta").hexdigest()
METRI_AUTH["COOKIE_SECURE"] = False

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "WARNING"
