"""
Settings di sviluppo: SQLite locale e DEBUG attivo.
"""

import os

from .base import *  # noqa: F401,F403
from .base import BASE_DIR, LOGGING, METRI_AUTH

DEBUG = True

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-insecure-key")

if not os.environ.get("DATABASE_HOST"):
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

for _logger in LOGGING["loggers"].values():
    _logger["level"] = "DEBUG"
LOGGING["loggers"]["django"]["level"] = "INFO"

METRI_AUTH["COOKIE_SECURE"] = False
