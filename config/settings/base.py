"""
Settings base per Metri.

Tutti i segreti arrivano dall'ambiente: nessuna credenziale nel codice.
Le impostazioni specifiche stanno in development.py / test.py.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "")

DEBUG = False

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

# ============================================================================
# APPLICAZIONI
# ============================================================================

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Terze parti
    "crispy_forms",
    "crispy_bootstrap5",
    "django_select2",
    "qr_code",
    # App progetto
    "core",
    "access",
    "team",
    "events",
    "payments",
    "menus",
    "documents",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    # Gate di accesso con cookie di sessione
    "access.middleware.SessionCookieMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

# ============================================================================
# DATABASE
# ============================================================================

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DATABASE_NAME", "metri"),
        "USER": os.environ.get("DATABASE_USER", "metri"),
        "PASSWORD": os.environ.get("DATABASE_PASSWORD", ""),
        "HOST": os.environ.get("DATABASE_HOST", "localhost"),
        "PORT": os.environ.get("DATABASE_PORT", "5432"),
        "CONN_MAX_AGE": 60,
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ============================================================================
# LOCALIZZAZIONE
# ============================================================================

LANGUAGE_CODE = "it-it"
TIME_ZONE = "America/Sao_Paulo"
USE_I18N = True
USE_TZ = True

# ============================================================================
# FILE STATICI E MEDIA
# ============================================================================

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "/media/"
MEDIA_ROOT = BASE_DIR / "media"

# ============================================================================
# CRISPY FORMS / SELECT2
# ============================================================================

CRISPY_ALLOWED_TEMPLATE_PACKS = "bootstrap5"
CRISPY_TEMPLATE_PACK = "bootstrap5"

SELECT2_CACHE_BACKEND = "default"

# ============================================================================
# CELERY
# ============================================================================

CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/0")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", CELERY_BROKER_URL)
CELERY_TIMEZONE = TIME_ZONE

# ============================================================================
# ACCESSO (password unica + cookie di sessione)
# ============================================================================

METRI_AUTH = {
    "COOKIE_NAME": "metri_session",
    "SESSION_DURATION": 7 * 24 * 60 * 60,  # 7 giorni in secondi
    "PASSWORD_HASH": os.environ.get("APP_PASSWORD_HASH", ""),
    "AUTH_ROUTE": "/access/",
    "PROTECTED_PREFIX": "/central/",
    "DEFAULT_REDIRECT": "/central/",
    "COOKIE_SECURE": True,
    # Prefissi sempre raggiungibili senza sessione
    "PUBLIC_PREFIXES": ["/static/", "/media/", "/admin/", "/select2/", "/favicon.ico"],
    # Segmento dei link pubblici dei cardapi (token di condivisione)
    "PUBLIC_SEGMENTS": ["/cardapio/"],
}

# ============================================================================
# DATI AZIENDA (contratti / orcamenti)
# ============================================================================

METRI_COMPANY = {
    "NAME": os.environ.get("METRI_COMPANY_NAME", "Prime Buffet"),
    "PIX_KEY": os.environ.get("METRI_COMPANY_PIX", ""),
}

# Importo di default per un pagamento quando la persona non ha un valore
DEFAULT_PAYMENT_AMOUNT = 50

# ============================================================================
# LOGGING
# ============================================================================

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} [{levelname}] {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "core": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "access": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "team": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "events": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "payments": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "menus": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "documents": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}
