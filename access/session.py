"""
Helper per la password unica e il token di sessione.

Il cookie contiene solo un token casuale: la validità è data dalla sua
presenza, non esiste uno store lato server.
"""

import hashlib
import hmac
import secrets

from django.conf import settings


def auth_settings():
    return settings.METRI_AUTH


def hash_password(password: str) -> str:
    """Hash SHA-256 esadecimale della password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, expected_hash: str) -> bool:
    """Confronto a tempo costante tra hash della password e hash atteso."""
    if not expected_hash:
        return False
    return hmac.compare_digest(hash_password(password), expected_hash.strip().lower())


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def is_valid_session(token) -> bool:
    """Sessione valida = token presente e non vuoto."""
    return isinstance(token, str) and len(token) > 0


def get_session_token(request):
    return request.COOKIES.get(auth_settings()["COOKIE_NAME"])


def has_session(request) -> bool:
    return is_valid_session(get_session_token(request))


def set_session_cookie(response, token: str):
    """Imposta il cookie di sessione (HttpOnly, SameSite Lax, 7 giorni)."""
    config = auth_settings()
    response.set_cookie(
        config["COOKIE_NAME"],
        token,
        max_age=config["SESSION_DURATION"],
        path="/",
        secure=config["COOKIE_SECURE"],
        httponly=True,
        samesite="Lax",
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(auth_settings()["COOKIE_NAME"], path="/", samesite="Lax")
    return response
