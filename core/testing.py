"""
Helper condivisi dai test delle app.
"""

from django.conf import settings


def authenticate_client(client, token="test-session"):
    """Imposta il cookie di sessione sul test client."""
    client.cookies[settings.METRI_AUTH["COOKIE_NAME"]] = token
    return client
