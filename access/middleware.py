"""
Middleware di accesso al gestionale.

Regole, nell'ordine:
1. prefissi pubblici e link dei cardapi condivisi passano sempre
2. pagina di accesso con sessione -> redirect al gestionale
3. area protetta senza sessione -> redirect alla pagina di accesso
4. ogni altro percorso (tranne / e la pagina di accesso) senza sessione -> redirect a /
"""

import logging

from django.http import HttpResponseRedirect

from .session import auth_settings, has_session

logger = logging.getLogger(__name__)


class SessionCookieMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        redirect_to = self.resolve_redirect(request.path, has_session(request))
        if redirect_to is not None:
            logger.debug(f"Redirect {request.path} -> {redirect_to}")
            return HttpResponseRedirect(redirect_to)
        return self.get_response(request)

    @staticmethod
    def is_public(path: str) -> bool:
        config = auth_settings()
        if any(path.startswith(prefix) for prefix in config["PUBLIC_PREFIXES"]):
            return True
        return any(segment in path for segment in config["PUBLIC_SEGMENTS"])

    @classmethod
    def resolve_redirect(cls, path: str, authenticated: bool):
        """Ritorna l'URL di redirect o None se la richiesta può proseguire."""
        if cls.is_public(path):
            return None

        config = auth_settings()
        auth_route = config["AUTH_ROUTE"]

        if path == auth_route and authenticated:
            return config["DEFAULT_REDIRECT"]

        if path.startswith(config["PROTECTED_PREFIX"]) and not authenticated:
            return auth_route

        if not authenticated and path not in ("/", auth_route):
            return "/"

        return None
