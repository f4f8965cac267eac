"""
Views per l'app access.
"""

import logging

from django.contrib import messages
from django.shortcuts import render, redirect
from django.views.decorators.http import require_http_methods

from .forms import AccessForm
from .session import (
    auth_settings,
    clear_session_cookie,
    generate_session_token,
    has_session,
    set_session_cookie,
    verify_password,
)

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def landing_view(request):
    """Root: con sessione va al gestionale, altrimenti mostra la landing."""
    if has_session(request):
        return redirect("dashboard")
    return render(request, "access/landing.html")


@require_http_methods(["GET", "POST"])
def access_view(request):
    """
    Vista di accesso con password unica.

    - GET: mostra form
    - POST: verifica la password e imposta il cookie di sessione
    """
    if request.method == "POST":
        form = AccessForm(request.POST)

        if form.is_valid():
            expected_hash = auth_settings()["PASSWORD_HASH"]
            if not expected_hash:
                logger.error("APP_PASSWORD_HASH non configurato")
            elif verify_password(form.cleaned_data["password"], expected_hash):
                logger.info("Accesso al gestionale consentito")
                response = redirect(auth_settings()["DEFAULT_REDIRECT"])
                return set_session_cookie(response, generate_session_token())
            else:
                logger.warning("Tentativo di accesso con password errata")

        # Messaggio unico, senza dettagli sul motivo
        messages.error(request, "Accesso negato")
    else:
        form = AccessForm()

    return render(request, "access/access.html", {"form": form})


@require_http_methods(["GET", "POST"])
def logout_view(request):
    """Cancella il cookie di sessione e torna alla pagina di accesso."""
    response = redirect("access:access")
    messages.info(request, "Logout effettuato con successo.")
    return clear_session_cookie(response)
