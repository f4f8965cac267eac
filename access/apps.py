import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class AccessConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "access"
    verbose_name = "Accesso"

    def ready(self):
        if not settings.METRI_AUTH.get("PASSWORD_HASH"):
            logger.warning(
                "APP_PASSWORD_HASH non configurato: l'accesso al gestionale sarà sempre negato"
            )
