from django.apps import AppConfig
from django.conf import settings


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Core - Sistema Base"

    diagnostics = None

    def ready(self):
        """
        Inizializzazione app al caricamento Django.

        Crea l'unica istanza del servizio di diagnostica.
        """
        # Import qui per evitare problemi di import circolari
        from .diagnostics import DiagnosticsService

        self.diagnostics = DiagnosticsService(enabled=getattr(settings, "METRI_DIAGNOSTICS", True))
