# Carica Celery all'avvio di Django, così @shared_task usa questa app.
from .celery import app as celery_app

__all__ = ("celery_app",)
