"""
Celery tasks per app events.
"""

import logging

from celery import shared_task

from .services import EventService

logger = logging.getLogger(__name__)


@shared_task
def finalize_past_events():
    """
    Task Celery che conclude gli eventi passati ancora aperti.

    Viene eseguito ogni notte dal beat schedule (config/celery.py).
    """
    result = EventService.finalize_past_events()
    if not result:
        logger.error(f"Conclusione automatica eventi fallita: {result.error}")
        return {"finalized": 0, "error": result.error}

    return {"finalized": result.value}
