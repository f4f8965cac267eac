"""
Celery Configuration - Metri

Configurazione Celery per tasks asincroni e scheduling.
"""

import os
from celery import Celery
from celery.schedules import crontab

# Set default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('metri')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

# Celery Beat Schedule - Tasks periodici
app.conf.beat_schedule = {
    'finalize-past-events-every-night': {
        'task': 'events.tasks.finalize_past_events',
        'schedule': crontab(hour=0, minute=15),
        'options': {
            'expires': 60 * 60,  # Task scade dopo un'ora se non eseguito
        }
    },
}

# Timezone
app.conf.timezone = 'America/Sao_Paulo'
