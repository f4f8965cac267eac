"""
Servizio di diagnostica.

Istanza unica creata in CoreConfig.ready() e usata dal comando
`manage.py diagnostics` per ispezionare i dati senza passare dall'admin.
"""

import logging
import uuid

from django.apps import apps
from django.utils import timezone

logger = logging.getLogger(__name__)


class DiagnosticsService:
    """
    Snapshot leggibili di eventi, categorie, persone e squadre.

    Ogni metodo ritorna una lista di dizionari (una riga per record) e
    registra un riepilogo sul logger.
    """

    def __init__(self, enabled=True):
        self.enabled = enabled

    def log(self, message, data=None):
        """Scrive un messaggio di diagnostica con timestamp."""
        if not self.enabled:
            return
        stamp = timezone.now().isoformat()
        if data is None:
            logger.info(f"[DIAG {stamp}] {message}")
        else:
            logger.info(f"[DIAG {stamp}] {message}: {data}")

    def events(self):
        Event = apps.get_model("events", "Event")
        rows = [
            {
                "id": str(event.id),
                "titolo": event.title,
                "data": event.date.isoformat(),
                "stato": event.status,
                "stato_derivato": event.auto_status,
                "ospiti": event.guest_count,
            }
            for event in Event.objects.order_by("date")
        ]
        self.log("Eventi", f"{len(rows)} totali")
        return rows

    def categories(self):
        Category = apps.get_model("team", "Category")
        rows = [
            {
                "id": str(category.id),
                "nome": category.name,
                "colore": category.color,
                "membri": category.member_count,
            }
            for category in Category.objects.order_by("name")
        ]
        self.log("Categorie", f"{len(rows)} totali")
        return rows

    def people(self):
        Person = apps.get_model("team", "Person")
        rows = [
            {
                "id": str(person.id),
                "nome": person.name,
                "categoria": person.category.name,
                "valore": person.value,
            }
            for person in Person.objects.select_related("category").order_by("name")
        ]
        self.log("Persone", f"{len(rows)} totali")
        return rows

    def team(self, event_id):
        """Squadra assegnata a un evento. Id non valido -> lista vuota."""
        try:
            event_uuid = uuid.UUID(str(event_id))
        except ValueError:
            self.log("Id evento non valido", event_id)
            return []

        EventTeam = apps.get_model("events", "EventTeam")
        rows = [
            {
                "persona": member.person.name,
                "categoria": member.person.category.name,
                "valore": member.person.value,
            }
            for member in EventTeam.objects.filter(event_id=event_uuid)
            .select_related("person__category")
            .order_by("person__category__name", "person__name")
        ]
        self.log(f"Squadra evento {event_uuid}", f"{len(rows)} persone")
        return rows
