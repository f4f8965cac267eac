"""
Servizi per eventi, fabbisogno staff e squadre.

Tutte le operazioni ritornano ServiceResult (vedi core.results).
"""

import logging

from django.core.exceptions import ValidationError

from core.results import get_object_or_fail, service_operation
from team.models import Category, Person

from . import status as event_status
from .models import Event, EventStaff, EventTeam

logger = logging.getLogger(__name__)

EVENT_FIELDS = {
    "title",
    "description",
    "date",
    "start_time",
    "end_time",
    "location",
    "status",
    "guest_count",
    "price_per_person",
}


def normalize_staff_assignments(staff_assignments):
    """
    Valida una lista di {category_id, count}.

    Le righe con count 0 vengono scartate; count negativi o categorie
    ripetute/inesistenti sono errori.

    Returns:
        list di tuple (Category, quantity)
    """
    normalized = []
    seen = set()
    for assignment in staff_assignments or []:
        category_id = assignment.get("category_id") or assignment.get("category")
        try:
            count = int(assignment.get("count") or 0)
        except (TypeError, ValueError):
            raise ValidationError({"staff": "Quantità non valida"})
        if count < 0:
            raise ValidationError("La quantità di staff non può essere negativa.")
        if count == 0:
            continue
        category = category_id if isinstance(category_id, Category) else get_object_or_fail(Category, category_id)
        if category.pk in seen:
            raise ValidationError(f"Categoria ripetuta nel fabbisogno staff: {category.name}")
        seen.add(category.pk)
        normalized.append((category, count))
    return normalized


def _replace_staff(event, staff):
    EventStaff.objects.filter(event=event).delete()
    EventStaff.objects.bulk_create(
        [EventStaff(event=event, category=category, quantity=count) for category, count in staff]
    )


class EventService:
    """CRUD eventi con fabbisogno staff."""

    @staticmethod
    @service_operation("caricare l'evento")
    def get(event_id):
        return get_object_or_fail(Event, event_id)

    @staticmethod
    @service_operation("creare l'evento")
    def create(title, date, staff_assignments=None, **fields):
        unknown = set(fields) - EVENT_FIELDS
        if unknown:
            raise ValidationError(f"Campi sconosciuti: {', '.join(sorted(unknown))}")
        if not date:
            raise ValidationError({"date": "La data è obbligatoria"})

        event = Event(title=(title or "").strip(), date=date, **fields)
        staff = normalize_staff_assignments(staff_assignments)
        event.full_clean()
        event.save()
        _replace_staff(event, staff)
        logger.info(f"Evento creato: {event.title} ({event.pk}) con {len(staff)} categorie di staff")
        return event

    @staticmethod
    @service_operation("aggiornare l'evento")
    def update(event_id, staff_assignments=None, **updates):
        """
        Aggiornamento parziale. Se `staff_assignments` è passato (anche vuoto)
        sostituisce completamente il fabbisogno staff.
        """
        if not updates and staff_assignments is None:
            raise ValidationError("Nessuna modifica fornita.")
        unknown = set(updates) - EVENT_FIELDS
        if unknown:
            raise ValidationError(f"Campi sconosciuti: {', '.join(sorted(unknown))}")

        event = get_object_or_fail(Event, event_id)
        for field, value in updates.items():
            setattr(event, field, value.strip() if field == "title" and value else value)
        event.full_clean()
        event.save()

        if staff_assignments is not None:
            _replace_staff(event, normalize_staff_assignments(staff_assignments))
        logger.info(f"Evento aggiornato: {event.title} ({event.pk})")
        return event

    @staticmethod
    @service_operation("cambiare lo stato dell'evento")
    def set_status(event_id, status):
        if status not in dict(event_status.STATUS_CHOICES):
            raise ValidationError(f"Stato non valido: {status}")
        event = get_object_or_fail(Event, event_id)
        event.status = status
        event.save(update_fields=["status", "updated_at"])
        logger.info(f"Evento {event.pk}: stato -> {status}")
        return event

    @staticmethod
    @service_operation("eliminare l'evento")
    def delete(event_id):
        event = get_object_or_fail(Event, event_id)
        event.delete()
        logger.info(f"Evento eliminato: {event_id}")
        return True

    @staticmethod
    @service_operation("concludere gli eventi passati")
    def finalize_past_events(today=None):
        """Salva lo stato concluso per gli eventi passati ancora aperti."""
        to_finalize = [
            event for event in Event.objects.to_finalize(today)
            if event_status.should_auto_finalize(event, today)
        ]
        ids = [event.pk for event in to_finalize]
        updated = Event.objects.filter(pk__in=ids).update(status=event_status.FINISHED)
        if updated:
            logger.info(f"Eventi conclusi automaticamente: {updated}")
        return updated


class EventTeamService:
    """Squadra concreta di un evento."""

    @staticmethod
    @service_operation("caricare la squadra dell'evento")
    def get_event_team(event_id):
        event = get_object_or_fail(Event, event_id)
        return list(
            Person.objects.filter(event_teams__event=event)
            .select_related("category")
            .order_by("category__name", "name")
        )

    @staticmethod
    @service_operation("salvare la squadra dell'evento")
    def save_event_team(event_id, person_ids):
        """Sostituisce l'intera squadra con le persone indicate."""
        event = get_object_or_fail(Event, event_id)
        people = [get_object_or_fail(Person, person_id) for person_id in dict.fromkeys(person_ids)]

        EventTeam.objects.filter(event=event).delete()
        EventTeam.objects.bulk_create([EventTeam(event=event, person=person) for person in people])
        logger.info(f"Squadra evento {event.pk}: {len(people)} persone")
        return people

    @staticmethod
    @service_operation("aggiungere la persona alla squadra")
    def add_person(event_id, person_id):
        event = get_object_or_fail(Event, event_id)
        person = get_object_or_fail(Person, person_id)
        return EventTeam.objects.create(event=event, person=person)

    @staticmethod
    @service_operation("rimuovere la persona dalla squadra")
    def remove_person(event_id, person_id):
        deleted, _ = EventTeam.objects.filter(event_id=event_id, person_id=person_id).delete()
        return deleted > 0
