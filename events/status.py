"""
Stato automatico degli eventi.

Regole (confronto solo per giorno di calendario):
1. evento annullato -> resta annullato
2. evento già concluso -> resta concluso
3. evento futuro -> pianificato (o in corso se già impostato)
4. evento oggi -> in corso
5. evento passato -> concluso

Le funzioni sono pure: non salvano nulla. Accettano oggetti con gli
attributi `date` e `status` (modelli Event o qualsiasi oggetto simile).
"""

from copy import copy
from dataclasses import dataclass, replace, is_dataclass
from datetime import date

from core.dates import is_date_in_past, is_date_today, parse_event_date, today as current_day

PLANNED = "planned"
IN_PROGRESS = "in_progress"
FINISHED = "finished"
CANCELLED = "cancelled"

STATUS_CHOICES = [
    (PLANNED, "Pianificato"),
    (IN_PROGRESS, "In corso"),
    (FINISHED, "Concluso"),
    (CANCELLED, "Annullato"),
]

CLOSED_STATUSES = (FINISHED, CANCELLED)


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    color: str  # colore Bootstrap per i badge


STATUS_DISPLAYS = {
    PLANNED: StatusDisplay("Pianificato", "primary"),
    IN_PROGRESS: StatusDisplay("In corso", "success"),
    FINISHED: StatusDisplay("Concluso", "secondary"),
    CANCELLED: StatusDisplay("Annullato", "danger"),
}


def _event_day(event) -> date:
    return parse_event_date(event.date)


def get_auto_status(event, today: date = None) -> str:
    """Stato effettivo da mostrare/usare per l'evento."""
    if event.status == CANCELLED:
        return CANCELLED
    if event.status == FINISHED:
        return FINISHED

    reference = today or current_day()

    if is_date_today(event.date, reference):
        return IN_PROGRESS
    if is_date_in_past(event.date, reference):
        return FINISHED
    return IN_PROGRESS if event.status == IN_PROGRESS else PLANNED


def should_auto_finalize(event, today: date = None) -> bool:
    """True se l'evento è di un giorno passato e non è già chiuso."""
    if event.status in CLOSED_STATUSES:
        return False
    return is_date_in_past(event.date, today)


def is_relevant_for_payments(event) -> bool:
    """Eventi attivi per la pagina pagamenti."""
    return event.status not in CLOSED_STATUSES


def is_relevant_for_payment_history(event) -> bool:
    return event.status in CLOSED_STATUSES


def is_active_event(event, today: date = None) -> bool:
    """Eventi di oggi o futuri non chiusi."""
    return _event_day(event) >= (today or current_day()) and event.status not in CLOSED_STATUSES


def is_history_event(event, today: date = None) -> bool:
    """Eventi passati oppure chiusi."""
    return _event_day(event) < (today or current_day()) or event.status in CLOSED_STATUSES


def get_status_display(status) -> StatusDisplay:
    """Etichetta e colore; stati sconosciuti vengono mostrati come pianificati."""
    return STATUS_DISPLAYS.get(status, STATUS_DISPLAYS[PLANNED])


def update_events_status(events, today: date = None):
    """
    Applica lo stato automatico a una lista di eventi senza salvarli.

    Ritorna nuove istanze (copie) con `status` sostituito, gli originali
    non vengono modificati.
    """
    reference = today or current_day()
    updated = []
    for event in events:
        status = get_auto_status(event, reference)
        if is_dataclass(event):
            updated.append(replace(event, status=status))
        else:
            clone = copy(event)
            clone.status = status
            updated.append(clone)
    return updated