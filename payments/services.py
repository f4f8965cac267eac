"""
Servizi per i pagamenti dello staff.

Tutte le operazioni ritornano ServiceResult (vedi core.results).
"""

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.utils import timezone

from core.results import get_object_or_fail, service_operation
from events.models import Event
from team.models import Person

from .aggregation import build_event_payment_lines
from .models import Payment

logger = logging.getLogger(__name__)


def _to_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({"amount": "Importo non valido"})
    if amount <= 0:
        raise ValidationError({"amount": "L'importo deve essere maggiore di zero"})
    return amount


def _apply_paid(payment, is_paid):
    payment.is_paid = bool(is_paid)
    payment.paid_at = timezone.now() if payment.is_paid else None


class PaymentService:
    """CRUD pagamenti."""

    @staticmethod
    @service_operation("caricare i pagamenti dell'evento")
    def by_event(event_id):
        event = get_object_or_fail(Event, event_id)
        return list(event.payments.select_related("person__category").order_by("person__name"))

    @staticmethod
    @service_operation("creare il pagamento")
    def create(event, person, amount, is_paid=False, notes=""):
        if not isinstance(event, Event):
            event = get_object_or_fail(Event, event)
        if not isinstance(person, Person):
            person = get_object_or_fail(Person, person)

        payment = Payment(event=event, person=person, amount=_to_amount(amount), notes=notes or "")
        _apply_paid(payment, is_paid)
        # Unicità (evento, persona) verificata dal vincolo DB
        payment.full_clean(validate_unique=False, validate_constraints=False)
        payment.save()
        logger.info(f"Pagamento creato: {person.name} / {event.title} R$ {payment.amount}")
        return payment

    @staticmethod
    @service_operation("aggiornare il pagamento")
    def update(payment_id, amount=None, is_paid=None, notes=None):
        if amount is None and is_paid is None and notes is None:
            raise ValidationError("Nessuna modifica fornita.")
        payment = get_object_or_fail(Payment, payment_id)
        if amount is not None:
            payment.amount = _to_amount(amount)
        if is_paid is not None and bool(is_paid) != payment.is_paid:
            _apply_paid(payment, is_paid)
        if notes is not None:
            payment.notes = notes
        payment.save()
        logger.info(f"Pagamento aggiornato: {payment.pk} (pagato={payment.is_paid})")
        return payment

    @staticmethod
    @service_operation("segnare il pagamento come pagato")
    def mark_as_paid(payment_id):
        payment = get_object_or_fail(Payment, payment_id)
        _apply_paid(payment, True)
        payment.save(update_fields=["is_paid", "paid_at", "updated_at"])
        return payment

    @staticmethod
    @service_operation("aggiornare lo stato del pagamento")
    def toggle_paid(event_id, person_id, amount=None):
        """
        Inverte lo stato pagato di una persona per un evento.

        Se il pagamento non esiste ancora viene creato già pagato con
        l'importo indicato (o quello calcolato per la riga).
        """
        event = get_object_or_fail(Event, event_id)
        person = get_object_or_fail(Person, person_id)

        payment = Payment.objects.filter(event=event, person=person).first()
        if payment is not None:
            _apply_paid(payment, not payment.is_paid)
            if amount is not None:
                payment.amount = _to_amount(amount)
            payment.save()
            return payment

        if amount is None:
            line = next(
                (line for line in build_event_payment_lines(event) if line.person_id == person.pk),
                None,
            )
            if line is None:
                raise ValidationError(f"{person.name} non fa parte della squadra dell'evento.")
            amount = line.amount

        payment = Payment(event=event, person=person, amount=_to_amount(amount))
        _apply_paid(payment, True)
        payment.save()
        logger.info(f"Pagamento creato e saldato: {person.name} / {event.title}")
        return payment

    @staticmethod
    @service_operation("eliminare il pagamento")
    def delete(payment_id):
        payment = get_object_or_fail(Payment, payment_id)
        payment.delete()
        logger.info(f"Pagamento eliminato: {payment_id}")
        return True

    @staticmethod
    @service_operation("creare i pagamenti in blocco")
    def create_batch(event_id, entries):
        """
        Crea i pagamenti di più persone con un solo inserimento.

        Args:
            event_id: evento
            entries: lista di {person_id, amount, is_paid?}

        Le persone che hanno già un pagamento per l'evento vengono saltate.
        Gli importi sono validati prima di scrivere.
        """
        event = get_object_or_fail(Event, event_id)
        return _bulk_create_payments(event, entries)

    @staticmethod
    @service_operation("generare i pagamenti dell'evento")
    def create_missing_for_event(event_id):
        """Crea i pagamenti mancanti partendo dalle righe calcolate dell'evento."""
        event = get_object_or_fail(Event, event_id)
        entries = [
            {"person_id": line.person_id, "amount": line.amount}
            for line in build_event_payment_lines(event)
            if line.payment_id is None
        ]
        return _bulk_create_payments(event, entries)


def _bulk_create_payments(event, entries):
    already_paid = set(event.payments.values_list("person_id", flat=True))

    payments = []
    seen = set()
    for entry in entries:
        person = get_object_or_fail(Person, entry["person_id"])
        if person.pk in already_paid or person.pk in seen:
            continue
        seen.add(person.pk)
        payment = Payment(event=event, person=person, amount=_to_amount(entry["amount"]))
        _apply_paid(payment, entry.get("is_paid", False))
        payments.append(payment)

    created = Payment.objects.bulk_create(payments)
    logger.info(f"Pagamenti creati in blocco per {event.title}: {len(created)}")
    return created
