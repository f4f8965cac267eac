"""
Aggregazione dei pagamenti per la pagina pagamenti e gli export.

- PaymentLine: una persona da pagare per un evento (dati denormalizzati)
- group_by_category: partizione delle righe per categoria, in ordine di apparizione
- payment_stats / payment_summary: totali per evento e complessivi
- build_event_payment_lines: righe di un evento dalla squadra o dal fabbisogno staff
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.conf import settings


def default_payment_amount() -> Decimal:
    return Decimal(str(getattr(settings, "DEFAULT_PAYMENT_AMOUNT", 50)))


@dataclass
class PaymentLine:
    person_id: object
    person_name: str
    category_id: object
    category_name: str
    category_color: str
    event_id: object
    amount: Decimal
    is_paid: bool = False
    payment_id: Optional[object] = None

    @classmethod
    def from_payment(cls, payment):
        """Riga da un Payment salvato (person e category già caricati)."""
        person = payment.person
        return cls(
            person_id=person.pk,
            person_name=person.name,
            category_id=person.category_id,
            category_name=person.category.name,
            category_color=person.category.color,
            event_id=payment.event_id,
            amount=payment.amount,
            is_paid=payment.is_paid,
            payment_id=payment.pk,
        )


@dataclass
class CategoryGroup:
    """Righe di una categoria con i relativi totali."""

    category_id: object
    category_name: str
    category_color: str
    lines: List[PaymentLine] = field(default_factory=list)

    @property
    def total_amount(self) -> Decimal:
        return sum((line.amount for line in self.lines), Decimal("0"))

    @property
    def paid_amount(self) -> Decimal:
        return sum((line.amount for line in self.lines if line.is_paid), Decimal("0"))

    @property
    def pending_amount(self) -> Decimal:
        return self.total_amount - self.paid_amount

    @property
    def paid_count(self) -> int:
        return sum(1 for line in self.lines if line.is_paid)

    @property
    def unpaid_count(self) -> int:
        return len(self.lines) - self.paid_count


def group_by_category(lines: Iterable[PaymentLine]) -> List[CategoryGroup]:
    """
    Raggruppa le righe per category_id.

    I gruppi seguono l'ordine della prima apparizione; nome e colore sono
    quelli della prima riga del gruppo. Ogni riga finisce in un solo gruppo.
    """
    groups: Dict[object, CategoryGroup] = {}
    for line in lines:
        group = groups.get(line.category_id)
        if group is None:
            group = CategoryGroup(
                category_id=line.category_id,
                category_name=line.category_name,
                category_color=line.category_color,
            )
            groups[line.category_id] = group
        group.lines.append(line)
    return list(groups.values())


@dataclass
class PaymentStats:
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    unpaid_amount: Decimal = Decimal("0")
    paid_count: int = 0
    unpaid_count: int = 0
    total_count: int = 0

    @property
    def completion_rate(self) -> float:
        """Percentuale dell'importo già pagato."""
        if not self.total_amount:
            return 0.0
        return float(self.paid_amount / self.total_amount * 100)


def payment_stats(payments) -> PaymentStats:
    """Totali su Payment o PaymentLine (qualsiasi oggetto con amount / is_paid)."""
    stats = PaymentStats()
    for payment in payments or []:
        amount = payment.amount or Decimal("0")
        stats.total_amount += amount
        stats.total_count += 1
        if payment.is_paid:
            stats.paid_amount += amount
            stats.paid_count += 1
    stats.unpaid_amount = stats.total_amount - stats.paid_amount
    stats.unpaid_count = stats.total_count - stats.paid_count
    return stats


@dataclass
class EventPayments:
    """Righe e gruppi di un evento per la pagina pagamenti."""

    event: object
    lines: List[PaymentLine]

    @property
    def groups(self) -> List[CategoryGroup]:
        return group_by_category(self.lines)

    @property
    def stats(self) -> PaymentStats:
        return payment_stats(self.lines)


@dataclass
class PaymentSummary:
    """Riepilogo su più eventi."""

    events: List[EventPayments]
    stats: PaymentStats

    @property
    def event_count(self) -> int:
        return len(self.events)


def payment_summary(events_payments: Iterable[EventPayments]) -> PaymentSummary:
    events_payments = list(events_payments)
    all_lines = [line for entry in events_payments for line in entry.lines]
    return PaymentSummary(events=events_payments, stats=payment_stats(all_lines))


def build_event_payment_lines(event, default_amount: Decimal = None) -> List[PaymentLine]:
    """
    Righe di pagamento di un evento.

    - se l'evento ha una squadra assegnata: una riga per membro
    - altrimenti: le prime N persone di ogni categoria del fabbisogno staff

    Importo: pagamento esistente, altrimenti valore della persona,
    altrimenti l'importo di default.
    """
    from team.models import Person

    fallback = default_amount if default_amount is not None else default_payment_amount()
    existing = {payment.person_id: payment for payment in event.payments.all()}

    team = list(
        Person.objects.filter(event_teams__event=event)
        .select_related("category")
        .order_by("category__name", "name")
    )
    if not team:
        for staff in event.staff.select_related("category").order_by("category__name"):
            team.extend(staff.category.people.select_related("category").order_by("name")[: staff.quantity])

    lines = []
    for person in team:
        payment = existing.get(person.pk)
        if payment is not None:
            amount = payment.amount
        elif person.value:
            amount = person.value
        else:
            amount = fallback
        lines.append(
            PaymentLine(
                person_id=person.pk,
                person_name=person.name,
                category_id=person.category_id,
                category_name=person.category.name,
                category_color=person.category.color,
                event_id=event.pk,
                amount=amount,
                is_paid=payment.is_paid if payment is not None else False,
                payment_id=payment.pk if payment is not None else None,
            )
        )
    return lines
