"""
Models per app events.

- Event: evento del buffet con data, orari, ospiti e stato
- EventStaff: fabbisogno di staff per categoria (quante persone servono)
- EventTeam: persone concrete assegnate all'evento
"""

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.urls import reverse

from core.dates import today as current_day
from core.models import BaseModel

from . import status as event_status


class EventQuerySet(models.QuerySet):
    """Filtri per le schede eventi attivi / storico."""

    def active(self, today=None):
        reference = today or current_day()
        return self.filter(date__gte=reference).exclude(status__in=event_status.CLOSED_STATUSES)

    def history(self, today=None):
        reference = today or current_day()
        return self.filter(Q(date__lt=reference) | Q(status__in=event_status.CLOSED_STATUSES))

    def relevant_for_payments(self):
        return self.exclude(status__in=event_status.CLOSED_STATUSES)

    def to_finalize(self, today=None):
        """Eventi passati non ancora chiusi (vedi should_auto_finalize)."""
        reference = today or current_day()
        return self.filter(date__lt=reference).exclude(status__in=event_status.CLOSED_STATUSES)


class Event(BaseModel):
    """
    Evento del buffet.

    Lo stato salvato può differire da quello effettivo: vedi `auto_status`.
    """

    title = models.CharField("Titolo", max_length=200)
    description = models.TextField("Descrizione", blank=True)

    # ========== DATA E ORARI ==========
    date = models.DateField("Data")
    start_time = models.TimeField("Ora inizio", null=True, blank=True)
    end_time = models.TimeField("Ora fine", null=True, blank=True)

    location = models.CharField("Location", max_length=300, blank=True)

    status = models.CharField(
        "Stato",
        max_length=20,
        choices=event_status.STATUS_CHOICES,
        default=event_status.PLANNED,
    )

    # ========== OSPITI E PREZZO ==========
    guest_count = models.PositiveIntegerField("Numero ospiti", null=True, blank=True)
    price_per_person = models.DecimalField(
        "Prezzo per persona",
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = "Evento"
        verbose_name_plural = "Eventi"
        ordering = ["-date", "start_time"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["date"]),
        ]

    def __str__(self):
        return f"{self.title} ({self.date.strftime('%d/%m/%Y')})"

    def get_absolute_url(self):
        return reverse("events:event_detail", kwargs={"pk": self.pk})

    def clean(self):
        errors = {}
        if self.title is not None and not self.title.strip():
            errors["title"] = "Il titolo è obbligatorio"
        if self.start_time and self.end_time and self.end_time < self.start_time:
            errors["end_time"] = "L'ora di fine deve essere successiva all'ora di inizio"
        if errors:
            raise ValidationError(errors)

    # ========== PROPERTIES ==========

    @property
    def auto_status(self):
        return event_status.get_auto_status(self)

    @property
    def status_display(self):
        return event_status.get_status_display(self.auto_status)

    @property
    def staff_assignments(self):
        """Fabbisogno staff come lista di {category_id, count}."""
        return [
            {"category_id": staff.category_id, "count": staff.quantity}
            for staff in self.staff.all()
        ]

    @property
    def total_staff_needed(self):
        return self.staff.aggregate(total=Sum("quantity"))["total"] or 0

    @property
    def total_price(self):
        """Valore dell'evento (ospiti x prezzo per persona)."""
        if self.guest_count is None or self.price_per_person is None:
            return None
        return Decimal(self.guest_count) * self.price_per_person

    @property
    def days_until(self):
        return (self.date - current_day()).days


class EventStaff(BaseModel):
    """Quante persone di una categoria servono per l'evento."""

    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="staff",
        verbose_name="Evento",
    )
    category = models.ForeignKey(
        "team.Category",
        on_delete=models.CASCADE,
        related_name="event_staff",
        verbose_name="Categoria",
    )
    quantity = models.PositiveIntegerField("Quantità", validators=[MinValueValidator(1)])

    class Meta:
        verbose_name = "Fabbisogno Staff"
        verbose_name_plural = "Fabbisogni Staff"
        ordering = ["category__name"]
        constraints = [
            models.UniqueConstraint(fields=["event", "category"], name="unique_event_staff_category"),
        ]

    def __str__(self):
        return f"{self.event.title} - {self.category.name} x{self.quantity}"


class EventTeam(BaseModel):
    """Persona assegnata alla squadra dell'evento."""

    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="team_members",
        verbose_name="Evento",
    )
    person = models.ForeignKey(
        "team.Person",
        on_delete=models.CASCADE,
        related_name="event_teams",
        verbose_name="Persona",
    )

    class Meta:
        verbose_name = "Membro Squadra Evento"
        verbose_name_plural = "Squadre Eventi"
        ordering = ["person__name"]
        constraints = [
            models.UniqueConstraint(fields=["event", "person"], name="unique_event_team_person"),
        ]

    def __str__(self):
        return f"{self.event.title} - {self.person.name}"
