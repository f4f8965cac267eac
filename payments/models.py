"""
Models per app payments.

Un pagamento per persona per evento (vincolo DB).
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from core.models import BaseModel


class Payment(BaseModel):
    """Compenso di una persona della squadra per un evento."""

    event = models.ForeignKey(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name="Evento",
    )
    person = models.ForeignKey(
        "team.Person",
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name="Persona",
    )
    amount = models.DecimalField(
        "Importo",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    is_paid = models.BooleanField("Pagato", default=False)
    paid_at = models.DateTimeField("Data pagamento", null=True, blank=True)
    notes = models.TextField("Note", blank=True)

    class Meta:
        verbose_name = "Pagamento"
        verbose_name_plural = "Pagamenti"
        ordering = ["event__date", "person__name"]
        constraints = [
            models.UniqueConstraint(fields=["event", "person"], name="unique_payment_event_person"),
        ]
        indexes = [
            models.Index(fields=["is_paid"]),
        ]

    def __str__(self):
        return f"{self.person.name} - {self.event.title}: R$ {self.amount}"
