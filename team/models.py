"""
Models per app team.

- Category: funzione dello staff (garçom, cozinha, copa...) con colore e contatore membri
- Person: persona dello staff con valore di pagamento di default
"""

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.urls import reverse

from core.models import BaseModel

DEFAULT_CATEGORY_COLOR = "#3B82F6"

hex_color_validator = RegexValidator(
    regex=r"^#[0-9A-Fa-f]{6}$",
    message="Il colore deve essere in formato esadecimale (#RRGGBB)",
)


class Category(BaseModel):
    """
    Categoria di staff.

    member_count è denormalizzato: lo aggiornano i servizi delle persone.
    """

    name = models.CharField("Nome", max_length=100)
    description = models.TextField("Descrizione", blank=True)
    color = models.CharField(
        "Colore",
        max_length=7,
        default=DEFAULT_CATEGORY_COLOR,
        validators=[hex_color_validator],
    )
    member_count = models.PositiveIntegerField("Numero membri", default=0, editable=False)

    class Meta:
        verbose_name = "Categoria"
        verbose_name_plural = "Categorie"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse("team:category_detail", kwargs={"pk": self.pk})


class Person(BaseModel):
    """Persona dello staff."""

    name = models.CharField("Nome", max_length=200)
    value = models.DecimalField(
        "Valore",
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
        help_text="Compenso di default per evento",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="people",
        verbose_name="Categoria",
    )

    class Meta:
        verbose_name = "Persona"
        verbose_name_plural = "Persone"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["category"]),
        ]

    def __str__(self):
        return self.name
