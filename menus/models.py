"""
Models per app menus.

- Menu -> MenuCategory -> MenuItem: albero del cardapio con indici di ordinamento
- EventMenu: cardapio collegato a un evento, raggiungibile dagli ospiti col token
- MenuSelection: piatti scelti per l'evento (solo appartenenza)
"""

import secrets

from django.core.exceptions import ValidationError
from django.db import models
from django.urls import reverse

from core.models import BaseModel

SHARE_TOKEN_BYTES = 24


def generate_share_token():
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


class Menu(BaseModel):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"
    STATUS_ARCHIVED = "archived"
    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Attivo"),
        (STATUS_INACTIVE, "Inattivo"),
        (STATUS_ARCHIVED, "Archiviato"),
    ]

    name = models.CharField("Nome", max_length=200)
    description = models.TextField("Descrizione", blank=True)
    status = models.CharField("Stato", max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    class Meta:
        verbose_name = "Cardapio"
        verbose_name_plural = "Cardapi"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse("menus:menu_detail", kwargs={"pk": self.pk})

    @property
    def item_count(self):
        return MenuItem.objects.filter(category__menu=self).count()


class MenuCategory(BaseModel):
    menu = models.ForeignKey(Menu, on_delete=models.CASCADE, related_name="categories", verbose_name="Cardapio")
    name = models.CharField("Nome", max_length=200)
    # Solo indicativo: gli ospiti possono sceglierne di più
    recommended_count = models.PositiveIntegerField("Quantità consigliata", default=0)
    order_index = models.PositiveIntegerField("Ordine", default=0)

    class Meta:
        verbose_name = "Categoria Cardapio"
        verbose_name_plural = "Categorie Cardapio"
        ordering = ["menu", "order_index"]
        constraints = [
            models.UniqueConstraint(fields=["menu", "order_index"], name="unique_menu_category_order"),
        ]

    def __str__(self):
        return f"{self.menu.name} / {self.name}"


class MenuItem(BaseModel):
    category = models.ForeignKey(MenuCategory, on_delete=models.CASCADE, related_name="items", verbose_name="Categoria")
    name = models.CharField("Nome", max_length=200)
    description = models.TextField("Descrizione", blank=True)
    image_url = models.URLField("Immagine", max_length=500, blank=True)
    order_index = models.PositiveIntegerField("Ordine", default=0)

    class Meta:
        verbose_name = "Piatto"
        verbose_name_plural = "Piatti"
        ordering = ["category", "order_index"]
        constraints = [
            models.UniqueConstraint(fields=["category", "order_index"], name="unique_menu_item_order"),
        ]

    def __str__(self):
        return self.name


class EventMenu(BaseModel):
    """Collegamento evento -> cardapio con token di condivisione."""

    event = models.OneToOneField(
        "events.Event",
        on_delete=models.CASCADE,
        related_name="event_menu",
        verbose_name="Evento",
    )
    menu = models.ForeignKey(Menu, on_delete=models.CASCADE, related_name="event_menus", verbose_name="Cardapio")
    share_token = models.CharField(
        "Token condivisione",
        max_length=64,
        unique=True,
        default=generate_share_token,
        editable=False,
    )

    class Meta:
        verbose_name = "Cardapio Evento"
        verbose_name_plural = "Cardapi Eventi"

    def __str__(self):
        return f"{self.event.title} - {self.menu.name}"

    def get_public_url(self):
        return reverse(
            "menus_public:guest_menu",
            kwargs={"event_id": self.event_id, "token": self.share_token},
        )


class MenuSelection(BaseModel):
    event_menu = models.ForeignKey(EventMenu, on_delete=models.CASCADE, related_name="selections", verbose_name="Cardapio Evento")
    item = models.ForeignKey(MenuItem, on_delete=models.CASCADE, related_name="selections", verbose_name="Piatto")
    notes = models.TextField("Note", blank=True)

    class Meta:
        verbose_name = "Scelta"
        verbose_name_plural = "Scelte"
        constraints = [
            models.UniqueConstraint(fields=["event_menu", "item"], name="unique_menu_selection"),
        ]

    def __str__(self):
        return f"{self.event_menu} - {self.item.name}"

    def clean(self):
        if self.item_id and self.event_menu_id and self.item.category.menu_id != self.event_menu.menu_id:
            raise ValidationError({"item": "Il piatto non appartiene al cardapio dell'evento."})
