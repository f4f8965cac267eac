"""
BaseModel comune alle app di Metri (team, events, payments, menus, documents).
"""

from django.db import models
import uuid


class BaseModel(models.Model):
    """
    UUID come primary key e timestamp di creazione/modifica.

    Nessun soft delete: eliminare un evento elimina squadra, fabbisogno,
    pagamenti e cardapio collegati (CASCADE).
    """

    # UUID Primary Key (gli id arrivano anche da URL pubbliche)
    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False, verbose_name="ID"
    )

    # Timestamp automatici
    created_at = models.DateTimeField(
        "Data creazione", auto_now_add=True, db_index=True
    )
    updated_at = models.DateTimeField("Data modifica", auto_now=True)

    class Meta:
        abstract = True
        get_latest_by = "created_at"
        ordering = ["-created_at"]
