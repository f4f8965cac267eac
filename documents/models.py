"""
Models per app documents.

- Document: file caricati (contratti firmati, ricevute, foto...)
- ContractTemplate / BudgetTemplate: PDF con campi modulo
- FilledContract / FilledBudget: dati compilati per un evento e PDF generato
"""

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.urls import reverse

from core.models import BaseModel


class Document(BaseModel):
    CATEGORY_CHOICES = [
        ("contract", "Contratto"),
        ("invoice", "Fattura"),
        ("receipt", "Ricevuta"),
        ("photo", "Foto"),
        ("other", "Altro"),
    ]

    name = models.CharField("Nome", max_length=255)
    description = models.TextField("Descrizione", blank=True)
    category = models.CharField("Categoria", max_length=20, choices=CATEGORY_CHOICES, default="other")
    file = models.FileField("File", upload_to="documents/%Y/%m/")
    file_type = models.CharField("Tipo file", max_length=100, blank=True)
    file_size = models.PositiveIntegerField("Dimensione (bytes)", null=True, blank=True)
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="documents",
        verbose_name="Evento",
    )

    class Meta:
        verbose_name = "Documento"
        verbose_name_plural = "Documenti"
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["category"])]

    def __str__(self):
        return self.name

    @property
    def file_size_display(self):
        if not self.file_size:
            return "-"
        if self.file_size < 1024 * 1024:
            return f"{self.file_size / 1024:.1f} KB"
        return f"{self.file_size / (1024 * 1024):.1f} MB"


class PdfTemplate(BaseModel):
    """Template PDF con campi modulo."""

    name = models.CharField("Nome", max_length=200)
    description = models.TextField("Descrizione", blank=True)
    template_file = models.FileField("Template PDF", upload_to="templates/")
    # Nomi dei campi modulo letti dal PDF al caricamento
    fields_schema = models.JSONField("Campi", default=dict, blank=True)
    is_active = models.BooleanField("Attivo", default=True)

    class Meta:
        abstract = True
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def field_names(self):
        return self.fields_schema.get("fields", [])


class ContractTemplate(PdfTemplate):
    class Meta(PdfTemplate.Meta):
        verbose_name = "Template Contratto"
        verbose_name_plural = "Template Contratti"


class BudgetTemplate(PdfTemplate):
    class Meta(PdfTemplate.Meta):
        verbose_name = "Template Orcamento"
        verbose_name_plural = "Template Orcamenti"


class FilledDocument(BaseModel):
    filled_data = models.JSONField("Dati", default=dict, encoder=DjangoJSONEncoder)
    generated_pdf = models.FileField("PDF generato", upload_to="generated/%Y/%m/", blank=True)
    notes = models.TextField("Note", blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]


class FilledContract(FilledDocument):
    STATUS_CHOICES = [
        ("draft", "Bozza"),
        ("completed", "Generato"),
        ("sent", "Inviato"),
        ("signed", "Firmato"),
    ]

    template = models.ForeignKey(
        ContractTemplate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="filled",
        verbose_name="Template",
    )
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contracts",
        verbose_name="Evento",
    )
    status = models.CharField("Stato", max_length=20, choices=STATUS_CHOICES, default="draft")

    class Meta(FilledDocument.Meta):
        verbose_name = "Contratto"
        verbose_name_plural = "Contratti"

    def __str__(self):
        return f"Contratto {self.filled_data.get('1') or self.pk}"

    def get_absolute_url(self):
        return reverse("documents:contract_detail", kwargs={"pk": self.pk})


class FilledBudget(FilledDocument):
    STATUS_CHOICES = [
        ("draft", "Bozza"),
        ("completed", "Generato"),
        ("sent", "Inviato"),
        ("approved", "Approvato"),
        ("rejected", "Rifiutato"),
    ]

    template = models.ForeignKey(
        BudgetTemplate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="filled",
        verbose_name="Template",
    )
    event = models.ForeignKey(
        "events.Event",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="budgets",
        verbose_name="Evento",
    )
    status = models.CharField("Stato", max_length=20, choices=STATUS_CHOICES, default="draft")

    class Meta(FilledDocument.Meta):
        verbose_name = "Orcamento"
        verbose_name_plural = "Orcamenti"

    def __str__(self):
        return f"Orcamento {self.filled_data.get('evento') or self.pk}"

    def get_absolute_url(self):
        return reverse("documents:budget_detail", kwargs={"pk": self.pk})
