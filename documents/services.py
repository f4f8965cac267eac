"""
Servizi per documenti, template PDF e contratti/orcamenti compilati.

Tutte le operazioni ritornano ServiceResult (vedi core.results).
"""

import logging

from django.core.exceptions import ValidationError
from django.core.files.base import ContentFile
from pypdf.errors import PdfReadError

from core.files import TEMPLATE_FILE_EXTENSIONS, file_extension, validate_file_upload
from core.pdf_generator import fill_pdf_form, list_pdf_form_fields
from core.results import get_object_or_fail, service_operation
from events.models import Event

from . import fields as document_fields
from .models import BudgetTemplate, ContractTemplate, Document, FilledBudget, FilledContract

logger = logging.getLogger(__name__)


def _optional_event(event_id):
    if not event_id:
        return None
    if isinstance(event_id, Event):
        return event_id
    return get_object_or_fail(Event, event_id)


# ============================================================================
# DOCUMENTI
# ============================================================================

class DocumentService:
    @staticmethod
    @service_operation("caricare il documento")
    def upload(file, name="", category="other", description="", event_id=None):
        is_valid, error = validate_file_upload(file)
        if not is_valid:
            raise ValidationError({"file": error})

        document = Document(
            name=(name or file.name).strip(),
            description=description or "",
            category=category,
            file_type=getattr(file, "content_type", "") or file_extension(file.name).lstrip("."),
            file_size=file.size,
            event=_optional_event(event_id),
        )
        document.full_clean(exclude=["file"])
        document.file.save(file.name, file, save=False)
        document.save()
        logger.info(f"Documento caricato: {document.name} ({document.file_size} bytes)")
        return document

    @staticmethod
    @service_operation("aggiornare il documento")
    def update(document_id, **updates):
        document = get_object_or_fail(Document, document_id)
        for name in ("name", "description", "category"):
            if name in updates:
                setattr(document, name, updates[name])
        if "event_id" in updates:
            document.event = _optional_event(updates["event_id"])
        document.full_clean()
        document.save()
        return document

    @staticmethod
    @service_operation("eliminare il documento")
    def delete(document_id):
        document = get_object_or_fail(Document, document_id)
        document.file.delete(save=False)
        document.delete()
        logger.info(f"Documento eliminato: {document_id}")
        return True


# ============================================================================
# TEMPLATE PDF
# ============================================================================

class _TemplateService:
    model = None

    @classmethod
    @service_operation("caricare il template")
    def create(cls, name, file, description="", is_active=True):
        is_valid, error = validate_file_upload(file, allowed_extensions=TEMPLATE_FILE_EXTENSIONS)
        if not is_valid:
            raise ValidationError({"template_file": error})

        content = file.read()
        try:
            field_names = list_pdf_form_fields(content)
        except PdfReadError as e:
            logger.warning(f"PDF template illeggibile ({file.name}): {e}")
            raise ValidationError({"template_file": "Il file non è un PDF leggibile."})
        if not field_names:
            raise ValidationError({"template_file": "Il PDF non contiene campi modulo."})

        template = cls.model(
            name=(name or "").strip(),
            description=description or "",
            fields_schema={"fields": field_names},
            is_active=is_active,
        )
        template.full_clean(exclude=["template_file"])
        template.template_file.save(file.name, ContentFile(content), save=False)
        template.save()
        logger.info(f"Template caricato: {template.name} ({len(field_names)} campi)")
        return template

    @classmethod
    @service_operation("aggiornare il template")
    def set_active(cls, template_id, is_active):
        template = get_object_or_fail(cls.model, template_id)
        template.is_active = bool(is_active)
        template.save(update_fields=["is_active", "updated_at"])
        return template

    @classmethod
    @service_operation("eliminare il template")
    def delete(cls, template_id):
        template = get_object_or_fail(cls.model, template_id)
        template.template_file.delete(save=False)
        template.delete()
        return True


class ContractTemplateService(_TemplateService):
    model = ContractTemplate


class BudgetTemplateService(_TemplateService):
    model = BudgetTemplate


# ============================================================================
# CONTRATTI E ORCAMENTI COMPILATI
# ============================================================================

class _FilledDocumentService:
    """
    Operazioni comuni: bozza con i dati, generazione del PDF dal template,
    cambio stato. Le sottoclassi indicano modello e mappatura dei campi.
    """

    model = None
    template_model = None
    filename_prefix = "documento"

    @staticmethod
    def to_pdf_values(data):
        raise NotImplementedError

    @classmethod
    def validate_data(cls, data):
        """Errori di validazione dei dati compilati (nessuno di default)."""

    @classmethod
    @service_operation("salvare il documento")
    def create(cls, template_id, filled_data, event_id=None, notes=""):
        template = get_object_or_fail(cls.template_model, template_id)
        if not template.is_active:
            raise ValidationError("Il template non è attivo.")
        cls.validate_data(filled_data)

        filled = cls.model(
            template=template,
            event=_optional_event(event_id),
            filled_data=filled_data,
            notes=notes or "",
        )
        filled.full_clean(exclude=["generated_pdf"])
        filled.save()
        logger.info(f"{cls.model._meta.verbose_name} creato: {filled.pk}")
        return filled

    @classmethod
    @service_operation("aggiornare il documento")
    def update_data(cls, filled_id, filled_data, notes=None):
        filled = get_object_or_fail(cls.model, filled_id)
        cls.validate_data(filled_data)
        filled.filled_data = filled_data
        if notes is not None:
            filled.notes = notes
        filled.save()
        return filled

    @classmethod
    @service_operation("generare il PDF")
    def generate_pdf(cls, filled_id):
        """Compila il template con i dati salvati e archivia il PDF (stato: completed)."""
        filled = get_object_or_fail(cls.model, filled_id)
        if filled.template is None or not filled.template.template_file:
            raise ValidationError("Template non disponibile per questo documento.")

        with filled.template.template_file.open("rb") as template_file:
            template_bytes = template_file.read()

        pdf_bytes, matched = fill_pdf_form(template_bytes, cls.to_pdf_values(filled.filled_data))

        if filled.generated_pdf:
            filled.generated_pdf.delete(save=False)
        filled.generated_pdf.save(f"{cls.filename_prefix}_{filled.pk}.pdf", ContentFile(pdf_bytes), save=False)
        filled.status = "completed"
        filled.save()
        logger.info(f"PDF generato per {filled.pk}: {len(matched)} campi compilati")
        return filled

    @classmethod
    @service_operation("cambiare lo stato")
    def set_status(cls, filled_id, status):
        if status not in dict(cls.model.STATUS_CHOICES):
            raise ValidationError(f"Stato non valido: {status}")
        filled = get_object_or_fail(cls.model, filled_id)
        filled.status = status
        filled.save(update_fields=["status", "updated_at"])
        return filled

    @classmethod
    @service_operation("eliminare il documento")
    def delete(cls, filled_id):
        filled = get_object_or_fail(cls.model, filled_id)
        if filled.generated_pdf:
            filled.generated_pdf.delete(save=False)
        filled.delete()
        return True


class FilledContractService(_FilledDocumentService):
    model = FilledContract
    template_model = ContractTemplate
    filename_prefix = "contratto"

    @staticmethod
    def to_pdf_values(data):
        return document_fields.build_contract_pdf_values(data)

    @classmethod
    def validate_data(cls, data):
        if not str(data.get("1") or "").strip():
            raise ValidationError({"1": "Il nome del contraente è obbligatorio."})
        cpf = data.get("2")
        if cpf and not document_fields.validate_cpf(cpf):
            raise ValidationError({"2": "CPF non valido."})


class FilledBudgetService(_FilledDocumentService):
    model = FilledBudget
    template_model = BudgetTemplate
    filename_prefix = "orcamento"

    @staticmethod
    def to_pdf_values(data):
        return document_fields.build_budget_pdf_values(data)

    @classmethod
    def validate_data(cls, data):
        if not str(data.get("evento") or "").strip():
            raise ValidationError({"evento": "Il nome dell'evento è obbligatorio."})
