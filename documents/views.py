"""
Views per app documents: archivio file, template PDF, contratti e orcamenti.
"""

import logging

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import FileResponse, Http404
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse
from django.views import View
from django.views.generic import DetailView, FormView, ListView

from core.mixins import (
    BreadcrumbMixin,
    CustomPaginationMixin,
    FilterMixin,
    FormInvalidMessageMixin,
    SearchMixin,
)
from events.models import Event

from . import fields as document_fields
from .forms import BudgetForm, ContractForm, DocumentUploadForm, FilledStatusForm, TemplateUploadForm
from .models import BudgetTemplate, ContractTemplate, Document, FilledBudget, FilledContract
from .services import (
    BudgetTemplateService,
    ContractTemplateService,
    DocumentService,
    FilledBudgetService,
    FilledContractService,
)

logger = logging.getLogger(__name__)


# ============================================================================
# DOCUMENTI
# ============================================================================

class DocumentListView(SearchMixin, FilterMixin, CustomPaginationMixin, ListView):
    """Archivio documenti con contratti, orcamenti e template."""

    model = Document
    template_name = "documents/document_list.html"
    context_object_name = "documents"
    search_fields = ["name", "description"]
    filter_fields = ["category"]

    def get_queryset(self):
        return super().get_queryset().select_related("event")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update({
            "categories": Document.CATEGORY_CHOICES,
            "contracts": FilledContract.objects.select_related("event", "template")[:20],
            "budgets": FilledBudget.objects.select_related("event", "template")[:20],
            "contract_templates": ContractTemplate.objects.all(),
            "budget_templates": BudgetTemplate.objects.all(),
        })
        return context


class DocumentUploadView(FormInvalidMessageMixin, FormView):
    form_class = DocumentUploadForm
    template_name = "core/form.html"

    def get_initial(self):
        return {"event": self.request.GET.get("event")}

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": "Carica documento"}
        return context

    def form_valid(self, form):
        data = form.cleaned_data
        result = DocumentService.upload(
            data["file"],
            name=data["name"],
            category=data["category"],
            description=data["description"],
            event_id=data["event"].pk if data["event"] else None,
        )
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)
        messages.success(self.request, f"Documento '{result.value.name}' caricato.")
        return redirect("documents:document_list")


class DocumentDeleteView(View):
    def post(self, request, pk):
        result = DocumentService.delete(pk)
        if result:
            messages.success(request, "Documento eliminato.")
        else:
            messages.error(request, result.error)
        return redirect("documents:document_list")


def _file_response(field_file, filename):
    if not field_file:
        raise Http404("File non disponibile")
    return FileResponse(field_file.open("rb"), as_attachment=True, filename=filename)


class DocumentDownloadView(View):
    def get(self, request, pk):
        document = get_object_or_404(Document, pk=pk)
        return _file_response(document.file, document.file.name.rsplit("/", 1)[-1])


# ============================================================================
# TEMPLATE
# ============================================================================

class _TemplateUploadView(FormInvalidMessageMixin, FormView):
    form_class = TemplateUploadForm
    template_name = "core/form.html"
    service = None
    title = ""

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {
            "title": self.title,
            "subtitle": "I campi modulo del PDF vengono letti automaticamente.",
        }
        return context

    def form_valid(self, form):
        data = form.cleaned_data
        result = self.service.create(data["name"], data["template_file"], description=data["description"])
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)
        messages.success(
            self.request, f"Template '{result.value.name}' caricato ({len(result.value.field_names)} campi)."
        )
        return redirect("documents:document_list")


class ContractTemplateUploadView(_TemplateUploadView):
    service = ContractTemplateService
    title = "Nuovo template contratto"


class BudgetTemplateUploadView(_TemplateUploadView):
    service = BudgetTemplateService
    title = "Nuovo template orcamento"


class _TemplateToggleView(View):
    service = None
    model = None

    def post(self, request, pk):
        template = get_object_or_404(self.model, pk=pk)
        result = self.service.set_active(template.pk, not template.is_active)
        if not result:
            messages.error(request, result.error)
        return redirect("documents:document_list")


class ContractTemplateToggleView(_TemplateToggleView):
    service = ContractTemplateService
    model = ContractTemplate


class BudgetTemplateToggleView(_TemplateToggleView):
    service = BudgetTemplateService
    model = BudgetTemplate


# ============================================================================
# CONTRATTI E ORCAMENTI
# ============================================================================

class _FilledCreateView(FormInvalidMessageMixin, FormView):
    """
    Compilazione: salva la bozza e genera subito il PDF.

    Con ?event=<id> i campi partono dai dati dell'evento.
    """

    template_name = "core/form.html"
    service = None
    title = ""

    def values_for_event(self, event):
        raise NotImplementedError

    def default_values(self):
        raise NotImplementedError

    def get_initial(self):
        event = None
        event_id = self.request.GET.get("event")
        if event_id:
            try:
                event = Event.objects.filter(pk=event_id).first()
            except ValidationError:
                event = None
        values = self.values_for_event(event) if event else self.default_values()
        initial = self.form_class.initial_from_values(values)
        initial["event"] = event
        return initial

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": self.title}
        return context

    def form_valid(self, form):
        data = form.cleaned_data
        result = self.service.create(
            data["template"].pk,
            form.filled_data(),
            event_id=data["event"].pk if data["event"] else None,
            notes=data["notes"],
        )
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)

        generated = self.service.generate_pdf(result.value.pk)
        if generated:
            messages.success(self.request, "Documento salvato e PDF generato.")
        else:
            messages.warning(self.request, f"Documento salvato in bozza: {generated.error}")
        return redirect(result.value.get_absolute_url())


class _FilledUpdateView(FormInvalidMessageMixin, FormView):
    """Modifica dei dati compilati; il PDF viene rigenerato."""

    template_name = "core/form.html"
    model = None
    service = None

    def dispatch(self, request, *args, **kwargs):
        self.filled = get_object_or_404(self.model, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get_initial(self):
        initial = self.form_class.initial_from_values(self.filled.filled_data)
        initial.update({"template": self.filled.template, "event": self.filled.event, "notes": self.filled.notes})
        return initial

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Modifica {self.filled}"}
        return context

    def form_valid(self, form):
        result = self.service.update_data(self.filled.pk, form.filled_data(), notes=form.cleaned_data["notes"])
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)

        generated = self.service.generate_pdf(self.filled.pk)
        if generated:
            messages.success(self.request, "Dati aggiornati e PDF rigenerato.")
        else:
            messages.warning(self.request, f"Dati aggiornati, PDF non generato: {generated.error}")
        return redirect(self.filled.get_absolute_url())


class ContractCreateView(_FilledCreateView):
    form_class = ContractForm
    service = FilledContractService
    title = "Nuovo contratto"

    def values_for_event(self, event):
        return document_fields.contract_values_for_event(event)

    def default_values(self):
        return document_fields.default_contract_values()


class BudgetCreateView(_FilledCreateView):
    form_class = BudgetForm
    service = FilledBudgetService
    title = "Nuovo orcamento"

    def values_for_event(self, event):
        return document_fields.budget_values_for_event(event)

    def default_values(self):
        return document_fields.default_budget_values()


class _FilledDetailView(BreadcrumbMixin, DetailView):
    template_name = "documents/filled_detail.html"
    context_object_name = "filled"
    field_labels = {}
    kind = ""

    def get_breadcrumbs(self):
        return [("Documenti", reverse("documents:document_list")), (str(self.object), None)]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        data = self.object.filled_data
        context.update({
            "kind": self.kind,
            "rows": [(label, data.get(key)) for key, label in self.field_labels.items()],
            "status_form": FilledStatusForm(
                choices=self.model.STATUS_CHOICES, initial={"status": self.object.status}
            ),
        })
        return context


class ContractDetailView(_FilledDetailView):
    model = FilledContract
    field_labels = document_fields.CONTRACT_FIELD_LABELS
    kind = "contract"


class BudgetDetailView(_FilledDetailView):
    model = FilledBudget
    field_labels = document_fields.BUDGET_FIELD_LABELS
    kind = "budget"


class _FilledGenerateView(View):
    service = None

    def post(self, request, pk):
        result = self.service.generate_pdf(pk)
        if result:
            messages.success(request, "PDF rigenerato.")
            return redirect(result.value.get_absolute_url())
        messages.error(request, result.error)
        return redirect("documents:document_list")


class ContractGenerateView(_FilledGenerateView):
    service = FilledContractService


class BudgetGenerateView(_FilledGenerateView):
    service = FilledBudgetService


class _FilledStatusView(View):
    service = None
    model = None

    def post(self, request, pk):
        filled = get_object_or_404(self.model, pk=pk)
        form = FilledStatusForm(request.POST, choices=self.model.STATUS_CHOICES)
        if form.is_valid():
            result = self.service.set_status(filled.pk, form.cleaned_data["status"])
            if not result:
                messages.error(request, result.error)
        else:
            messages.error(request, "Stato non valido.")
        return redirect(filled.get_absolute_url())


class ContractStatusView(_FilledStatusView):
    service = FilledContractService
    model = FilledContract


class BudgetStatusView(_FilledStatusView):
    service = FilledBudgetService
    model = FilledBudget


class _FilledDeleteView(View):
    service = None

    def post(self, request, pk):
        result = self.service.delete(pk)
        if result:
            messages.success(request, "Documento eliminato.")
        else:
            messages.error(request, result.error)
        return redirect("documents:document_list")


class ContractDeleteView(_FilledDeleteView):
    service = FilledContractService


class BudgetDeleteView(_FilledDeleteView):
    service = FilledBudgetService


class _FilledDownloadView(View):
    model = None
    filename_prefix = ""

    def get(self, request, pk):
        filled = get_object_or_404(self.model, pk=pk)
        return _file_response(filled.generated_pdf, f"{self.filename_prefix}_{filled.pk}.pdf")


class ContractDownloadView(_FilledDownloadView):
    model = FilledContract
    filename_prefix = "contratto"


class BudgetDownloadView(_FilledDownloadView):
    model = FilledBudget
    filename_prefix = "orcamento"


class ContractUpdateView(_FilledUpdateView):
    form_class = ContractForm
    model = FilledContract
    service = FilledContractService


class BudgetUpdateView(_FilledUpdateView):
    form_class = BudgetForm
    model = FilledBudget
    service = FilledBudgetService
