"""
Views per app payments.

- dashboard: riepilogo pagamenti degli eventi aperti (tab storico per i chiusi)
- dettaglio evento: righe raggruppate per categoria
- endpoint JSON per segnare pagato / cambiare importo
- export Excel e PDF
"""

import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import DetailView, TemplateView, UpdateView

from core.excel_generator import ExcelSheet, excel_response
from core.mixins import BreadcrumbMixin, FormInvalidMessageMixin, JSONResponseMixin, ServiceFormMixin
from core.pdf_generator import PdfSection, build_report_pdf, pdf_response
from events.models import Event

from .aggregation import EventPayments, PaymentLine, build_event_payment_lines, payment_summary
from .forms import PaymentAmountForm, PaymentForm, PaymentToggleForm
from .models import Payment
from .services import PaymentService

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["Evento", "Data", "Persona", "Categoria", "Importo", "Pagato"]
PDF_HEADERS = ["Persona", "Categoria", "Importo", "Pagato"]
SUMMARY_HEADERS = ["Evento", "Data", "Persone", "Totale", "Pagato", "Da pagare"]


def _event_payments(events, saved_only=False):
    """Righe per evento: solo i pagamenti salvati per lo storico, altrimenti squadra o fabbisogno."""
    if saved_only:
        return [
            EventPayments(event=event, lines=[PaymentLine.from_payment(payment) for payment in event.payments.all()])
            for event in events
        ]
    return [EventPayments(event=event, lines=build_event_payment_lines(event)) for event in events]


def _line_row(entry, line):
    return {
        "Evento": entry.event.title,
        "Data": entry.event.date,
        "Persona": line.person_name,
        "Categoria": line.category_name,
        "Importo": line.amount,
        "Pagato": line.is_paid,
    }


def _export_rows(events_payments):
    return [_line_row(entry, line) for entry in events_payments for line in entry.lines]


def _summary_rows(events_payments):
    rows = []
    for entry in events_payments:
        stats = entry.stats
        rows.append({
            "Evento": entry.event.title,
            "Data": entry.event.date,
            "Persone": stats.total_count,
            "Totale": stats.total_amount,
            "Pagato": stats.paid_amount,
            "Da pagare": stats.unpaid_amount,
        })
    return rows


def _pdf_section(entry):
    stats = entry.stats
    return PdfSection(
        heading=f"{entry.event.title} - {entry.event.date:%d/%m/%Y}",
        rows=[_line_row(entry, line) for line in entry.lines],
        footer=f"Totale R$ {stats.total_amount:.2f} - pagato R$ {stats.paid_amount:.2f} - da pagare R$ {stats.unpaid_amount:.2f}",
    )


def _events_for_tab(tab):
    queryset = Event.objects.prefetch_related("payments__person__category")
    if tab == "storico":
        return queryset.history().order_by("-date")
    return queryset.relevant_for_payments().order_by("date", "start_time")


class PaymentDashboardView(BreadcrumbMixin, TemplateView):
    template_name = "payments/dashboard.html"

    def get_breadcrumbs(self):
        return [("Central", reverse("dashboard")), ("Pagamenti", None)]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        tab = self.request.GET.get("tab", "attivi")
        summary = payment_summary(_event_payments(_events_for_tab(tab), saved_only=tab == "storico"))
        context.update({
            "tab": tab,
            "summary": summary,
            "stats": summary.stats,
        })
        return context


class EventPaymentsView(BreadcrumbMixin, DetailView):
    model = Event
    template_name = "payments/event_payments.html"
    context_object_name = "event"

    def get_breadcrumbs(self):
        return [
            ("Central", reverse("dashboard")),
            ("Pagamenti", reverse("payments:dashboard")),
            (self.object.title, None),
        ]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        entry = EventPayments(event=self.object, lines=build_event_payment_lines(self.object))
        context.update({
            "groups": entry.groups,
            "stats": entry.stats,
            "has_missing": any(line.payment_id is None for line in entry.lines),
        })
        return context


class PaymentToggleView(JSONResponseMixin, View):
    """POST: inverte lo stato pagato di una persona (crea il pagamento se manca)."""

    def post(self, request, pk):
        form = PaymentToggleForm(request.POST)
        if not form.is_valid():
            return self.render_to_json_error("Dati non validi")

        result = PaymentService.toggle_paid(pk, form.cleaned_data["person"], form.cleaned_data.get("amount"))
        if not result:
            return self.render_to_json_error(result.error)

        payment = result.value
        return self.render_to_json_response({
            "success": True,
            "payment_id": str(payment.pk),
            "is_paid": payment.is_paid,
            "amount": str(payment.amount),
        })


class PaymentAmountView(JSONResponseMixin, View):
    """POST: aggiorna l'importo di un pagamento esistente."""

    def post(self, request, pk):
        form = PaymentAmountForm(request.POST)
        if not form.is_valid():
            return self.render_to_json_error("Importo non valido")

        result = PaymentService.update(pk, amount=form.cleaned_data["amount"])
        return self.render_service_result(
            result, amount=str(result.value.amount) if result else None
        )


class PaymentUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = Payment
    form_class = PaymentForm
    template_name = "core/form.html"
    success_message = "Pagamento aggiornato."

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {
            "title": f"Pagamento {self.object.person.name}",
            "subtitle": str(self.object.event),
        }
        return context

    def perform_service(self, form):
        data = form.cleaned_data
        return PaymentService.update(
            self.object.pk, amount=data["amount"], is_paid=data["is_paid"], notes=data["notes"]
        )

    def get_success_url(self):
        return reverse("payments:event_payments", kwargs={"pk": self.object.event_id})


class PaymentDeleteView(View):
    def post(self, request, pk):
        result = PaymentService.delete(pk)
        if result:
            messages.success(request, "Pagamento eliminato.")
        else:
            messages.error(request, result.error)
        return redirect(request.POST.get("next") or reverse_lazy("payments:dashboard"))


class GenerateEventPaymentsView(View):
    """POST: crea in blocco i pagamenti mancanti dell'evento."""

    def post(self, request, pk):
        event = get_object_or_404(Event, pk=pk)
        result = PaymentService.create_missing_for_event(event.pk)
        if result:
            messages.success(request, f"Pagamenti generati: {len(result.value)}")
        else:
            messages.error(request, result.error)
        return redirect("payments:event_payments", pk=event.pk)


class PaymentExportExcelView(View):
    """Foglio righe + foglio riepilogo per evento."""

    def get(self, request):
        tab = request.GET.get("tab", "attivi")
        events_payments = _event_payments(_events_for_tab(tab), saved_only=tab == "storico")
        rows = _export_rows(events_payments)
        logger.info(f"Export Excel pagamenti ({tab}): {len(rows)} righe")
        return excel_response(
            [
                ExcelSheet(
                    "Pagamenti",
                    rows,
                    headers=EXPORT_HEADERS,
                    currency_columns=["Importo"],
                    total_columns=["Importo"],
                ),
                ExcelSheet(
                    "Riepilogo",
                    _summary_rows(events_payments),
                    headers=SUMMARY_HEADERS,
                    currency_columns=["Totale", "Pagato", "Da pagare"],
                    total_columns=["Persone", "Totale", "Pagato", "Da pagare"],
                ),
            ],
            filename=f"pagamenti_{tab}",
        )


class PaymentExportPDFView(View):
    """Una sezione per evento; con pk solo l'evento indicato."""

    def get(self, request, pk=None):
        if pk is not None:
            event = get_object_or_404(Event.objects.prefetch_related("payments__person__category"), pk=pk)
            events_payments = _event_payments([event])
            filename = f"pagamenti_{event.date:%Y%m%d}"
        else:
            tab = request.GET.get("tab", "attivi")
            events_payments = _event_payments(_events_for_tab(tab), saved_only=tab == "storico")
            filename = f"pagamenti_{tab}"

        stats = payment_summary(events_payments).stats
        content = build_report_pdf(
            "Pagamenti Staff",
            PDF_HEADERS,
            [_pdf_section(entry) for entry in events_payments],
            subtitle=f"Totale R$ {stats.total_amount:.2f}, pagato R$ {stats.paid_amount:.2f}",
        )
        return pdf_response(content, filename)
