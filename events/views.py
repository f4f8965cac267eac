"""
Views per app events: dashboard centrale, CRUD eventi, squadra e stato.
"""

import logging
from datetime import timedelta

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import CreateView, DeleteView, DetailView, FormView, ListView, TemplateView, UpdateView

from core.dates import format_date_with_weekday, today
from core.mixins import (
    BreadcrumbMixin,
    FilterMixin,
    FormInvalidMessageMixin,
    SearchMixin,
    ServiceFormMixin,
)
from menus.models import EventMenu
from payments.aggregation import EventPayments, build_event_payment_lines, payment_summary
from team.models import Category, Person

from . import status as event_status
from .forms import EventForm, EventStatusForm, EventTeamForm
from .models import Event
from .services import EventService, EventTeamService

logger = logging.getLogger(__name__)


# ============================================================================
# DASHBOARD
# ============================================================================

class DashboardView(TemplateView):
    """Pagina principale del gestionale."""

    template_name = "events/dashboard.html"
    upcoming_days = 30

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        reference = today()

        active = list(
            Event.objects.active(reference)
            .filter(date__lte=reference + timedelta(days=self.upcoming_days))
            .order_by("date", "start_time")
        )
        payable = Event.objects.relevant_for_payments().prefetch_related("payments")
        summary = payment_summary(
            EventPayments(event=event, lines=build_event_payment_lines(event)) for event in payable
        )

        context.update({
            "today_label": format_date_with_weekday(reference),
            "today_events": [event for event in active if event.date == reference],
            "upcoming_events": [event for event in active if event.date > reference],
            "payment_stats": summary.stats,
            "category_count": Category.objects.count(),
            "people_count": Person.objects.count(),
            "to_finalize_count": Event.objects.to_finalize(reference).count(),
        })
        return context


# ============================================================================
# EVENTI
# ============================================================================

class EventListView(SearchMixin, FilterMixin, ListView):
    """Lista eventi con tab attivi / storico."""

    model = Event
    template_name = "events/event_list.html"
    context_object_name = "events"
    search_fields = ["title", "location", "description"]
    filter_fields = ["status"]
    paginate_by = 25

    def get_tab(self):
        return "storico" if self.request.GET.get("tab") == "storico" else "attivi"

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.get_tab() == "storico":
            return queryset.history().order_by("-date", "start_time")
        return queryset.active().order_by("date", "start_time")

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["tab"] = self.get_tab()
        context["status_choices"] = event_status.STATUS_CHOICES
        return context


class EventDetailView(BreadcrumbMixin, DetailView):
    model = Event
    template_name = "events/event_detail.html"
    context_object_name = "event"

    def get_breadcrumbs(self):
        return [
            ("Eventi", reverse("events:event_list")),
            (self.object.title, None),
        ]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        event = self.object
        entry = EventPayments(event=event, lines=build_event_payment_lines(event))
        context.update({
            "staff": event.staff.select_related("category"),
            "team": EventTeamService.get_event_team(event.pk).value or [],
            "payment_stats": entry.stats,
            "event_menu": EventMenu.objects.filter(event=event).select_related("menu").first(),
            "status_form": EventStatusForm(initial={"status": event.status}),
            "date_label": format_date_with_weekday(event.date),
        })
        return context


class EventCreateView(ServiceFormMixin, FormInvalidMessageMixin, CreateView):
    model = Event
    form_class = EventForm
    template_name = "core/form.html"
    success_message = "Evento creato con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": "Nuovo Evento"}
        return context

    def perform_service(self, form):
        return EventService.create(staff_assignments=form.staff_assignments(), **form.event_data())


class EventUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = Event
    form_class = EventForm
    template_name = "core/form.html"
    success_message = "Evento aggiornato con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Modifica {self.object.title}"}
        return context

    def perform_service(self, form):
        return EventService.update(
            self.object.pk, staff_assignments=form.staff_assignments(), **form.event_data()
        )


class EventDeleteView(DeleteView):
    model = Event
    template_name = "core/confirm_delete.html"
    success_url = reverse_lazy("events:event_list")

    def form_valid(self, form):
        result = EventService.delete(self.object.pk)
        if result:
            messages.success(self.request, f"Evento '{self.object.title}' eliminato.")
            return redirect(self.success_url)
        messages.error(self.request, result.error)
        return redirect(self.object.get_absolute_url())


class EventTeamView(BreadcrumbMixin, FormView):
    """Assegnazione della squadra concreta all'evento."""

    form_class = EventTeamForm
    template_name = "core/form.html"

    def dispatch(self, request, *args, **kwargs):
        self.event = get_object_or_404(Event, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get_breadcrumbs(self):
        return [
            ("Eventi", reverse("events:event_list")),
            (self.event.title, self.event.get_absolute_url()),
            ("Squadra", None),
        ]

    def get_initial(self):
        return {"people": Person.objects.filter(event_teams__event=self.event)}

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {
            "title": f"Squadra - {self.event.title}",
            "subtitle": f"{self.event.total_staff_needed} persone richieste dal fabbisogno staff",
        }
        return context

    def form_valid(self, form):
        people = form.cleaned_data["people"]
        result = EventTeamService.save_event_team(self.event.pk, [person.pk for person in people])
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)
        messages.success(self.request, f"Squadra salvata: {len(result.value)} persone.")
        return redirect(self.event.get_absolute_url())


class EventStatusView(View):
    """POST: cambia lo stato salvato dell'evento."""

    def post(self, request, pk):
        form = EventStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Stato non valido.")
            return redirect("events:event_detail", pk=pk)

        result = EventService.set_status(pk, form.cleaned_data["status"])
        if result:
            messages.success(request, f"Stato aggiornato: {result.value.status_display.label}")
        else:
            messages.error(request, result.error)
        return redirect("events:event_detail", pk=pk)


class FinalizePastEventsView(View):
    """POST: esegue subito la conclusione degli eventi passati."""

    def post(self, request):
        result = EventService.finalize_past_events()
        if result:
            messages.success(request, f"Eventi conclusi: {result.value}")
        else:
            messages.error(request, result.error)
        return redirect("dashboard")
