"""
Views per app menus.

Gestionale: CRUD cardapi, import da testo, collegamento agli eventi.
Pubbliche: pagina di scelta per gli ospiti (accesso solo col token).
"""

import logging

from django.contrib import messages
from django.shortcuts import get_object_or_404, redirect, render
from django.template.loader import render_to_string
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import CreateView, DeleteView, DetailView, FormView, ListView, UpdateView

from core.dates import format_date_extended
from core.mixins import (
    BreadcrumbMixin,
    FilterMixin,
    FormInvalidMessageMixin,
    JSONResponseMixin,
    SearchMixin,
    ServiceFormMixin,
)
from core.pdf_generator import PdfSection, build_report_pdf, pdf_response, render_html_pdf
from core.qr_code_generator import qr_code_data_uri
from events.models import Event

from .forms import (
    EventMenuLinkForm,
    GuestSelectionForm,
    MenuCategoryForm,
    MenuForm,
    MenuImportForm,
    MenuItemForm,
)
from .models import EventMenu, Menu, MenuCategory, MenuItem
from .services import EventMenuService, MenuCategoryService, MenuItemService, MenuService

logger = logging.getLogger(__name__)


# ============================================================================
# CARDAPI
# ============================================================================

class MenuListView(SearchMixin, FilterMixin, ListView):
    model = Menu
    template_name = "menus/menu_list.html"
    context_object_name = "menus"
    search_fields = ["name", "description"]
    filter_fields = ["status"]


class MenuDetailView(BreadcrumbMixin, DetailView):
    model = Menu
    template_name = "menus/menu_detail.html"
    context_object_name = "menu"

    def get_breadcrumbs(self):
        return [("Cardapi", reverse("menus:menu_list")), (self.object.name, None)]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["categories"] = self.object.categories.prefetch_related("items").order_by("order_index")
        context["category_form"] = MenuCategoryForm()
        return context


class MenuCreateView(ServiceFormMixin, FormInvalidMessageMixin, CreateView):
    model = Menu
    form_class = MenuForm
    template_name = "core/form.html"
    success_message = "Cardapio creato con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": "Nuovo Cardapio"}
        return context

    def perform_service(self, form):
        return MenuService.create(**form.cleaned_data)


class MenuUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = Menu
    form_class = MenuForm
    template_name = "core/form.html"
    success_message = "Cardapio aggiornato con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Modifica {self.object.name}"}
        return context

    def perform_service(self, form):
        return MenuService.update(self.object.pk, **form.cleaned_data)


class MenuDeleteView(DeleteView):
    model = Menu
    template_name = "core/confirm_delete.html"
    success_url = reverse_lazy("menus:menu_list")

    def form_valid(self, form):
        result = MenuService.delete(self.object.pk)
        if result:
            messages.success(self.request, f"Cardapio '{self.object.name}' eliminato.")
        else:
            messages.error(self.request, result.error)
        return redirect(self.success_url)


class MenuImportView(BreadcrumbMixin, FormView):
    """Import da testo: anteprima, poi conferma."""

    form_class = MenuImportForm
    template_name = "menus/menu_import.html"

    def get_breadcrumbs(self):
        return [("Cardapi", reverse("menus:menu_list")), ("Importa", None)]

    def form_valid(self, form):
        parsed = form.parsed
        if not form.cleaned_data.get("confirm"):
            return self.render_to_response(self.get_context_data(form=form, preview=parsed))

        result = MenuService.create_from_parsed(parsed, description=form.cleaned_data.get("description", ""))
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)

        messages.success(
            self.request,
            f"Cardapio '{result.value.name}' importato: {len(parsed.categories)} categorie, {parsed.item_count} piatti.",
        )
        return redirect(result.value.get_absolute_url())


# ============================================================================
# CATEGORIE E PIATTI
# ============================================================================

class MenuCategoryCreateView(View):
    def post(self, request, pk):
        form = MenuCategoryForm(request.POST)
        if form.is_valid():
            result = MenuCategoryService.create(pk, **form.cleaned_data)
            if result:
                messages.success(request, f"Categoria '{result.value.name}' aggiunta.")
            else:
                messages.error(request, result.error)
        else:
            messages.error(request, "Dati categoria non validi.")
        return redirect("menus:menu_detail", pk=pk)


class MenuCategoryUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = MenuCategory
    form_class = MenuCategoryForm
    template_name = "core/form.html"
    success_message = "Categoria aggiornata."

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Categoria {self.object.name}"}
        return context

    def perform_service(self, form):
        return MenuCategoryService.update(self.object.pk, **form.cleaned_data)

    def get_success_url(self):
        return self.object.menu.get_absolute_url()


class MenuCategoryDeleteView(View):
    def post(self, request, pk):
        category = get_object_or_404(MenuCategory, pk=pk)
        result = MenuCategoryService.delete(category.pk)
        if not result:
            messages.error(request, result.error)
        return redirect(category.menu.get_absolute_url())


class MenuItemCreateView(ServiceFormMixin, FormInvalidMessageMixin, CreateView):
    model = MenuItem
    form_class = MenuItemForm
    template_name = "core/form.html"
    success_message = "Piatto aggiunto."

    def dispatch(self, request, *args, **kwargs):
        self.category = get_object_or_404(MenuCategory, pk=kwargs["pk"])
        return super().dispatch(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Nuovo piatto - {self.category.name}"}
        return context

    def perform_service(self, form):
        return MenuItemService.create(self.category.pk, **form.cleaned_data)

    def get_success_url(self):
        return self.category.menu.get_absolute_url()


class MenuItemUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = MenuItem
    form_class = MenuItemForm
    template_name = "core/form.html"
    success_message = "Piatto aggiornato."

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Modifica {self.object.name}"}
        return context

    def perform_service(self, form):
        return MenuItemService.update(self.object.pk, **form.cleaned_data)

    def get_success_url(self):
        return self.object.category.menu.get_absolute_url()


class MenuItemDeleteView(View):
    def post(self, request, pk):
        item = get_object_or_404(MenuItem.objects.select_related("category__menu"), pk=pk)
        result = MenuItemService.delete(item.pk)
        if not result:
            messages.error(request, result.error)
        return redirect(item.category.menu.get_absolute_url())


# ============================================================================
# CARDAPIO DELL'EVENTO
# ============================================================================

SELECTION_HEADERS = ["Piatto", "Descrizione"]


def _selection_section(state):
    footer = ""
    if state.recommended_count:
        footer = f"Scelti {state.selected_count} su {state.recommended_count} consigliati"
    return PdfSection(
        heading=state.category.name,
        rows=[
            {"Piatto": item_state.item.name, "Descrizione": item_state.item.description}
            for item_state in state.items
            if item_state.selected
        ],
        footer=footer,
    )


class EventMenuView(BreadcrumbMixin, FormView):
    """Collegamento del cardapio, link condiviso con QR e riepilogo scelte."""

    form_class = EventMenuLinkForm
    template_name = "menus/event_menu.html"

    def dispatch(self, request, *args, **kwargs):
        self.event = get_object_or_404(Event, pk=kwargs["pk"])
        self.event_menu = EventMenu.objects.filter(event=self.event).select_related("menu").first()
        return super().dispatch(request, *args, **kwargs)

    def get_breadcrumbs(self):
        return [
            ("Eventi", reverse("events:event_list")),
            (self.event.title, self.event.get_absolute_url()),
            ("Cardapio", None),
        ]

    def get_initial(self):
        return {"menu": self.event_menu.menu if self.event_menu else None}

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["event"] = self.event
        context["event_menu"] = self.event_menu
        if self.event_menu:
            share_url = self.request.build_absolute_uri(self.event_menu.get_public_url())
            overview = EventMenuService.selection_overview(self.event_menu)
            context.update({
                "share_url": share_url,
                "qr_code": qr_code_data_uri(share_url),
                "overview": overview,
                "selected_total": sum(state.selected_count for state in overview),
            })
        return context

    def form_valid(self, form):
        result = EventMenuService.link_menu_to_event(self.event.pk, form.cleaned_data["menu"].pk)
        if result:
            messages.success(self.request, "Cardapio collegato. Condividi il link con il cliente.")
        else:
            messages.error(self.request, result.error)
        return redirect("menus:event_menu", pk=self.event.pk)


class EventMenuRegenerateTokenView(View):
    def post(self, request, pk):
        event_menu = get_object_or_404(EventMenu, event_id=pk)
        result = EventMenuService.regenerate_token(event_menu.pk)
        if result:
            messages.success(request, "Nuovo link generato: il precedente non è più valido.")
        else:
            messages.error(request, result.error)
        return redirect("menus:event_menu", pk=pk)


class EventMenuUnlinkView(View):
    """POST: scollega il cardapio dall'evento (scelte e link vengono eliminati)."""

    def post(self, request, pk):
        result = EventMenuService.unlink(pk)
        if result and result.value:
            messages.success(request, "Cardapio scollegato dall'evento.")
        elif not result:
            messages.error(request, result.error)
        return redirect("menus:event_menu", pk=pk)


class EventMenuSelectionsPDFView(View):
    """Riepilogo scelte come tabella (reportlab)."""

    def get(self, request, pk):
        event_menu = get_object_or_404(EventMenu.objects.select_related("event", "menu"), event_id=pk)
        sections = [_selection_section(state) for state in EventMenuService.selection_overview(event_menu)]
        content = build_report_pdf(
            f"Cardapio - {event_menu.event.title}",
            SELECTION_HEADERS,
            sections,
            subtitle=f"{event_menu.menu.name} - {format_date_extended(event_menu.event.date)}",
        )
        return pdf_response(content, f"cardapio_{event_menu.event.date:%Y%m%d}")


class EventMenuPrintView(View):
    """Scheda stampabile delle scelte (HTML -> PDF con xhtml2pdf)."""

    def get(self, request, pk):
        event_menu = get_object_or_404(EventMenu.objects.select_related("event", "menu"), event_id=pk)
        html = render_to_string("menus/selections_pdf.html", {
            "event": event_menu.event,
            "menu": event_menu.menu,
            "date_label": format_date_extended(event_menu.event.date),
            "overview": [state for state in EventMenuService.selection_overview(event_menu) if state.selected_count],
        })
        content = render_html_pdf(html)
        if content is None:
            messages.error(request, "Errore nella generazione del PDF.")
            return redirect("menus:event_menu", pk=pk)
        return pdf_response(content, f"scelte_{event_menu.event.date:%Y%m%d}", inline=True)


# ============================================================================
# PAGINA PUBBLICA OSPITI
# ============================================================================

def _invalid_link(request):
    return render(request, "menus/invalid_link.html", status=404)


class GuestMenuView(View):
    """
    Pagina di scelta per il cliente.

    Accessibile senza sessione: la coppia (evento, token) è l'unico controllo.
    """

    template_name = "menus/guest_menu.html"

    def get_event_menu(self, event_id, token):
        return EventMenuService.resolve_share(event_id, token)

    def get(self, request, event_id, token):
        event_menu = self.get_event_menu(event_id, token)
        if event_menu is None:
            return _invalid_link(request)
        return self.render_page(request, event_menu)

    def post(self, request, event_id, token):
        event_menu = self.get_event_menu(event_id, token)
        if event_menu is None:
            return _invalid_link(request)

        item_choices = MenuItem.objects.filter(category__menu=event_menu.menu).values_list("pk", "name")
        form = GuestSelectionForm(request.POST, item_choices=item_choices)
        if not form.is_valid():
            messages.error(request, "Selezione non valida.")
            return self.render_page(request, event_menu)

        result = EventMenuService.replace_selections(event_menu, form.cleaned_data["items"])
        if result:
            messages.success(request, "Scelte salvate, grazie!")
        else:
            messages.error(request, result.error)
        return redirect(event_menu.get_public_url())

    def render_page(self, request, event_menu):
        return render(request, self.template_name, {
            "event_menu": event_menu,
            "event": event_menu.event,
            "menu": event_menu.menu,
            "date_label": format_date_extended(event_menu.event.date),
            "overview": EventMenuService.selection_overview(event_menu),
        })


class GuestToggleView(JSONResponseMixin, View):
    """POST JSON: scelta/rimozione di un singolo piatto."""

    def post(self, request, event_id, token):
        event_menu = EventMenuService.resolve_share(event_id, token)
        if event_menu is None:
            return self.render_to_json_error("Link non valido", status=404)

        result = EventMenuService.toggle_selection(event_menu, request.POST.get("item", ""))
        if not result:
            return self.render_to_json_error(result.error)
        return self.render_to_json_response({"success": True, "selected": result.value})
