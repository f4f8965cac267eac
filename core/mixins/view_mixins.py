"""
Mixin per le Class-Based Views di Metri.

Le view che salvano passano dai servizi (ServiceResult): ServiceFormMixin
per i form HTML, JSONResponseMixin per gli endpoint usati via fetch.
"""

from django.contrib import messages
from django.db.models import Q
from django.http import HttpResponseRedirect, JsonResponse


# ============================================================================
# JSON MIXINS
# ============================================================================


class JSONResponseMixin:
    """Risposte JSON nel formato {"success": bool, "error": str}."""

    def render_to_json_response(self, context, **response_kwargs):
        return JsonResponse(context, **response_kwargs)

    def render_to_json_error(self, error_message, status=400):
        return JsonResponse({"success": False, "error": error_message}, status=status)

    def render_service_result(self, result, **extra):
        """Traduce un ServiceResult in JSON (400 se fallito)."""
        if not result:
            return self.render_to_json_error(result.error)
        return self.render_to_json_response({"success": True, **extra})


# ============================================================================
# FORM MIXINS
# ============================================================================


class FormInvalidMessageMixin:
    """Messaggio d'errore generico quando il form non valida."""

    error_message = "Errore nel salvataggio. Controlla i campi."

    def form_invalid(self, form):
        messages.error(self.request, self.error_message)
        return super().form_invalid(form)


class ServiceFormMixin:
    """
    Salva il form tramite un servizio che ritorna ServiceResult.

    La view implementa `perform_service(form)`; se il risultato è un
    fallimento il form viene rimostrato con il messaggio d'errore,
    altrimenti `self.object` diventa il valore ritornato.

    Usage:
        class PersonCreateView(ServiceFormMixin, CreateView):
            success_message = "Persona creata"

            def perform_service(self, form):
                return PersonService.create(**form.cleaned_data)
    """

    success_message = ""

    def perform_service(self, form):
        raise NotImplementedError

    def form_valid(self, form):
        result = self.perform_service(form)
        if not result:
            messages.error(self.request, result.error)
            return self.form_invalid(form)

        self.object = result.value
        if self.success_message:
            messages.success(self.request, self.success_message)
        return HttpResponseRedirect(self.get_success_url())


# ============================================================================
# LISTE: PAGINAZIONE, FILTRI, RICERCA
# ============================================================================


class CustomPaginationMixin:
    """
    Pagina di dimensione variabile (?page_size=50), limitata a max_page_size.
    Valori non numerici o non positivi ricadono su default_page_size.
    """

    default_page_size = 20
    max_page_size = 100
    page_size_query_param = "page_size"

    def get_paginate_by(self, queryset):
        try:
            page_size = int(self.request.GET.get(self.page_size_query_param, ""))
        except ValueError:
            return self.default_page_size
        if page_size < 1:
            return self.default_page_size
        return min(page_size, self.max_page_size)


class FilterMixin:
    """
    Filtri esatti da GET (?status=planned).

    Per i campi con choices un valore sconosciuto viene ignorato invece di
    svuotare la lista. I filtri applicati finiscono nel contesto come
    `active_filters`.
    """

    filter_fields = []

    def _allowed_values(self, field_name):
        field = self.model._meta.get_field(field_name)
        if not field.choices:
            return None
        return {str(value) for value, _label in field.flatchoices}

    def get_active_filters(self):
        active = {}
        for field_name in self.filter_fields:
            value = self.request.GET.get(field_name, "").strip()
            if not value:
                continue
            allowed = self._allowed_values(field_name)
            if allowed is not None and value not in allowed:
                continue
            active[field_name] = value
        return active

    def get_queryset(self):
        return super().get_queryset().filter(**self.get_active_filters())

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["active_filters"] = self.get_active_filters()
        return context


class SearchMixin:
    """
    Ricerca testuale (?q=...) su search_fields.

    Ogni parola deve comparire in almeno uno dei campi: "festa silva"
    trova "Festa di compleanno" con location "Casa Silva".
    """

    search_fields = []
    search_query_param = "q"

    def get_search_query(self):
        return self.request.GET.get(self.search_query_param, "").strip()

    def get_queryset(self):
        queryset = super().get_queryset()
        query = self.get_search_query()
        if not query or not self.search_fields:
            return queryset

        for term in query.split():
            term_filter = Q()
            for field in self.search_fields:
                term_filter |= Q(**{f"{field}__icontains": term})
            queryset = queryset.filter(term_filter)
        return queryset.distinct()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["search_query"] = self.get_search_query()
        return context


# ============================================================================
# BREADCRUMB
# ============================================================================


class BreadcrumbMixin:
    """
    Breadcrumb come lista di (etichetta, url); url None = pagina corrente.
    Le view con titoli dinamici sovrascrivono get_breadcrumbs().
    """

    breadcrumbs = []

    def get_breadcrumbs(self):
        return list(self.breadcrumbs)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["breadcrumbs"] = self.get_breadcrumbs()
        return context
