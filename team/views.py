"""
Views per app team: categorie di staff e persone.
"""

from django.contrib import messages
from django.db.models import Sum
from django.shortcuts import redirect
from django.urls import reverse, reverse_lazy
from django.views import View
from django.views.generic import ListView, DetailView, CreateView, UpdateView, DeleteView

from core.mixins import (
    BreadcrumbMixin,
    FormInvalidMessageMixin,
    SearchMixin,
    ServiceFormMixin,
)

from .forms import CategoryForm, PersonForm
from .models import Category, Person
from .services import CategoryService, PersonService, recalculate_all_category_counters


# ============================================================================
# CATEGORIE
# ============================================================================

class CategoryListView(SearchMixin, ListView):
    """Lista categorie con contatori membri."""

    model = Category
    template_name = "team/category_list.html"
    context_object_name = "categories"
    search_fields = ["name", "description"]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["total_people"] = Person.objects.count()
        return context


class CategoryDetailView(BreadcrumbMixin, DetailView):
    """Dettaglio categoria con elenco persone."""

    model = Category
    template_name = "team/category_detail.html"
    context_object_name = "category"

    def get_breadcrumbs(self):
        return [
            ("Categorie", reverse("team:category_list")),
            (self.object.name, None),
        ]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        people = self.object.people.order_by("name")
        context["people"] = people
        context["total_value"] = people.aggregate(total=Sum("value"))["total"] or 0
        return context


class CategoryCreateView(ServiceFormMixin, FormInvalidMessageMixin, CreateView):
    model = Category
    form_class = CategoryForm
    template_name = "core/form.html"
    success_message = "Categoria creata con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {
            "title": "Nuova Categoria",
            "subtitle": "Funzione dello staff (es. garçom, cozinha)",
        }
        return context

    def perform_service(self, form):
        return CategoryService.create(**form.cleaned_data)

    def get_success_url(self):
        return self.object.get_absolute_url()


class CategoryUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = Category
    form_class = CategoryForm
    template_name = "core/form.html"
    success_message = "Categoria aggiornata con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {
            "title": f"Modifica Categoria {self.object.name}",
        }
        return context

    def perform_service(self, form):
        return CategoryService.update(self.object.pk, **form.cleaned_data)

    def get_success_url(self):
        return self.object.get_absolute_url()


class CategoryDeleteView(DeleteView):
    """Eliminazione categoria (le persone vengono eliminate in cascata)."""

    model = Category
    template_name = "core/confirm_delete.html"
    success_url = reverse_lazy("team:category_list")

    def form_valid(self, form):
        result = CategoryService.delete(self.object.pk)
        if result:
            messages.success(self.request, f"Categoria {self.object.name} eliminata.")
        else:
            messages.error(self.request, result.error)
        return redirect(self.success_url)


class CategoryRecalculateView(View):
    """Ricalcola tutti i contatori membri."""

    def post(self, request):
        total = recalculate_all_category_counters()
        messages.success(request, f"Contatori ricalcolati per {total} categorie.")
        return redirect("team:category_list")


# ============================================================================
# PERSONE
# ============================================================================

class PersonCreateView(ServiceFormMixin, FormInvalidMessageMixin, CreateView):
    model = Person
    form_class = PersonForm
    template_name = "core/form.html"
    success_message = "Persona creata con successo!"

    def get_initial(self):
        initial = super().get_initial()
        category_id = self.request.GET.get("category")
        if category_id:
            initial["category"] = category_id
        return initial

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": "Nuova Persona"}
        return context

    def perform_service(self, form):
        return PersonService.create(**form.cleaned_data)

    def get_success_url(self):
        return self.object.category.get_absolute_url()


class PersonUpdateView(ServiceFormMixin, FormInvalidMessageMixin, UpdateView):
    model = Person
    form_class = PersonForm
    template_name = "core/form.html"
    success_message = "Persona aggiornata con successo!"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form_config"] = {"title": f"Modifica {self.object.name}"}
        return context

    def perform_service(self, form):
        return PersonService.update(self.object.pk, **form.cleaned_data)

    def get_success_url(self):
        return self.object.category.get_absolute_url()


class PersonDeleteView(DeleteView):
    model = Person
    template_name = "core/confirm_delete.html"

    def form_valid(self, form):
        category_url = self.object.category.get_absolute_url()
        result = PersonService.delete(self.object.pk)
        if result:
            messages.success(self.request, f"{self.object.name} eliminato/a.")
        else:
            messages.error(self.request, result.error)
        return redirect(category_url)
