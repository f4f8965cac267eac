"""
URLs per app team.
"""

from django.urls import path
from . import views

app_name = "team"

urlpatterns = [
    # Categorie
    path("", views.CategoryListView.as_view(), name="category_list"),
    path("categorie/nuova/", views.CategoryCreateView.as_view(), name="category_create"),
    path("categorie/ricalcola/", views.CategoryRecalculateView.as_view(), name="category_recalculate"),
    path("categorie/<uuid:pk>/", views.CategoryDetailView.as_view(), name="category_detail"),
    path("categorie/<uuid:pk>/modifica/", views.CategoryUpdateView.as_view(), name="category_update"),
    path("categorie/<uuid:pk>/elimina/", views.CategoryDeleteView.as_view(), name="category_delete"),

    # Persone
    path("persone/nuova/", views.PersonCreateView.as_view(), name="person_create"),
    path("persone/<uuid:pk>/modifica/", views.PersonUpdateView.as_view(), name="person_update"),
    path("persone/<uuid:pk>/elimina/", views.PersonDeleteView.as_view(), name="person_delete"),
]
