from django.urls import path

from . import views

app_name = "menus"

urlpatterns = [
    path("", views.MenuListView.as_view(), name="menu_list"),
    path("nuovo/", views.MenuCreateView.as_view(), name="menu_create"),
    path("importa/", views.MenuImportView.as_view(), name="menu_import"),
    path("<uuid:pk>/", views.MenuDetailView.as_view(), name="menu_detail"),
    path("<uuid:pk>/modifica/", views.MenuUpdateView.as_view(), name="menu_update"),
    path("<uuid:pk>/elimina/", views.MenuDeleteView.as_view(), name="menu_delete"),
    path("<uuid:pk>/categorie/nuova/", views.MenuCategoryCreateView.as_view(), name="category_create"),
    path("categorie/<uuid:pk>/modifica/", views.MenuCategoryUpdateView.as_view(), name="category_update"),
    path("categorie/<uuid:pk>/elimina/", views.MenuCategoryDeleteView.as_view(), name="category_delete"),
    path("categorie/<uuid:pk>/piatti/nuovo/", views.MenuItemCreateView.as_view(), name="item_create"),
    path("piatti/<uuid:pk>/modifica/", views.MenuItemUpdateView.as_view(), name="item_update"),
    path("piatti/<uuid:pk>/elimina/", views.MenuItemDeleteView.as_view(), name="item_delete"),
    # Cardapio di un evento (pk = evento)
    path("evento/<uuid:pk>/", views.EventMenuView.as_view(), name="event_menu"),
    path("evento/<uuid:pk>/nuovo-link/", views.EventMenuRegenerateTokenView.as_view(), name="event_menu_regenerate"),
    path("evento/<uuid:pk>/scollega/", views.EventMenuUnlinkView.as_view(), name="event_menu_unlink"),
    path("evento/<uuid:pk>/pdf/", views.EventMenuSelectionsPDFView.as_view(), name="event_menu_pdf"),
    path("evento/<uuid:pk>/stampa/", views.EventMenuPrintView.as_view(), name="event_menu_print"),
]
