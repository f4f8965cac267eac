"""
URL pubblici dei cardapi condivisi: /eventos/<evento>/cardapio/<token>/
"""

from django.urls import path

from . import views

app_name = "menus_public"

urlpatterns = [
    path("<uuid:event_id>/cardapio/<str:token>/", views.GuestMenuView.as_view(), name="guest_menu"),
    path("<uuid:event_id>/cardapio/<str:token>/toggle/", views.GuestToggleView.as_view(), name="guest_toggle"),
]
