"""
URL Configuration per l'app access
"""

from django.urls import path
from . import views

app_name = "access"

urlpatterns = [
    path("access/", views.access_view, name="access"),
    path("logout/", views.logout_view, name="logout"),
]
