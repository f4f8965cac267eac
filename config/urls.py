"""
URL configuration for Metri project.

Tutto il gestionale vive sotto /central/ (protetto dal cookie di sessione);
i cardapi condivisi con gli ospiti sono pubblici e raggiungibili solo tramite token.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from access.views import landing_view
from events.views import DashboardView

central_patterns = [
    # Dashboard centrale
    path("", DashboardView.as_view(), name="dashboard"),
    path("eventos/", include("events.urls")),
    path("equipe/", include("team.urls")),
    path("pagamentos/", include("payments.urls")),
    path("cardapios/", include("menus.urls")),
    path("docs/", include("documents.urls")),
]

urlpatterns = [
    # Root - landing (redirect ad accesso o dashboard)
    path("", landing_view, name="landing"),
    # Accesso con password
    path("", include("access.urls")),
    # Gestionale protetto
    path("central/", include(central_patterns)),
    # Cardapi pubblici (token di condivisione)
    path("eventos/", include("menus.public_urls")),
    # Admin
    path("admin/", admin.site.urls),
    # Select2 (widget AJAX)
    path("select2/", include("django_select2.urls")),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
