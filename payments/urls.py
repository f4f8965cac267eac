from django.urls import path

from . import views

app_name = "payments"

urlpatterns = [
    path("", views.PaymentDashboardView.as_view(), name="dashboard"),
    path("export/excel/", views.PaymentExportExcelView.as_view(), name="export_excel"),
    path("export/pdf/", views.PaymentExportPDFView.as_view(), name="export_pdf"),
    path("evento/<uuid:pk>/", views.EventPaymentsView.as_view(), name="event_payments"),
    path("evento/<uuid:pk>/toggle/", views.PaymentToggleView.as_view(), name="toggle"),
    path("evento/<uuid:pk>/genera/", views.GenerateEventPaymentsView.as_view(), name="generate"),
    path("evento/<uuid:pk>/pdf/", views.PaymentExportPDFView.as_view(), name="event_pdf"),
    path("<uuid:pk>/modifica/", views.PaymentUpdateView.as_view(), name="update"),
    path("<uuid:pk>/importo/", views.PaymentAmountView.as_view(), name="update_amount"),
    path("<uuid:pk>/elimina/", views.PaymentDeleteView.as_view(), name="delete"),
]
