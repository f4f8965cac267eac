from django.urls import path

from . import views

app_name = "documents"

urlpatterns = [
    path("", views.DocumentListView.as_view(), name="document_list"),
    path("carica/", views.DocumentUploadView.as_view(), name="document_upload"),
    path("<uuid:pk>/scarica/", views.DocumentDownloadView.as_view(), name="document_download"),
    path("<uuid:pk>/elimina/", views.DocumentDeleteView.as_view(), name="document_delete"),
    # Template
    path("template/contratti/nuovo/", views.ContractTemplateUploadView.as_view(), name="contract_template_upload"),
    path("template/contratti/<uuid:pk>/attiva/", views.ContractTemplateToggleView.as_view(), name="contract_template_toggle"),
    path("template/orcamenti/nuovo/", views.BudgetTemplateUploadView.as_view(), name="budget_template_upload"),
    path("template/orcamenti/<uuid:pk>/attiva/", views.BudgetTemplateToggleView.as_view(), name="budget_template_toggle"),
    # Contratti
    path("contratti/nuovo/", views.ContractCreateView.as_view(), name="contract_create"),
    path("contratti/<uuid:pk>/", views.ContractDetailView.as_view(), name="contract_detail"),
    path("contratti/<uuid:pk>/modifica/", views.ContractUpdateView.as_view(), name="contract_update"),
    path("contratti/<uuid:pk>/genera/", views.ContractGenerateView.as_view(), name="contract_generate"),
    path("contratti/<uuid:pk>/stato/", views.ContractStatusView.as_view(), name="contract_status"),
    path("contratti/<uuid:pk>/pdf/", views.ContractDownloadView.as_view(), name="contract_download"),
    path("contratti/<uuid:pk>/elimina/", views.ContractDeleteView.as_view(), name="contract_delete"),
    # Orcamenti
    path("orcamenti/nuovo/", views.BudgetCreateView.as_view(), name="budget_create"),
    path("orcamenti/<uuid:pk>/", views.BudgetDetailView.as_view(), name="budget_detail"),
    path("orcamenti/<uuid:pk>/modifica/", views.BudgetUpdateView.as_view(), name="budget_update"),
    path("orcamenti/<uuid:pk>/genera/", views.BudgetGenerateView.as_view(), name="budget_generate"),
    path("orcamenti/<uuid:pk>/stato/", views.BudgetStatusView.as_view(), name="budget_status"),
    path("orcamenti/<uuid:pk>/pdf/", views.BudgetDownloadView.as_view(), name="budget_download"),
    path("orcamenti/<uuid:pk>/elimina/", views.BudgetDeleteView.as_view(), name="budget_delete"),
]
