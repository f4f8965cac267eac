from django.contrib import admin

from .models import BudgetTemplate, ContractTemplate, Document, FilledBudget, FilledContract


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "event", "file_size", "created_at"]
    list_filter = ["category"]
    search_fields = ["name", "description"]


@admin.register(ContractTemplate, BudgetTemplate)
class PdfTemplateAdmin(admin.ModelAdmin):
    list_display = ["name", "is_active", "created_at"]
    list_filter = ["is_active"]
    readonly_fields = ["fields_schema"]


@admin.register(FilledContract, FilledBudget)
class FilledDocumentAdmin(admin.ModelAdmin):
    list_display = ["__str__", "event", "status", "created_at"]
    list_filter = ["status"]
    readonly_fields = ["generated_pdf"]
