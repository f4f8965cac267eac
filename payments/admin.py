from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ["person", "event", "amount", "is_paid", "paid_at"]
    list_filter = ["is_paid", "event__status"]
    search_fields = ["person__name", "event__title"]
    autocomplete_fields = ["event", "person"]
    readonly_fields = ["paid_at", "created_at", "updated_at"]
    date_hierarchy = "created_at"
