from django.contrib import admin

from . import status as event_status
from .models import Event, EventStaff, EventTeam


class EventStaffInline(admin.TabularInline):
    model = EventStaff
    extra = 0
    fields = ["category", "quantity"]


class EventTeamInline(admin.TabularInline):
    model = EventTeam
    extra = 0
    autocomplete_fields = ["person"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "date", "start_time", "location", "status", "guest_count"]
    list_filter = ["status", "date"]
    search_fields = ["title", "location"]
    date_hierarchy = "date"
    inlines = [EventStaffInline, EventTeamInline]
    actions = ["mark_finished"]

    @admin.action(description="Segna come concluso")
    def mark_finished(self, request, queryset):
        updated = queryset.update(status=event_status.FINISHED)
        self.message_user(request, f"{updated} eventi conclusi.")
