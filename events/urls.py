from django.urls import path

from . import views

app_name = "events"

urlpatterns = [
    path("", views.EventListView.as_view(), name="event_list"),
    path("nuovo/", views.EventCreateView.as_view(), name="event_create"),
    path("concludi-passati/", views.FinalizePastEventsView.as_view(), name="finalize_past"),
    path("<uuid:pk>/", views.EventDetailView.as_view(), name="event_detail"),
    path("<uuid:pk>/modifica/", views.EventUpdateView.as_view(), name="event_update"),
    path("<uuid:pk>/elimina/", views.EventDeleteView.as_view(), name="event_delete"),
    path("<uuid:pk>/squadra/", views.EventTeamView.as_view(), name="event_team"),
    path("<uuid:pk>/stato/", views.EventStatusView.as_view(), name="event_status"),
]
