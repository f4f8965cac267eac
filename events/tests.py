"""
Tests per app events.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from django.test import TestCase
from django.urls import reverse

from core.dates import today
from core.testing import authenticate_client
from team.models import Category, Person

from . import status as event_status
from .models import Event, EventStaff, EventTeam
from .services import EventService, EventTeamService, normalize_staff_assignments
from .tasks import finalize_past_events

TODAY = date(2025, 3, 15)


@dataclass
class FakeEvent:
    date: object
    status: str = event_status.PLANNED


class AutoStatusTestCase(TestCase):
    """Stato automatico (funzioni pure, nessun DB)"""

    def test_closed_statuses_are_kept(self):
        past = date(2025, 1, 1)
        self.assertEqual(event_status.get_auto_status(FakeEvent(past, event_status.CANCELLED), TODAY), event_status.CANCELLED)
        self.assertEqual(event_status.get_auto_status(FakeEvent(date(2026, 1, 1), event_status.FINISHED), TODAY), event_status.FINISHED)

    def test_future_today_past(self):
        self.assertEqual(event_status.get_auto_status(FakeEvent(date(2025, 3, 16)), TODAY), event_status.PLANNED)
        self.assertEqual(event_status.get_auto_status(FakeEvent(TODAY), TODAY), event_status.IN_PROGRESS)
        self.assertEqual(event_status.get_auto_status(FakeEvent(date(2025, 3, 14)), TODAY), event_status.FINISHED)

    def test_future_in_progress_is_kept(self):
        event = FakeEvent(date(2025, 4, 1), event_status.IN_PROGRESS)
        self.assertEqual(event_status.get_auto_status(event, TODAY), event_status.IN_PROGRESS)

    def test_string_dates_compare_by_day(self):
        self.assertEqual(event_status.get_auto_status(FakeEvent("2025-03-15"), TODAY), event_status.IN_PROGRESS)

    def test_should_auto_finalize(self):
        self.assertTrue(event_status.should_auto_finalize(FakeEvent(date(2025, 3, 1)), TODAY))
        self.assertFalse(event_status.should_auto_finalize(FakeEvent(TODAY), TODAY))
        self.assertFalse(
            event_status.should_auto_finalize(FakeEvent(date(2025, 3, 1), event_status.CANCELLED), TODAY)
        )

    def test_update_events_status_does_not_mutate(self):
        original = FakeEvent(date(2025, 3, 1))
        updated = event_status.update_events_status([original], TODAY)

        self.assertEqual(updated[0].status, event_status.FINISHED)
        self.assertEqual(original.status, event_status.PLANNED)

    def test_status_display_fallback(self):
        self.assertEqual(event_status.get_status_display("boh").label, "Pianificato")
        self.assertEqual(event_status.get_status_display(event_status.CANCELLED).color, "danger")

    def test_tabs(self):
        open_future = FakeEvent(date(2025, 3, 20))
        closed = FakeEvent(date(2025, 3, 20), event_status.FINISHED)

        self.assertTrue(event_status.is_active_event(open_future, TODAY))
        self.assertTrue(event_status.is_history_event(closed, TODAY))
        self.assertTrue(event_status.is_relevant_for_payments(open_future))
        self.assertTrue(event_status.is_relevant_for_payment_history(closed))


class EventServiceTestCase(TestCase):
    """Test per EventService"""

    def setUp(self):
        self.garcom = Category.objects.create(name="Garçom")
        self.cozinha = Category.objects.create(name="Cozinha")

    def test_create_with_staff(self):
        result = EventService.create(
            title="Formatura",
            date=date(2030, 5, 10),
            staff_assignments=[
                {"category_id": self.garcom.pk, "count": 4},
                {"category_id": self.cozinha.pk, "count": 0},
            ],
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.value.staff_assignments, [{"category_id": self.garcom.pk, "count": 4}])
        self.assertEqual(result.value.total_staff_needed, 4)

    def test_create_requires_title(self):
        result = EventService.create(title="  ", date=date(2030, 5, 10))

        self.assertFalse(result.ok)
        self.assertEqual(Event.objects.count(), 0)

    def test_end_before_start_rejected(self):
        from datetime import time

        result = EventService.create(
            title="Festa", date=date(2030, 5, 10), start_time=time(20, 0), end_time=time(18, 0)
        )
        self.assertFalse(result.ok)

    def test_duplicate_category_rejected(self):
        with self.assertRaises(Exception):
            normalize_staff_assignments([
                {"category_id": self.garcom.pk, "count": 1},
                {"category_id": self.garcom.pk, "count": 2},
            ])

    def test_negative_staff_writes_nothing(self):
        result = EventService.create(
            title="Festa",
            date=date(2030, 5, 10),
            staff_assignments=[{"category_id": self.garcom.pk, "count": -1}],
        )

        self.assertFalse(result.ok)
        self.assertEqual(Event.objects.count(), 0)

    def test_non_numeric_staff_count_fails(self):
        result = EventService.create(
            title="Festa",
            date=date(2030, 1, 1),
            staff_assignments=[{"category_id": self.garcom.pk, "count": "tre"}],
        )

        self.assertFalse(result.ok)
        self.assertIn("Quantità non valida", result.error)
        self.assertEqual(Event.objects.count(), 0)

    def test_update_replaces_staff(self):
        event = EventService.create(
            title="Festa", date=date(2030, 5, 10),
            staff_assignments=[{"category_id": self.garcom.pk, "count": 2}],
        ).value

        EventService.update(event.pk, staff_assignments=[{"category_id": self.cozinha.pk, "count": 1}])

        self.assertEqual(list(EventStaff.objects.values_list("category_id", flat=True)), [self.cozinha.pk])

    def test_update_without_changes_fails(self):
        event = Event.objects.create(title="Festa", date=date(2030, 5, 10))
        self.assertFalse(EventService.update(event.pk))

    def test_set_status_validates(self):
        event = Event.objects.create(title="Festa", date=date(2030, 5, 10))

        self.assertFalse(EventService.set_status(event.pk, "sconosciuto"))
        self.assertTrue(EventService.set_status(event.pk, event_status.CANCELLED))

    def test_finalize_past_events(self):
        Event.objects.create(title="Passato", date=date(2025, 3, 1))
        Event.objects.create(title="Annullato", date=date(2025, 3, 1), status=event_status.CANCELLED)
        Event.objects.create(title="Futuro", date=date(2025, 4, 1))

        result = EventService.finalize_past_events(today=TODAY)

        self.assertEqual(result.value, 1)
        self.assertEqual(Event.objects.get(title="Passato").status, event_status.FINISHED)
        self.assertEqual(Event.objects.get(title="Annullato").status, event_status.CANCELLED)

    def test_finalize_task(self):
        Event.objects.create(title="Ieri", date=today() - timedelta(days=1))

        self.assertEqual(finalize_past_events(), {"finalized": 1})


class EventTeamServiceTestCase(TestCase):
    def setUp(self):
        category = Category.objects.create(name="Garçom")
        self.ana = Person.objects.create(name="Ana", category=category)
        self.bia = Person.objects.create(name="Bia", category=category)
        self.event = Event.objects.create(title="Festa", date=date(2030, 5, 10))

    def test_save_event_team_replaces(self):
        EventTeamService.save_event_team(self.event.pk, [self.ana.pk])
        result = EventTeamService.save_event_team(self.event.pk, [self.bia.pk, self.bia.pk])

        self.assertTrue(result.ok)
        self.assertEqual(list(EventTeam.objects.values_list("person_id", flat=True)), [self.bia.pk])

    def test_add_person_twice_fails(self):
        EventTeamService.add_person(self.event.pk, self.ana.pk)
        self.assertFalse(EventTeamService.add_person(self.event.pk, self.ana.pk))

    def test_remove_person(self):
        EventTeamService.add_person(self.event.pk, self.ana.pk)

        self.assertTrue(EventTeamService.remove_person(self.event.pk, self.ana.pk).value)
        self.assertFalse(EventTeamService.remove_person(self.event.pk, self.ana.pk).value)


class EventViewsTestCase(TestCase):
    """Test views eventi e dashboard"""

    def setUp(self):
        authenticate_client(self.client)
        self.category = Category.objects.create(name="Garçom")
        self.event = Event.objects.create(title="Aniversário", date=today() + timedelta(days=3))

    def test_dashboard_requires_session(self):
        self.client.cookies.clear()
        response = self.client.get(reverse("dashboard"))
        self.assertRedirects(response, "/access/", fetch_redirect_response=False)

    def test_dashboard(self):
        response = self.client.get(reverse("dashboard"))

        self.assertEqual(response.status_code, 200)
        self.assertIn(self.event, response.context["upcoming_events"])

    def test_list_tabs(self):
        Event.objects.create(title="Vecchio", date=today() - timedelta(days=10))

        active = self.client.get(reverse("events:event_list"))
        history = self.client.get(reverse("events:event_list") + "?tab=storico")

        self.assertContains(active, "Aniversário")
        self.assertNotContains(active, "Vecchio")
        self.assertContains(history, "Vecchio")

    def test_list_search_matches_every_word(self):
        Event.objects.create(title="Casamento", location="Sítio Silva", date=today() + timedelta(days=5))

        response = self.client.get(reverse("events:event_list") + "?q=casamento silva")

        self.assertEqual([event.title for event in response.context["events"]], ["Casamento"])
        self.assertEqual(response.context["search_query"], "casamento silva")

    def test_list_ignores_unknown_status(self):
        Event.objects.create(title="Em curso", status=event_status.IN_PROGRESS, date=today() + timedelta(days=1))

        filtered = self.client.get(reverse("events:event_list") + "?status=in_progress")
        unknown = self.client.get(reverse("events:event_list") + "?status=boh")

        self.assertEqual([event.title for event in filtered.context["events"]], ["Em curso"])
        self.assertEqual(filtered.context["active_filters"], {"status": "in_progress"})
        self.assertEqual(len(unknown.context["events"]), 2)
        self.assertEqual(unknown.context["active_filters"], {})

    def test_detail(self):
        response = self.client.get(self.event.get_absolute_url())
        self.assertEqual(response.status_code, 200)

    def test_create_via_form(self):
        response = self.client.post(reverse("events:event_create"), {
            "title": "Batizado",
            "date": "2030-06-01",
            "status": event_status.PLANNED,
            f"staff_{self.category.pk}": "3",
        })

        event = Event.objects.get(title="Batizado")
        self.assertRedirects(response, event.get_absolute_url(), fetch_redirect_response=False)
        self.assertEqual(event.total_staff_needed, 3)

    def test_status_view(self):
        self.client.post(reverse("events:event_status", args=[self.event.pk]), {"status": event_status.CANCELLED})

        self.event.refresh_from_db()
        self.assertEqual(self.event.status, event_status.CANCELLED)
