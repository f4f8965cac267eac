"""
Tests per app payments.
"""

from datetime import timedelta
from decimal import Decimal
from io import BytesIO

from django.test import TestCase
from django.urls import reverse
from openpyxl import load_workbook

from core.dates import today
from core.excel_generator import XLSX_CONTENT_TYPE
from core.testing import authenticate_client
from events import status as event_status
from events.models import Event, EventStaff, EventTeam
from team.models import Category, Person

from .aggregation import (
    PaymentLine,
    build_event_payment_lines,
    group_by_category,
    payment_stats,
    payment_summary,
    EventPayments,
)
from .models import Payment
from .services import PaymentService


def _line(person, category, amount, is_paid=False):
    return PaymentLine(
        person_id=person,
        person_name=person,
        category_id=category,
        category_name=category.title(),
        category_color="#000000",
        event_id="e1",
        amount=Decimal(amount),
        is_paid=is_paid,
    )


class AggregationTestCase(TestCase):
    """Raggruppamento e totali (funzioni pure)"""

    def test_group_by_category_is_partition_in_encounter_order(self):
        lines = [
            _line("ana", "garcom", "50", True),
            _line("bia", "cozinha", "80"),
            _line("caio", "garcom", "60"),
        ]

        groups = group_by_category(lines)

        self.assertEqual([g.category_id for g in groups], ["garcom", "cozinha"])
        self.assertEqual(sum(len(g.lines) for g in groups), len(lines))
        self.assertEqual([line.person_id for line in groups[0].lines], ["ana", "caio"])

        garcom = groups[0]
        self.assertEqual(garcom.total_amount, Decimal("110"))
        self.assertEqual(garcom.paid_amount, Decimal("50"))
        self.assertEqual(garcom.pending_amount, Decimal("60"))
        self.assertEqual((garcom.paid_count, garcom.unpaid_count), (1, 1))

    def test_group_by_category_empty(self):
        self.assertEqual(group_by_category([]), [])

    def test_payment_stats(self):
        stats = payment_stats([_line("a", "x", "30", True), _line("b", "x", "70")])

        self.assertEqual(stats.total_amount, Decimal("100"))
        self.assertEqual(stats.paid_amount, Decimal("30"))
        self.assertEqual(stats.unpaid_amount, Decimal("70"))
        self.assertEqual((stats.paid_count, stats.unpaid_count, stats.total_count), (1, 1, 2))
        self.assertEqual(stats.completion_rate, 30.0)

    def test_payment_summary_over_events(self):
        summary = payment_summary([
            EventPayments(event=None, lines=[_line("a", "x", "10", True)]),
            EventPayments(event=None, lines=[_line("b", "x", "20")]),
        ])

        self.assertEqual(summary.event_count, 2)
        self.assertEqual(summary.stats.total_amount, Decimal("30"))
        self.assertEqual(summary.stats.unpaid_count, 1)


class PaymentTestBase(TestCase):
    def setUp(self):
        self.garcom = Category.objects.create(name="Garçom")
        self.cozinha = Category.objects.create(name="Cozinha")
        self.ana = Person.objects.create(name="Ana", category=self.garcom, value=Decimal("80.00"))
        self.bruno = Person.objects.create(name="Bruno", category=self.garcom)
        self.carla = Person.objects.create(name="Carla", category=self.garcom)
        self.davi = Person.objects.create(name="Davi", category=self.cozinha, value=Decimal("120.00"))
        self.event = Event.objects.create(title="Casamento", date=today() + timedelta(days=5))


class BuildLinesTestCase(PaymentTestBase):
    """Righe di pagamento da squadra / fabbisogno staff"""

    def test_lines_from_event_team(self):
        EventTeam.objects.create(event=self.event, person=self.ana)
        EventTeam.objects.create(event=self.event, person=self.davi)

        lines = build_event_payment_lines(self.event)

        self.assertEqual({line.person_id for line in lines}, {self.ana.pk, self.davi.pk})
        amounts = {line.person_id: line.amount for line in lines}
        self.assertEqual(amounts[self.ana.pk], Decimal("80.00"))
        self.assertEqual(amounts[self.davi.pk], Decimal("120.00"))

    def test_lines_from_staff_take_first_people_and_default_amount(self):
        EventStaff.objects.create(event=self.event, category=self.garcom, quantity=2)

        lines = build_event_payment_lines(self.event)

        self.assertEqual([line.person_name for line in lines], ["Ana", "Bruno"])
        self.assertEqual(lines[1].amount, Decimal("50"))

    def test_existing_payment_amount_wins(self):
        EventTeam.objects.create(event=self.event, person=self.ana)
        Payment.objects.create(event=self.event, person=self.ana, amount=Decimal("95.00"), is_paid=True)

        line = build_event_payment_lines(self.event)[0]

        self.assertEqual(line.amount, Decimal("95.00"))
        self.assertTrue(line.is_paid)
        self.assertIsNotNone(line.payment_id)

    def test_event_without_team_or_staff_has_no_lines(self):
        self.assertEqual(build_event_payment_lines(self.event), [])


class PaymentServiceTestCase(PaymentTestBase):
    """Test per PaymentService"""

    def test_create_payment(self):
        result = PaymentService.create(self.event, self.ana, "80")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.amount, Decimal("80"))
        self.assertFalse(result.value.is_paid)

    def test_duplicate_payment_fails(self):
        PaymentService.create(self.event, self.ana, "80")
        result = PaymentService.create(self.event.pk, self.ana.pk, "90")

        self.assertFalse(result.ok)
        self.assertIn("vincolo", result.error)
        self.assertEqual(Payment.objects.count(), 1)

    def test_by_event(self):
        PaymentService.create(self.event, self.davi, "120")
        PaymentService.create(self.event, self.ana, "80")

        result = PaymentService.by_event(self.event.pk)

        self.assertEqual([payment.person for payment in result.value], [self.ana, self.davi])
        self.assertFalse(PaymentService.by_event("non-un-uuid").ok)

    def test_amount_must_be_positive(self):
        result = PaymentService.create(self.event, self.ana, "0")

        self.assertFalse(result)
        self.assertEqual(Payment.objects.count(), 0)

    def test_mark_as_paid_sets_date(self):
        payment = PaymentService.create(self.event, self.ana, "80").value

        result = PaymentService.mark_as_paid(payment.pk)

        self.assertTrue(result.value.is_paid)
        self.assertIsNotNone(result.value.paid_at)

    def test_update_amount_and_unpay(self):
        payment = PaymentService.create(self.event, self.ana, "80", is_paid=True).value

        result = PaymentService.update(payment.pk, amount="100.50", is_paid=False)

        payment.refresh_from_db()
        self.assertTrue(result.ok)
        self.assertEqual(payment.amount, Decimal("100.50"))
        self.assertFalse(payment.is_paid)
        self.assertIsNone(payment.paid_at)

    def test_toggle_creates_then_flips(self):
        EventTeam.objects.create(event=self.event, person=self.ana)

        first = PaymentService.toggle_paid(self.event.pk, self.ana.pk)
        self.assertTrue(first.value.is_paid)
        self.assertEqual(first.value.amount, Decimal("80.00"))

        second = PaymentService.toggle_paid(self.event.pk, self.ana.pk)
        self.assertFalse(second.value.is_paid)
        self.assertEqual(Payment.objects.count(), 1)

    def test_toggle_person_outside_team_without_amount_fails(self):
        result = PaymentService.toggle_paid(self.event.pk, self.davi.pk)

        self.assertFalse(result.ok)
        self.assertEqual(Payment.objects.count(), 0)

    def test_create_batch_skips_existing(self):
        PaymentService.create(self.event, self.ana, "80")

        result = PaymentService.create_batch(self.event.pk, [
            {"person_id": self.ana.pk, "amount": "80"},
            {"person_id": self.bruno.pk, "amount": "50", "is_paid": True},
            {"person_id": self.davi.pk, "amount": "120"},
        ])

        self.assertTrue(result.ok)
        self.assertEqual(len(result.value), 2)
        self.assertEqual(Payment.objects.filter(event=self.event).count(), 3)
        self.assertTrue(Payment.objects.get(person=self.bruno).is_paid)

    def test_create_batch_invalid_amount_writes_nothing(self):
        result = PaymentService.create_batch(self.event.pk, [
            {"person_id": self.bruno.pk, "amount": "50"},
            {"person_id": self.davi.pk, "amount": "-1"},
        ])

        self.assertFalse(result.ok)
        self.assertEqual(Payment.objects.count(), 0)

    def test_create_missing_for_event(self):
        EventStaff.objects.create(event=self.event, category=self.cozinha, quantity=1)

        result = PaymentService.create_missing_for_event(self.event.pk)

        self.assertEqual(len(result.value), 1)
        self.assertEqual(Payment.objects.get().amount, Decimal("120.00"))


class PaymentViewsTestCase(PaymentTestBase):
    """Test views pagamenti"""

    def setUp(self):
        super().setUp()
        authenticate_client(self.client)
        EventTeam.objects.create(event=self.event, person=self.ana)

    def test_dashboard_lists_open_events(self):
        Event.objects.create(title="Chiuso", date=today(), status=event_status.CANCELLED)

        response = self.client.get(reverse("payments:dashboard"))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Casamento")
        self.assertNotContains(response, "Chiuso")

    def test_event_payments_page(self):
        response = self.client.get(reverse("payments:event_payments", args=[self.event.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context["groups"]), 1)

    def test_toggle_endpoint(self):
        response = self.client.post(
            reverse("payments:toggle", args=[self.event.pk]), {"person": str(self.ana.pk)}
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["is_paid"])

    def test_amount_endpoint_rejects_zero(self):
        payment = Payment.objects.create(event=self.event, person=self.ana, amount=Decimal("80"))

        response = self.client.post(reverse("payments:update_amount", args=[payment.pk]), {"amount": "0"})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_exports(self):
        excel = self.client.get(reverse("payments:export_excel"))
        pdf = self.client.get(reverse("payments:event_pdf", args=[self.event.pk]))

        self.assertEqual(excel["Content-Type"], XLSX_CONTENT_TYPE)
        self.assertEqual(pdf["Content-Type"], "application/pdf")
        self.assertEqual(load_workbook(BytesIO(excel.content)).sheetnames, ["Pagamenti", "Riepilogo"])
        self.assertTrue(pdf.content.startswith(b"%PDF"))

    def test_update_view(self):
        payment = Payment.objects.create(event=self.event, person=self.ana, amount=Decimal("80"))

        response = self.client.post(
            reverse("payments:update", args=[payment.pk]),
            {"amount": "95.50", "is_paid": "on", "notes": "pix"},
        )

        self.assertRedirects(response, reverse("payments:event_payments", args=[self.event.pk]))
        payment.refresh_from_db()
        self.assertEqual(payment.amount, Decimal("95.50"))
        self.assertTrue(payment.is_paid)
        self.assertIsNotNone(payment.paid_at)

    def test_history_tab_shows_saved_payments(self):
        closed = Event.objects.create(title="Formatura", date=today() - timedelta(days=3), status=event_status.FINISHED)
        Payment.objects.create(event=closed, person=self.davi, amount=Decimal("120"), is_paid=True)

        response = self.client.get(reverse("payments:dashboard") + "?tab=storico")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["stats"].paid_amount, Decimal("120"))
        self.assertNotContains(response, "Casamento")
