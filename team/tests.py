"""
Tests per app team.
"""

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from core.testing import authenticate_client

from .models import Category, Person, DEFAULT_CATEGORY_COLOR
from .services import (
    CategoryService,
    PersonService,
    recalculate_all_category_counters,
    update_category_member_count,
)


class CategoryServiceTestCase(TestCase):
    """Test per CategoryService"""

    def test_create_category_default_color(self):
        result = CategoryService.create(name="  Garçom  ")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.name, "Garçom")
        self.assertEqual(result.value.color, DEFAULT_CATEGORY_COLOR)
        self.assertEqual(result.value.member_count, 0)

    def test_create_category_requires_name(self):
        result = CategoryService.create(name="   ")

        self.assertFalse(result)
        self.assertIn("name", result.error)
        self.assertEqual(Category.objects.count(), 0)

    def test_invalid_color_rejected(self):
        result = CategoryService.create(name="Copa", color="blu")
        self.assertFalse(result.ok)

    def test_update_without_changes_fails(self):
        category = CategoryService.create(name="Copa").value
        result = CategoryService.update(category.pk)

        self.assertFalse(result.ok)
        self.assertEqual(result.error, "Nessuna modifica fornita.")

    def test_update_unknown_id_fails(self):
        result = CategoryService.update("not-a-uuid", name="X")
        self.assertFalse(result.ok)

    def test_delete_cascades_people(self):
        category = CategoryService.create(name="Cozinha").value
        PersonService.create(name="Ana", category=category)

        result = CategoryService.delete(category.pk)

        self.assertTrue(result.ok)
        self.assertEqual(Person.objects.count(), 0)


class PersonServiceTestCase(TestCase):
    """Test per PersonService e contatori membri"""

    def setUp(self):
        self.garcom = Category.objects.create(name="Garçom")
        self.cozinha = Category.objects.create(name="Cozinha")

    def test_create_updates_member_count(self):
        PersonService.create(name="Ana", category=self.garcom, value=Decimal("80.00"))
        PersonService.create(name="Bruno", category=self.garcom.pk)

        self.garcom.refresh_from_db()
        self.assertEqual(self.garcom.member_count, 2)

    def test_create_with_unknown_category_fails(self):
        result = PersonService.create(name="Ana", category="00000000-0000-0000-0000-000000000000")

        self.assertFalse(result.ok)
        self.assertEqual(Person.objects.count(), 0)

    def test_by_category(self):
        PersonService.create(name="Bruno", category=self.garcom)
        PersonService.create(name="Ana", category=self.garcom)
        PersonService.create(name="Caio", category=self.cozinha)

        result = PersonService.by_category(self.garcom.pk)

        self.assertEqual([person.name for person in result.value], ["Ana", "Bruno"])

    def test_negative_value_rejected(self):
        result = PersonService.create(name="Ana", category=self.garcom, value=Decimal("-1"))
        self.assertFalse(result.ok)

    def test_change_category_updates_both_counters(self):
        person = PersonService.create(name="Ana", category=self.garcom).value

        result = PersonService.update(person.pk, category_id=self.cozinha.pk)

        self.assertTrue(result.ok)
        self.garcom.refresh_from_db()
        self.cozinha.refresh_from_db()
        self.assertEqual(self.garcom.member_count, 0)
        self.assertEqual(self.cozinha.member_count, 1)

    def test_delete_updates_counter(self):
        person = PersonService.create(name="Ana", category=self.garcom).value
        PersonService.delete(person.pk)

        self.garcom.refresh_from_db()
        self.assertEqual(self.garcom.member_count, 0)

    def test_recalculate_fixes_stale_counters(self):
        Person.objects.create(name="Ana", category=self.garcom)
        Category.objects.filter(pk=self.garcom.pk).update(member_count=10)

        self.assertEqual(recalculate_all_category_counters(), 2)
        self.garcom.refresh_from_db()
        self.assertEqual(self.garcom.member_count, 1)
        self.assertEqual(update_category_member_count(self.cozinha.pk), 0)


class TeamViewsTestCase(TestCase):
    """Test per le view del team"""

    def setUp(self):
        authenticate_client(self.client)
        self.category = Category.objects.create(name="Copa", color="#10B981")

    def test_category_list(self):
        response = self.client.get(reverse("team:category_list"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Copa")

    def test_create_person_from_form(self):
        response = self.client.post(
            reverse("team:person_create"),
            {"name": "Carla", "category": self.category.pk, "value": "120.00"},
        )

        self.assertRedirects(response, self.category.get_absolute_url(), fetch_redirect_response=False)
        self.category.refresh_from_db()
        self.assertEqual(self.category.member_count, 1)

    def test_create_category_invalid_form(self):
        response = self.client.post(reverse("team:category_create"), {"name": "", "color": "#000000"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Category.objects.count(), 1)
