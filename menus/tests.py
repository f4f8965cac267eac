"""
Tests per app menus.
"""

import tempfile
from datetime import date
from io import StringIO
from pathlib import Path

from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse

from core.testing import authenticate_client
from events.models import Event

from .models import EventMenu, Menu, MenuCategory, MenuItem, MenuSelection
from .parser import MenuParseError, parse_menu_text, validate_menu_text
from .services import EventMenuService, MenuCategoryService, MenuItemService, MenuService

SAMPLE_TEXT = """CARDÁPIO: Buffet Prime
CATEGORIA: Entradas
- Bruschetta :: pane, pomodoro e basilico
- Coxinha
CATEGORIA: Vazia
CATEGORIA: Sobremesas
- Pudim :: leite condensado
"""


class MenuParserTestCase(TestCase):
    """Parser del testo cardapio (funzioni pure)"""

    def test_minimal_input(self):
        parsed = parse_menu_text("MENU: X\nCATEGORY: Y\n- Item :: Desc")

        self.assertEqual(parsed.as_dict(), {
            "menu_name": "X",
            "categories": [{"name": "Y", "items": [{"name": "Item", "description": "Desc"}]}],
        })

    def test_empty_categories_dropped(self):
        parsed = parse_menu_text(SAMPLE_TEXT)

        self.assertEqual(parsed.menu_name, "Buffet Prime")
        self.assertEqual([c.name for c in parsed.categories], ["Entradas", "Sobremesas"])
        self.assertEqual(parsed.categories[0].items[1].name, "Coxinha")
        self.assertEqual(parsed.categories[0].items[1].description, "")
        self.assertEqual(parsed.item_count, 3)

    def test_single_line_input_is_normalized(self):
        parsed = parse_menu_text("CARDAPIO: Festa CATEGORIA: Salgados - Empada :: frango - Kibe")

        self.assertEqual(parsed.menu_name, "Festa")
        self.assertEqual([item.name for item in parsed.categories[0].items], ["Empada", "Kibe"])

    def test_headers_case_insensitive(self):
        parsed = parse_menu_text("menu: Jantar\ncategoria: Pratos\n- Risoto")
        self.assertEqual(parsed.menu_name, "Jantar")

    def test_items_outside_category_ignored(self):
        parsed = parse_menu_text("MENU: X\n- Solto\nCATEGORY: Y\n- Dentro")
        self.assertEqual([item.name for item in parsed.categories[0].items], ["Dentro"])

    def test_missing_menu_name(self):
        with self.assertRaises(MenuParseError):
            parse_menu_text("CATEGORY: Y\n- Item")

    def test_only_empty_category_fails(self):
        with self.assertRaises(MenuParseError):
            parse_menu_text("MENU: X\nCATEGORY: Y")

    def test_validate_never_raises(self):
        self.assertFalse(validate_menu_text("")["valid"])
        self.assertIn("error", validate_menu_text("MENU: X"))
        self.assertTrue(validate_menu_text(SAMPLE_TEXT)["valid"])


class MenuServiceTestCase(TestCase):
    """Test per MenuService e import"""

    def test_create_from_parsed_assigns_order(self):
        result = MenuService.create_from_parsed(parse_menu_text(SAMPLE_TEXT))

        self.assertTrue(result.ok)
        menu = result.value
        categories = list(menu.categories.order_by("order_index"))
        self.assertEqual([(c.name, c.order_index, c.recommended_count) for c in categories],
                         [("Entradas", 0, 0), ("Sobremesas", 1, 0)])
        self.assertEqual(list(categories[0].items.values_list("order_index", flat=True)), [0, 1])
        self.assertEqual(menu.item_count, 3)

    def test_create_requires_name(self):
        self.assertFalse(MenuService.create(name=" "))

    def test_category_and_item_order_appended(self):
        menu = MenuService.create(name="Coquetel").value
        first = MenuCategoryService.create(menu.pk, "Salgados").value
        second = MenuCategoryService.create(menu.pk, "Doces", recommended_count=3).value
        item = MenuItemService.create(first.pk, "Empada").value
        other = MenuItemService.create(first.pk, "Kibe").value

        self.assertEqual((first.order_index, second.order_index), (0, 1))
        self.assertEqual((item.order_index, other.order_index), (0, 1))

    def test_update_unknown_field(self):
        menu = MenuService.create(name="Coquetel").value
        self.assertFalse(MenuService.update(menu.pk, colore="blu"))


class EventMenuTestBase(TestCase):
    def setUp(self):
        self.menu = MenuService.create_from_parsed(parse_menu_text(SAMPLE_TEXT)).value
        self.entradas = self.menu.categories.get(name="Entradas")
        self.entradas.recommended_count = 1
        self.entradas.save()
        self.bruschetta = MenuItem.objects.get(name="Bruschetta")
        self.coxinha = MenuItem.objects.get(name="Coxinha")
        self.pudim = MenuItem.objects.get(name="Pudim")

        other = MenuService.create_from_parsed(parse_menu_text("MENU: Altro\nCATEGORY: A\n- Estranho")).value
        self.other_menu = other
        self.foreign_item = MenuItem.objects.get(name="Estranho")

        self.event = Event.objects.create(title="Casamento", date=date(2030, 5, 10))
        self.event_menu = EventMenuService.link_menu_to_event(self.event.pk, self.menu.pk).value


class EventMenuServiceTestCase(EventMenuTestBase):
    """Collegamento e scelte"""

    def test_link_generates_token(self):
        self.assertTrue(len(self.event_menu.share_token) >= 20)
        self.assertEqual(EventMenuService.resolve_share(self.event.pk, self.event_menu.share_token), self.event_menu)
        self.assertIsNone(EventMenuService.resolve_share(self.event.pk, "sbagliato"))

    def test_toggle_twice_restores_state(self):
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)
        before = EventMenuService.selected_item_ids(self.event_menu)

        first = EventMenuService.toggle_selection(self.event_menu, self.bruschetta.pk)
        second = EventMenuService.toggle_selection(self.event_menu, self.bruschetta.pk)

        self.assertTrue(first.value)
        self.assertFalse(second.value)
        self.assertEqual(EventMenuService.selected_item_ids(self.event_menu), before)

    def test_toggle_foreign_item_rejected(self):
        result = EventMenuService.toggle_selection(self.event_menu, self.foreign_item.pk)

        self.assertFalse(result.ok)
        self.assertEqual(MenuSelection.objects.count(), 0)

    def test_replace_selections(self):
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)

        result = EventMenuService.replace_selections(self.event_menu.pk, [self.bruschetta.pk, self.coxinha.pk])

        self.assertTrue(result.ok)
        self.assertEqual(
            EventMenuService.selected_item_ids(self.event_menu), {self.bruschetta.pk, self.coxinha.pk}
        )

    def test_replace_with_foreign_item_keeps_previous(self):
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)

        result = EventMenuService.replace_selections(self.event_menu, [self.bruschetta.pk, self.foreign_item.pk])

        self.assertFalse(result.ok)
        self.assertEqual(EventMenuService.selected_item_ids(self.event_menu), {self.pudim.pk})

    def test_overview_reports_over_recommended(self):
        EventMenuService.replace_selections(self.event_menu, [self.bruschetta.pk, self.coxinha.pk])

        overview = EventMenuService.selection_overview(self.event_menu)

        self.assertEqual([state.category.name for state in overview], ["Entradas", "Sobremesas"])
        self.assertEqual(overview[0].selected_count, 2)
        self.assertTrue(overview[0].over_recommended)
        self.assertFalse(overview[1].over_recommended)

    def test_change_menu_keeps_token_and_drops_foreign_selections(self):
        token = self.event_menu.share_token
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)

        changed = EventMenuService.link_menu_to_event(self.event.pk, self.other_menu.pk).value

        self.assertEqual(changed.share_token, token)
        self.assertEqual(MenuSelection.objects.count(), 0)

    def test_regenerate_token(self):
        token = self.event_menu.share_token
        result = EventMenuService.regenerate_token(self.event_menu.pk)
        self.assertNotEqual(result.value.share_token, token)

    def test_selection_clean_checks_menu(self):
        selection = MenuSelection(event_menu=self.event_menu, item=self.foreign_item)
        with self.assertRaises(ValidationError):
            selection.full_clean()


class GuestViewsTestCase(EventMenuTestBase):
    """Pagina pubblica: nessuna sessione, solo token"""

    def test_guest_page(self):
        response = self.client.get(self.event_menu.get_public_url())

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Bruschetta")

    def test_invalid_token(self):
        url = reverse("menus_public:guest_menu", args=[self.event.pk, "token-inesistente"])
        response = self.client.get(url)

        self.assertEqual(response.status_code, 404)
        self.assertContains(response, "Link non valido", status_code=404)

    def test_token_of_other_event_is_invalid(self):
        other_event = Event.objects.create(title="Altro", date=date(2030, 6, 1))
        url = reverse("menus_public:guest_menu", args=[other_event.pk, self.event_menu.share_token])

        self.assertEqual(self.client.get(url).status_code, 404)

    def test_guest_toggle(self):
        url = reverse("menus_public:guest_toggle", args=[self.event.pk, self.event_menu.share_token])

        response = self.client.post(url, {"item": str(self.coxinha.pk)})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["selected"])

    def test_guest_submit(self):
        response = self.client.post(
            self.event_menu.get_public_url(), {"items": [str(self.bruschetta.pk), str(self.pudim.pk)]}
        )

        self.assertRedirects(response, self.event_menu.get_public_url(), fetch_redirect_response=False)
        self.assertEqual(MenuSelection.objects.count(), 2)


class CentralViewsTestCase(EventMenuTestBase):
    def setUp(self):
        super().setUp()
        authenticate_client(self.client)

    def test_import_preview_then_confirm(self):
        url = reverse("menus:menu_import")

        preview = self.client.post(url, {"text": "MENU: Novo\nCATEGORY: A\n- Um :: primo"})
        self.assertEqual(preview.status_code, 200)
        self.assertEqual(preview.context["preview"].menu_name, "Novo")
        self.assertFalse(Menu.objects.filter(name="Novo").exists())

        self.client.post(url, {"text": "MENU: Novo\nCATEGORY: A\n- Um :: primo", "confirm": "True"})
        self.assertTrue(Menu.objects.filter(name="Novo").exists())

    def test_import_invalid_text(self):
        response = self.client.post(reverse("menus:menu_import"), {"text": "CATEGORY: A\n- Um"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)

    def test_event_menu_page_shows_qr(self):
        response = self.client.get(reverse("menus:event_menu", args=[self.event.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["qr_code"].startswith("data:image/png;base64,"))

    def test_link_form(self):
        event = Event.objects.create(title="Nuovo", date=date(2030, 7, 1))

        self.client.post(reverse("menus:event_menu", args=[event.pk]), {"menu": str(self.menu.pk)})

        self.assertTrue(EventMenu.objects.filter(event=event, menu=self.menu).exists())

    def test_pdf_exports(self):
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)

        table = self.client.get(reverse("menus:event_menu_pdf", args=[self.event.pk]))
        sheet = self.client.get(reverse("menus:event_menu_print", args=[self.event.pk]))

        self.assertEqual(table["Content-Type"], "application/pdf")
        self.assertEqual(sheet["Content-Type"], "application/pdf")

    def test_menu_detail(self):
        response = self.client.get(self.menu.get_absolute_url())
        self.assertContains(response, "Sobremesas")

    def test_unlink(self):
        EventMenuService.toggle_selection(self.event_menu, self.pudim.pk)

        response = self.client.post(reverse("menus:event_menu_unlink", args=[self.event.pk]))

        self.assertRedirects(response, reverse("menus:event_menu", args=[self.event.pk]))
        self.assertFalse(EventMenu.objects.filter(event=self.event).exists())
        self.assertFalse(MenuSelection.objects.exists())


class ImportMenuCommandTestCase(TestCase):
    def test_import_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cardapio.txt"
            path.write_text(SAMPLE_TEXT, encoding="utf-8")
            out = StringIO()

            call_command("import_menu", str(path), stdout=out)

        self.assertIn("Cardapio importato", out.getvalue())
        self.assertEqual(MenuCategory.objects.count(), 2)

    def test_dry_run_saves_nothing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cardapio.txt"
            path.write_text(SAMPLE_TEXT, encoding="utf-8")

            call_command("import_menu", str(path), "--dry-run", stdout=StringIO())

        self.assertEqual(Menu.objects.count(), 0)
