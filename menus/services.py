"""
Servizi per cardapi, collegamento agli eventi e scelte degli ospiti.

Tutte le operazioni ritornano ServiceResult (vedi core.results).
"""

import logging
from dataclasses import dataclass, field
from typing import List

from django.core.exceptions import ValidationError

from core.results import get_object_or_fail, service_operation
from events.models import Event

from .models import EventMenu, Menu, MenuCategory, MenuItem, MenuSelection, generate_share_token
from .parser import ParsedMenu

logger = logging.getLogger(__name__)

MENU_FIELDS = {"name", "description", "status"}


class MenuService:
    """CRUD cardapi."""

    @staticmethod
    @service_operation("caricare il cardapio")
    def get(menu_id):
        return get_object_or_fail(Menu, menu_id)

    @staticmethod
    @service_operation("creare il cardapio")
    def create(name, description="", status=Menu.STATUS_ACTIVE):
        menu = Menu(name=(name or "").strip(), description=description or "", status=status)
        menu.full_clean()
        menu.save()
        logger.info(f"Cardapio creato: {menu.name} ({menu.pk})")
        return menu

    @staticmethod
    @service_operation("aggiornare il cardapio")
    def update(menu_id, **updates):
        if not updates:
            raise ValidationError("Nessuna modifica fornita.")
        unknown = set(updates) - MENU_FIELDS
        if unknown:
            raise ValidationError(f"Campi sconosciuti: {', '.join(sorted(unknown))}")
        menu = get_object_or_fail(Menu, menu_id)
        for name, value in updates.items():
            setattr(menu, name, value)
        menu.full_clean()
        menu.save()
        return menu

    @staticmethod
    @service_operation("eliminare il cardapio")
    def delete(menu_id):
        menu = get_object_or_fail(Menu, menu_id)
        menu.delete()
        logger.info(f"Cardapio eliminato: {menu_id}")
        return True

    @staticmethod
    @service_operation("importare il cardapio")
    def create_from_parsed(parsed: ParsedMenu, description="", status=Menu.STATUS_ACTIVE):
        """
        Salva menu, categorie e piatti di un testo già analizzato.

        Gli indici di ordinamento seguono l'ordine del testo (0, 1, 2...).
        """
        menu = Menu(name=parsed.menu_name, description=description, status=status)
        menu.full_clean()
        menu.save()

        for category_index, parsed_category in enumerate(parsed.categories):
            category = MenuCategory.objects.create(
                menu=menu,
                name=parsed_category.name,
                order_index=category_index,
            )
            MenuItem.objects.bulk_create([
                MenuItem(
                    category=category,
                    name=item.name,
                    description=item.description,
                    order_index=item_index,
                )
                for item_index, item in enumerate(parsed_category.items)
            ])

        logger.info(
            f"Cardapio importato: {menu.name} ({len(parsed.categories)} categorie, {parsed.item_count} piatti)"
        )
        return menu


class MenuCategoryService:
    @staticmethod
    @service_operation("creare la categoria")
    def create(menu_id, name, recommended_count=0):
        menu = get_object_or_fail(Menu, menu_id)
        last = menu.categories.order_by("-order_index").first()
        category = MenuCategory(
            menu=menu,
            name=(name or "").strip(),
            recommended_count=recommended_count or 0,
            order_index=last.order_index + 1 if last else 0,
        )
        category.full_clean(validate_unique=False, validate_constraints=False)
        category.save()
        return category

    @staticmethod
    @service_operation("aggiornare la categoria")
    def update(category_id, name=None, recommended_count=None):
        category = get_object_or_fail(MenuCategory, category_id)
        if name is not None:
            category.name = name.strip()
        if recommended_count is not None:
            category.recommended_count = recommended_count
        category.full_clean(validate_unique=False, validate_constraints=False)
        category.save()
        return category

    @staticmethod
    @service_operation("eliminare la categoria")
    def delete(category_id):
        get_object_or_fail(MenuCategory, category_id).delete()
        return True


class MenuItemService:
    @staticmethod
    @service_operation("creare il piatto")
    def create(category_id, name, description="", image_url=""):
        category = get_object_or_fail(MenuCategory, category_id)
        last = category.items.order_by("-order_index").first()
        item = MenuItem(
            category=category,
            name=(name or "").strip(),
            description=description or "",
            image_url=image_url or "",
            order_index=last.order_index + 1 if last else 0,
        )
        item.full_clean(validate_unique=False, validate_constraints=False)
        item.save()
        return item

    @staticmethod
    @service_operation("aggiornare il piatto")
    def update(item_id, **updates):
        item = get_object_or_fail(MenuItem, item_id)
        for name in ("name", "description", "image_url"):
            if name in updates:
                setattr(item, name, updates[name] or "")
        item.full_clean(validate_unique=False, validate_constraints=False)
        item.save()
        return item

    @staticmethod
    @service_operation("eliminare il piatto")
    def delete(item_id):
        get_object_or_fail(MenuItem, item_id).delete()
        return True


# ============================================================================
# CARDAPIO DELL'EVENTO E SCELTE
# ============================================================================

@dataclass
class ItemState:
    item: MenuItem
    selected: bool


@dataclass
class CategoryState:
    category: MenuCategory
    items: List[ItemState] = field(default_factory=list)

    @property
    def recommended_count(self):
        return self.category.recommended_count

    @property
    def selected_count(self):
        return sum(1 for state in self.items if state.selected)

    @property
    def over_recommended(self):
        """Più scelte del consigliato: segnalato, mai bloccato."""
        return bool(self.recommended_count) and self.selected_count > self.recommended_count


def _item_of_menu(event_menu, item_id):
    try:
        item = MenuItem.objects.select_related("category").get(pk=item_id)
    except (MenuItem.DoesNotExist, ValueError, ValidationError):
        raise ValidationError(f"Piatto non trovato: {item_id}")
    if item.category.menu_id != event_menu.menu_id:
        raise ValidationError(f"Il piatto {item.name} non appartiene al cardapio dell'evento.")
    return item


def _event_menu(event_menu):
    if isinstance(event_menu, EventMenu):
        return event_menu
    return get_object_or_fail(EventMenu, event_menu)


class EventMenuService:
    """Collegamento cardapio-evento e scelte degli ospiti."""

    @staticmethod
    @service_operation("collegare il cardapio all'evento")
    def link_menu_to_event(event_id, menu_id):
        """
        Collega (o cambia) il cardapio di un evento.

        Il token di condivisione resta lo stesso; cambiando cardapio
        vengono rimosse le scelte che non ne fanno parte.
        """
        event = get_object_or_fail(Event, event_id)
        menu = get_object_or_fail(Menu, menu_id)

        event_menu = EventMenu.objects.filter(event=event).first()
        if event_menu is None:
            event_menu = EventMenu.objects.create(event=event, menu=menu)
            logger.info(f"Cardapio {menu.name} collegato a {event.title}")
            return event_menu

        if event_menu.menu_id != menu.pk:
            event_menu.menu = menu
            event_menu.save(update_fields=["menu", "updated_at"])
            removed, _ = event_menu.selections.exclude(item__category__menu=menu).delete()
            logger.info(f"Cardapio evento {event.title} cambiato in {menu.name} ({removed} scelte rimosse)")
        return event_menu

    @staticmethod
    @service_operation("rigenerare il link")
    def regenerate_token(event_menu_id):
        event_menu = _event_menu(event_menu_id)
        event_menu.share_token = generate_share_token()
        event_menu.save(update_fields=["share_token", "updated_at"])
        return event_menu

    @staticmethod
    @service_operation("scollegare il cardapio")
    def unlink(event_id):
        deleted, _ = EventMenu.objects.filter(event_id=event_id).delete()
        return deleted > 0

    @staticmethod
    def resolve_share(event_id, token):
        """EventMenu per (evento, token) oppure None."""
        return (
            EventMenu.objects.select_related("event", "menu")
            .filter(event_id=event_id, share_token=token)
            .first()
        )

    @staticmethod
    @service_operation("aggiornare la scelta")
    def toggle_selection(event_menu, item_id):
        """Aggiunge o rimuove il piatto dalle scelte. Ritorna il nuovo stato (True = scelto)."""
        event_menu = _event_menu(event_menu)
        item = _item_of_menu(event_menu, item_id)

        deleted, _ = MenuSelection.objects.filter(event_menu=event_menu, item=item).delete()
        if deleted:
            return False
        MenuSelection.objects.create(event_menu=event_menu, item=item)
        return True

    @staticmethod
    @service_operation("salvare le scelte")
    def replace_selections(event_menu, item_ids):
        """Sostituisce l'intero insieme delle scelte."""
        event_menu = _event_menu(event_menu)
        items = [_item_of_menu(event_menu, item_id) for item_id in dict.fromkeys(item_ids)]

        MenuSelection.objects.filter(event_menu=event_menu).delete()
        MenuSelection.objects.bulk_create([MenuSelection(event_menu=event_menu, item=item) for item in items])
        logger.info(f"Scelte salvate per {event_menu}: {len(items)} piatti")
        return items

    @staticmethod
    def selected_item_ids(event_menu):
        return set(event_menu.selections.values_list("item_id", flat=True))

    @staticmethod
    def selection_overview(event_menu) -> List[CategoryState]:
        """Categorie del cardapio (per order_index) con piatti e stato di scelta."""
        selected = EventMenuService.selected_item_ids(event_menu)
        categories = event_menu.menu.categories.prefetch_related("items").order_by("order_index")
        return [
            CategoryState(
                category=category,
                items=[ItemState(item=item, selected=item.pk in selected) for item in category.items.all()],
            )
            for category in categories
        ]
