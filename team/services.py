"""
Servizi per categorie e persone.

Tutte le operazioni ritornano ServiceResult (vedi core.results).
"""

import logging

from django.core.exceptions import ValidationError

from core.results import ServiceResult, get_object_or_fail, service_operation

from .models import Category, Person

logger = logging.getLogger(__name__)

CATEGORY_FIELDS = {"name", "description", "color"}
PERSON_FIELDS = {"name", "value", "category", "category_id"}


def _require_updates(updates, allowed):
    if not updates:
        raise ValidationError("Nessuna modifica fornita.")
    unknown = set(updates) - allowed
    if unknown:
        raise ValidationError(f"Campi non modificabili: {', '.join(sorted(unknown))}")


def update_category_member_count(category_id):
    """Ricalcola member_count contando le persone della categoria."""
    member_count = Person.objects.filter(category_id=category_id).count()
    updated = Category.objects.filter(pk=category_id).update(member_count=member_count)
    if updated:
        logger.info(f"Categoria {category_id}: member_count = {member_count}")
    return member_count


def recalculate_all_category_counters():
    """Ricalcola i contatori di tutte le categorie (correzione dati esistenti)."""
    category_ids = list(Category.objects.values_list("pk", flat=True))
    for category_id in category_ids:
        update_category_member_count(category_id)
    logger.info(f"Ricalcolati i contatori di {len(category_ids)} categorie")
    return len(category_ids)


class CategoryService:
    """CRUD categorie."""

    @staticmethod
    @service_operation("caricare la categoria")
    def get(category_id):
        return get_object_or_fail(Category, category_id)

    @staticmethod
    @service_operation("creare la categoria")
    def create(name, description="", color=None):
        category = Category(
            name=(name or "").strip(),
            description=description or "",
        )
        if color:
            category.color = color
        category.full_clean()
        category.save()
        logger.info(f"Categoria creata: {category.name} ({category.pk})")
        return category

    @staticmethod
    @service_operation("aggiornare la categoria")
    def update(category_id, **updates):
        _require_updates(updates, CATEGORY_FIELDS)
        category = get_object_or_fail(Category, category_id)
        for field, value in updates.items():
            setattr(category, field, value.strip() if field == "name" and value else value)
        category.full_clean()
        category.save()
        logger.info(f"Categoria aggiornata: {category.name} ({category.pk})")
        return category

    @staticmethod
    @service_operation("eliminare la categoria")
    def delete(category_id):
        category = get_object_or_fail(Category, category_id)
        category.delete()
        logger.info(f"Categoria eliminata: {category_id}")
        return True


class PersonService:
    """CRUD persone con aggiornamento dei contatori delle categorie."""

    @staticmethod
    @service_operation("caricare la persona")
    def get(person_id):
        return get_object_or_fail(Person, person_id)

    @staticmethod
    @service_operation("caricare le persone della categoria")
    def by_category(category_id):
        category = get_object_or_fail(Category, category_id)
        return list(category.people.order_by("name"))

    @staticmethod
    @service_operation("creare la persona")
    def create(name, category, value=None):
        if not isinstance(category, Category):
            category = get_object_or_fail(Category, category)
        person = Person(name=(name or "").strip(), category=category, value=value)
        person.full_clean()
        person.save()
        update_category_member_count(category.pk)
        logger.info(f"Persona creata: {person.name} in {category.name}")
        return person

    @staticmethod
    @service_operation("aggiornare la persona")
    def update(person_id, **updates):
        _require_updates(updates, PERSON_FIELDS)
        person = get_object_or_fail(Person, person_id)
        old_category_id = person.category_id

        if "category_id" in updates:
            updates["category"] = updates.pop("category_id")
        if "category" in updates and not isinstance(updates["category"], Category):
            updates["category"] = get_object_or_fail(Category, updates["category"])

        for field, value in updates.items():
            setattr(person, field, value.strip() if field == "name" and value else value)
        person.full_clean()
        person.save()

        if person.category_id != old_category_id:
            update_category_member_count(person.category_id)
            update_category_member_count(old_category_id)
        logger.info(f"Persona aggiornata: {person.name} ({person.pk})")
        return person

    @staticmethod
    @service_operation("eliminare la persona")
    def delete(person_id):
        person = get_object_or_fail(Person, person_id)
        category_id = person.category_id
        person.delete()
        update_category_member_count(category_id)
        logger.info(f"Persona eliminata: {person_id}")
        return True
