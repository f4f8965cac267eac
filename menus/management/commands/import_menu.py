"""
Importa un cardapio da file di testo.

Usage:
    python manage.py import_menu cardapio.txt
    python manage.py import_menu cardapio.txt --dry-run
"""

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from menus.parser import validate_menu_text
from menus.services import MenuService


class Command(BaseCommand):
    help = "Importa un cardapio (CARDÁPIO/CATEGORIA/- piatto :: descrizione) da un file di testo"

    def add_arguments(self, parser):
        parser.add_argument("path", help="File di testo UTF-8")
        parser.add_argument("--description", default="", help="Descrizione del cardapio")
        parser.add_argument("--dry-run", action="store_true", help="Mostra solo l'anteprima")

    def handle(self, *args, **options):
        path = Path(options["path"])
        if not path.exists():
            raise CommandError(f"File non trovato: {path}")

        result = validate_menu_text(path.read_text(encoding="utf-8"))
        if not result["valid"]:
            raise CommandError(result["error"])

        parsed = result["preview"]
        self.stdout.write(f"Cardapio: {parsed.menu_name}")
        for category in parsed.categories:
            self.stdout.write(f"  {category.name} ({len(category.items)} piatti)")

        if options["dry_run"]:
            self.stdout.write(self.style.WARNING("Dry run: nessun dato salvato"))
            return

        saved = MenuService.create_from_parsed(parsed, description=options["description"])
        if not saved:
            raise CommandError(saved.error)
        self.stdout.write(self.style.SUCCESS(f"Cardapio importato: {saved.value.pk}"))
