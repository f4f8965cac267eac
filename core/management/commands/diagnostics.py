"""
Django management command per la diagnostica dei dati.

Usage:
    python manage.py diagnostics events
    python manage.py diagnostics categories
    python manage.py diagnostics people
    python manage.py diagnostics team <event_id>
"""

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Mostra lo stato di eventi, categorie, persone o squadra di un evento"

    def add_arguments(self, parser):
        parser.add_argument(
            "target",
            choices=["events", "categories", "people", "team"],
            help="Cosa ispezionare",
        )
        parser.add_argument(
            "event_id", nargs="?", help="ID evento (solo per 'team')"
        )

    def handle(self, *args, **options):
        diagnostics = apps.get_app_config("core").diagnostics
        target = options["target"]

        if target == "team":
            if not options["event_id"]:
                raise CommandError("Specificare l'ID dell'evento: diagnostics team <event_id>")
            rows = diagnostics.team(options["event_id"])
        else:
            rows = getattr(diagnostics, target)()

        if not rows:
            self.stdout.write(self.style.WARNING("Nessun dato trovato"))
            return

        headers = list(rows[0].keys())
        self.stdout.write(" | ".join(headers))
        for row in rows:
            self.stdout.write(" | ".join("-" if row[h] is None else str(row[h]) for h in headers))

        self.stdout.write(self.style.SUCCESS(f"Totale: {len(rows)}"))
