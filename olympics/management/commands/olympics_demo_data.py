from __future__ import annotations

from django.core.management.base import BaseCommand

from olympics.services import demo


class Command(BaseCommand):
    help = "Seed a demo Olympics with events, rounds, matches and medals"

    def add_arguments(self, parser):
        parser.add_argument("--no-activate", action="store_true", help="Leave the active Olympics unchanged")
        parser.add_argument("--no-output", action="store_true", help="Suppress success output")

    def handle(self, *args, **options):
        olympics = demo.seed_demo_olympics(activate=not options["no_activate"])
        if not options["no_output"]:
            self.stdout.write(self.style.SUCCESS(f"Seeded olympics: {olympics.name} ({olympics.pk})"))
