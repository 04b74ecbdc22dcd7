from __future__ import annotations

from django.core.management.base import BaseCommand

from apps.core import control


class Command(BaseCommand):
    help = "Start, finish or reset the game."

    def add_arguments(self, parser):
        parser.add_argument("action", choices=control.ACTION_CHOICES, help="Control action")

    def handle(self, *args, **options):
        action = options["action"]
        if action == control.ACTION_RESET:
            self.stdout.write(self.style.WARNING("Resetting all scores, resources, ownership and logs"))
        result = control.apply(action)
        self.stdout.write(self.style.SUCCESS(result.message))
