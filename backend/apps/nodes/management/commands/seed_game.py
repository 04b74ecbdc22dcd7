from __future__ import annotations

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.core.models import ResourceType, Team
from apps.nodes.models import Node

TEAMS = [
    ("Alpha", "#ef4444"),
    ("Beta", "#3b82f6"),
    ("Gamma", "#22c55e"),
    ("Delta", "#ffffff"),
]

# Ids are fixed so printed QR credentials stay valid across reseeds
NODES = [
    ("11111111-1111-1111-1111-111111111111", "Meat Plant No.1", ResourceType.MEAT, 20, 20, 50, "secret-meat-1"),
    ("22222222-2222-2222-2222-222222222222", "Meat Plant No.2", ResourceType.MEAT, 80, 80, 50, "secret-meat-2"),
    ("33333333-3333-3333-3333-333333333333", "Hydroponic Dome", ResourceType.VEGETABLE, 30, 70, 40, "secret-veg-1"),
    ("44444444-4444-4444-4444-444444444444", "Grain Silo", ResourceType.RICE, 70, 30, 60, "secret-rice-1"),
    ("55555555-5555-5555-5555-555555555555", "Noodle Factory", ResourceType.NOODLE, 50, 15, 60, "secret-noodle-1"),
    ("66666666-6666-6666-6666-666666666666", "Bakery Sector", ResourceType.BREAD, 15, 50, 50, "secret-bread-1"),
    ("77777777-7777-7777-7777-777777777777", "Coastal Cold Storage", ResourceType.SEAFOOD, 85, 50, 30, "secret-seafood-1"),
    ("88888888-8888-8888-8888-888888888888", "Spice Bazaar", ResourceType.SPICE, 50, 85, 20, "secret-spice-1"),
    ("99999999-9999-9999-9999-999999999999", "Dairy Farm", ResourceType.DAIRY, 50, 50, 40, "secret-dairy-1"),
]


class Command(BaseCommand):
    help = "Seed demo data: four teams and the nine resource nodes."

    def handle(self, *args, **options):
        for name, color in TEAMS:
            _, created = Team.objects.update_or_create(name=name, defaults={"color": color})
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created team '{name}'"))

        now = timezone.now()
        for node_id, name, resource_type, x, y, rate, secret in NODES:
            _, created = Node.objects.update_or_create(
                id=node_id,
                defaults={
                    "name": name,
                    "resource_type": resource_type,
                    "x": x,
                    "y": y,
                    "capture_rate": rate,
                    "secret_key": secret,
                    "owner": None,
                    "last_settled_at": now,
                },
            )
            if not created:
                self.stdout.write(self.style.WARNING(f"Node '{name}' already exists, reset to neutral"))

        self.stdout.write(self.style.SUCCESS("Seed complete."))
