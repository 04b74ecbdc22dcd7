from __future__ import annotations

from django.core.management.base import BaseCommand

from apps.nodes.tick import run_tick


class Command(BaseCommand):
    help = "Run one accrual tick now, crediting every owning team with its nodes' rates."

    def handle(self, *args, **options):
        result = run_tick()
        if result.message:
            self.stdout.write(self.style.WARNING(result.message))
            return
        for d in result.details:
            self.stdout.write(f"team={d.team_id} added={d.added} score={d.new_score}")
        if result.failed_teams:
            self.stdout.write(self.style.ERROR(f"Failed teams: {result.failed_teams}"))
        self.stdout.write(self.style.SUCCESS(f"Tick settled {result.processed_teams} teams."))
