from __future__ import annotations

from celery import shared_task

from . import tick


@shared_task
def run_tick():
    """Periodic tick (celery beat, every GAME_TICK_SECONDS)."""
    return tick.run_tick().as_dict()
