from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from . import audit
from .broadcast import ResetRequired, publish_on_commit
from .exceptions import ValidationFailed
from .metrics import control_actions_total
from .models import AuditLog, GameSettings, ResourceLedgerEntry, Team

logger = logging.getLogger(__name__)

ACTION_START = "START"
ACTION_FINISH = "FINISH"
ACTION_RESET = "RESET"
ACTION_CHOICES = [ACTION_START, ACTION_FINISH, ACTION_RESET]


@dataclass(frozen=True)
class ControlResult:
    success: bool
    message: str


def is_game_active(for_update: bool = False) -> bool:
    """With ``for_update`` the settings row stays locked until the caller's transaction ends."""
    qs = GameSettings.objects.filter(singleton=True)
    if for_update:
        qs = qs.select_for_update()
    active = qs.values_list("is_active", flat=True).first()
    return bool(active)


def _set_active(active: bool) -> None:
    row, _ = GameSettings.objects.select_for_update().get_or_create(singleton=True)
    row.is_active = active
    row.updated_at = timezone.now()
    row.save(update_fields=["is_active", "updated_at"])


def start_game() -> ControlResult:
    with transaction.atomic():
        _set_active(True)
        audit.record("[SYSTEM] Game started! Begin operations!", kind=AuditLog.KIND_CONTROL)
    control_actions_total.labels(action=ACTION_START).inc()
    logger.info("Game started")
    return ControlResult(True, "Game Started")


def finish_game() -> ControlResult:
    with transaction.atomic():
        _set_active(False)
        audit.record("[SYSTEM] Game over! Thanks for playing.", kind=AuditLog.KIND_CONTROL)
    control_actions_total.labels(action=ACTION_FINISH).inc()
    logger.info("Game finished")
    return ControlResult(True, "Game Finished")


def reset_game(now=None) -> ControlResult:
    """
    Wipe all mutable game state in one transaction: log and ledger entries are
    deleted, scores zeroed, nodes released and the game left inactive.

    The log is left empty; no "game reset" entry is written afterwards.
    Clients learn about the reset from the ``full-reset-required`` event.
    """
    from apps.nodes import registry

    now = now or timezone.now()
    with transaction.atomic():
        # Nodes first, same lock order as player actions
        released = registry.release_all(now)
        AuditLog.objects.all().delete()
        ResourceLedgerEntry.objects.all().delete()
        Team.objects.update(score=0)
        GameSettings.objects.all().delete()
        GameSettings.objects.create(singleton=True, is_active=False, updated_at=now)
        publish_on_commit(ResetRequired(message="Game has been reset by admin."))
    control_actions_total.labels(action=ACTION_RESET).inc()
    logger.warning("Game reset, %d nodes released", released)
    return ControlResult(True, "Game Reset Complete")


def apply(action: str) -> ControlResult:
    handlers = {
        ACTION_START: start_game,
        ACTION_FINISH: finish_game,
        ACTION_RESET: reset_game,
    }
    handler = handlers.get((action or "").upper())
    if handler is None:
        raise ValidationFailed("Invalid action")
    return handler()
