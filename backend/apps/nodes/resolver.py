"""
Player actions on a node.

A scan of a node's credential either captures the node (when the acting team
does not own it) or harvests the resources it accrued since its last
settlement (when it does). The decision is re-made against fresh state on
every attempt; the node row is the serialization boundary.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.core import audit, ledger
from apps.core.broadcast import OwnershipChanged, ScoreChanged, publish_on_commit
from apps.core.control import is_game_active
from apps.core.exceptions import (
    AlreadyOwned,
    CredentialRejected,
    DomainConflict,
    GameInactive,
    NotOwned,
    StaleDecision,
    ValidationFailed,
)
from apps.core.metrics import node_action_retries_total, node_actions_total
from apps.core.models import AuditLog, Team
from . import registry
from .models import Node, verify_secret

logger = logging.getLogger(__name__)

ACTION_CAPTURE = "CAPTURE"
ACTION_HARVEST = "HARVEST"
ACTION_CHOICES = [ACTION_CAPTURE, ACTION_HARVEST]


class OwnershipState(enum.Enum):
    UNOWNED = "UNOWNED"
    ENEMY_OWNED = "ENEMY_OWNED"
    SELF_OWNED = "SELF_OWNED"


@dataclass(frozen=True)
class Capture:
    bonus: int


@dataclass(frozen=True)
class Harvest:
    amount: int
    minutes: int


@dataclass(frozen=True)
class NoOp:
    reason: str


Decision = Union[Capture, Harvest, NoOp]


@dataclass
class ActionResult:
    success: bool
    action: str
    message: str
    amount: Optional[int] = None
    node: Optional[Node] = None
    new_score: Optional[int] = None


def ownership_state(node: Node, team: Team) -> OwnershipState:
    if node.owner_id is None:
        return OwnershipState.UNOWNED
    if node.owner_id == team.id:
        return OwnershipState.SELF_OWNED
    return OwnershipState.ENEMY_OWNED


def elapsed_periods(node: Node, now: datetime) -> int:
    """Whole settlement periods since the node was last settled."""
    seconds = (now - node.last_settled_at).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // settings.GAME_HARVEST_PERIOD_SECONDS)


def decide(node: Node, team: Team, now: datetime, requested: Optional[str] = None) -> Decision:
    state = ownership_state(node, team)
    if state is not OwnershipState.SELF_OWNED:
        if requested == ACTION_HARVEST:
            raise NotOwned()
        return Capture(bonus=node.capture_rate)

    if requested == ACTION_CAPTURE:
        raise AlreadyOwned()
    minutes = elapsed_periods(node, now)
    if minutes < 1:
        return NoOp(reason="Nothing to collect yet. Please wait a little longer.")
    amount = minutes * node.capture_rate
    if amount <= 0:
        return NoOp(reason="Nothing to collect yet. Please wait a little longer.")
    return Harvest(amount=amount, minutes=minutes)


def _apply_capture(node: Node, team: Team, decision: Capture, now: datetime) -> ActionResult:
    if not registry.set_owner(node, team, now):
        raise StaleDecision()
    new_score = ledger.credit(team.id, {node.resource_type: decision.bonus})
    audit.record(
        f"[CAPTURE] Team {team.name} captured {node.name}! Secured {decision.bonus} {node.resource_type}.",
        kind=AuditLog.KIND_CAPTURE,
        team=team,
        now=now,
    )
    publish_on_commit(OwnershipChanged(node_id=str(node.id), team_id=team.id, team_color=team.color))
    publish_on_commit(ScoreChanged(team_id=team.id, new_score=new_score))
    return ActionResult(
        success=True,
        action=ACTION_CAPTURE,
        message=f"Captured {node.name}! (bonus +{decision.bonus})",
        amount=decision.bonus,
        node=node,
        new_score=new_score,
    )


def _apply_harvest(node: Node, team: Team, decision: Harvest, now: datetime) -> ActionResult:
    # The partial period since the last whole one is discarded
    if not registry.reset_timer(node, now):
        raise StaleDecision()
    new_score = ledger.credit(team.id, {node.resource_type: decision.amount})
    audit.record(
        f"[HARVEST] Team {team.name} collected {decision.amount} {node.resource_type} from {node.name}.",
        kind=AuditLog.KIND_HARVEST,
        team=team,
        now=now,
    )
    publish_on_commit(ScoreChanged(team_id=team.id, new_score=new_score))
    return ActionResult(
        success=True,
        action=ACTION_HARVEST,
        message=f"Collected {decision.amount} {node.resource_type} from {node.name} ({decision.minutes} min).",
        amount=decision.amount,
        node=node,
        new_score=new_score,
    )


def _resolve_once(node_id, team_name: str, secret: str, requested: Optional[str], now: datetime) -> ActionResult:
    with transaction.atomic():
        # Lock order: node row first, team row second (through the score update)
        node = registry.lock_node(node_id)
        team = ledger.get_team_by_name(team_name)
        if not verify_secret(node, secret):
            raise CredentialRejected()
        if settings.GAME_REQUIRE_ACTIVE_FOR_ACTIONS and not is_game_active():
            raise GameInactive()

        decision = decide(node, team, now, requested)
        if isinstance(decision, Capture):
            return _apply_capture(node, team, decision, now)
        if isinstance(decision, Harvest):
            return _apply_harvest(node, team, decision, now)
        return ActionResult(success=False, action=ACTION_HARVEST, message=decision.reason, node=node)


def resolve_action(
    node_id,
    team_name: str,
    secret: str,
    requested: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ActionResult:
    if not node_id or not team_name or not secret:
        raise ValidationFailed("Missing nodeId, teamName or secret")
    if requested is not None and requested not in ACTION_CHOICES:
        raise ValidationFailed("Invalid action")

    attempts = max(1, settings.GAME_ACTION_MAX_ATTEMPTS)
    for attempt in range(1, attempts + 1):
        try:
            result = _resolve_once(node_id, team_name, secret, requested, now or timezone.now())
        except StaleDecision:
            node_action_retries_total.inc()
            logger.info("Node %s changed during action by %s (attempt %d)", node_id, team_name, attempt)
            continue
        node_actions_total.labels(action=result.action, outcome="applied" if result.success else "noop").inc()
        return result

    node_actions_total.labels(action=requested or "AUTO", outcome="conflict").inc()
    raise DomainConflict()
