from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.core import audit, ledger
from apps.core.broadcast import ScoreChanged, publish_on_commit
from apps.core.control import is_game_active
from apps.core.exceptions import TeamNotFound
from apps.core.metrics import tick_team_settlements_total, ticks_total
from apps.core.models import AuditLog, Team
from . import registry

logger = logging.getLogger(__name__)


@dataclass
class TeamSettlement:
    team_id: int
    new_score: int
    added: int


@dataclass
class TickResult:
    processed_teams: int = 0
    details: List[TeamSettlement] = field(default_factory=list)
    failed_teams: List[int] = field(default_factory=list)
    message: Optional[str] = None

    def as_dict(self) -> dict:
        data = {
            "success": True,
            "processedTeams": self.processed_teams,
            "details": [{"teamId": d.team_id, "newScore": d.new_score, "added": d.added} for d in self.details],
            "failedTeams": self.failed_teams,
        }
        if self.message:
            data["message"] = self.message
        return data


def _breakdown(nodes) -> Dict[int, Dict[str, int]]:
    breakdown: Dict[int, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for node in nodes:
        breakdown[node.owner_id][node.resource_type] += node.capture_rate
    return {team_id: dict(types) for team_id, types in breakdown.items()}


def accrual_by_team() -> Dict[int, Dict[str, int]]:
    """Sum the capture rates of owned nodes into a per-team, per-type breakdown."""
    return _breakdown(registry.list_owned())


def _settle_team(team_id: int, now) -> Optional[TeamSettlement]:
    """
    Credit one team inside its own transaction.

    Ownership and the active flag are re-read under lock (nodes first, then the
    settings row), so a reset or capture committed since the grouping pass is
    honoured. Returns None when there is nothing left to credit.
    """
    with transaction.atomic():
        nodes = registry.lock_owned(team_id)
        if not nodes or not is_game_active(for_update=True):
            return None
        resources = _breakdown(nodes).get(team_id, {})
        added = sum(resources.values())
        if added <= 0:
            return None
        new_score = ledger.credit(team_id, resources)
        team = Team.objects.get(pk=team_id)
        audit.record(
            f"[INCOME] Team {team.name} earned {added} from controlled nodes.",
            kind=AuditLog.KIND_TICK,
            team=team,
            now=now,
        )
        publish_on_commit(ScoreChanged(team_id=team_id, new_score=new_score))
    return TeamSettlement(team_id=team_id, new_score=new_score, added=added)


def run_tick(now=None) -> TickResult:
    """
    Credit every owning team with the rates of the nodes it holds.
    Each team is settled in its own transaction; node timers are left alone.
    """
    if not is_game_active():
        ticks_total.labels(result="inactive").inc()
        return TickResult(message="Game is not active")

    updates = accrual_by_team()
    if not updates:
        ticks_total.labels(result="empty").inc()
        return TickResult(message="No controlled nodes")

    now = now or timezone.now()
    result = TickResult()
    for team_id in sorted(updates):
        try:
            settlement = _settle_team(team_id, now)
        except (DatabaseError, TeamNotFound, Team.DoesNotExist):
            logger.exception("Tick settlement failed for team %s", team_id)
            tick_team_settlements_total.labels(outcome="failed").inc()
            result.failed_teams.append(team_id)
            continue
        if settlement is None:
            # Lost its nodes or the game stopped since the grouping pass
            tick_team_settlements_total.labels(outcome="skipped").inc()
            continue
        tick_team_settlements_total.labels(outcome="settled").inc()
        result.details.append(settlement)

    result.processed_teams = len(result.details)
    ticks_total.labels(result="settled").inc()
    logger.info("Tick settled %d teams (%d failed)", result.processed_teams, len(result.failed_teams))
    return result
