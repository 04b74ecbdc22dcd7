from __future__ import annotations

from typing import Dict

from django.db import transaction
from django.db.models import F

from .exceptions import TeamNotFound
from .models import ResourceLedgerEntry, Team


def get_team_by_name(name: str) -> Team:
    try:
        return Team.objects.get(name=name)
    except Team.DoesNotExist:
        raise TeamNotFound()


def _check_amount(amount: int) -> None:
    if not isinstance(amount, int) or amount <= 0:
        raise ValueError(f"credit amount must be a positive integer, got {amount!r}")


def increment_score(team_id: int, amount: int) -> int:
    """Add ``amount`` to the team's score and return the new score."""
    _check_amount(amount)
    with transaction.atomic():
        updated = Team.objects.filter(pk=team_id).update(score=F("score") + amount)
        if not updated:
            raise TeamNotFound()
        return Team.objects.values_list("score", flat=True).get(pk=team_id)


def credit_resource(team_id: int, resource_type: str, amount: int) -> None:
    """Upsert the (team, type) ledger entry and add ``amount`` to it."""
    _check_amount(amount)
    with transaction.atomic():
        ResourceLedgerEntry.objects.bulk_create(
            [ResourceLedgerEntry(team_id=team_id, resource_type=resource_type, amount=0)],
            ignore_conflicts=True,
        )
        ResourceLedgerEntry.objects.filter(team_id=team_id, resource_type=resource_type).update(
            amount=F("amount") + amount
        )


def credit(team_id: int, breakdown: Dict[str, int]) -> int:
    """
    Credit a per-resource-type breakdown to a team.
    Score grows by the sum of the breakdown; score and ledger are written together.
    """
    total = sum(breakdown.values())
    with transaction.atomic():
        new_score = increment_score(team_id, total)
        for resource_type, amount in sorted(breakdown.items()):
            credit_resource(team_id, resource_type, amount)
    return new_score
