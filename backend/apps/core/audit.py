from __future__ import annotations

from typing import Optional

from django.utils import timezone

from .models import AuditLog, Team


def record(message: str, kind: str, team: Optional[Team] = None, now=None) -> AuditLog:
    """Append an entry to the game log; the broadcast happens on commit (see signals)."""
    return AuditLog.objects.create(message=message, kind=kind, team=team, created_at=now or timezone.now())
