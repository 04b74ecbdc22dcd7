from __future__ import annotations

from django.db.models.signals import post_save
from django.dispatch import receiver

from .broadcast import LogEntryCreated, publish_on_commit
from .models import AuditLog


@receiver(post_save, sender=AuditLog)
def broadcast_log_entry(sender, instance: AuditLog, created: bool, **kwargs):
    if not created:
        return
    publish_on_commit(
        LogEntryCreated(
            id=instance.id,
            message=instance.message,
            created_at=instance.created_at,
            team_color=instance.team.color if instance.team_id else None,
        )
    )
