from __future__ import annotations

from django.db import models
from django.utils import timezone


class ResourceType:
    MEAT = "MEAT"
    VEGETABLE = "VEGETABLE"
    RICE = "RICE"
    NOODLE = "NOODLE"
    BREAD = "BREAD"
    SEAFOOD = "SEAFOOD"
    SPICE = "SPICE"
    DAIRY = "DAIRY"
    AMMO = "AMMO"

    CHOICES = [
        (MEAT, "Meat"),
        (VEGETABLE, "Vegetable"),
        (RICE, "Rice"),
        (NOODLE, "Noodle"),
        (BREAD, "Bread"),
        (SEAFOOD, "Seafood"),
        (SPICE, "Spice"),
        (DAIRY, "Dairy"),
        (AMMO, "Ammo"),
    ]


class Team(models.Model):
    name = models.CharField(max_length=120, unique=True)
    color = models.CharField(max_length=16, default="#ffffff")
    score = models.BigIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(score__gte=0), name="team_score_non_negative"),
        ]

    def __str__(self) -> str:
        return self.name


class ResourceLedgerEntry(models.Model):
    """Accumulated stockpile of one resource type for one team."""

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="resources")
    resource_type = models.CharField(max_length=16, choices=ResourceType.CHOICES)
    amount = models.BigIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["team", "resource_type"], name="uniq_ledger_team_type"),
            models.CheckConstraint(condition=models.Q(amount__gte=0), name="ledger_amount_non_negative"),
        ]

    def __str__(self) -> str:
        return f"{self.team_id}:{self.resource_type}={self.amount}"


class AuditLog(models.Model):
    KIND_CAPTURE = "capture"
    KIND_HARVEST = "harvest"
    KIND_TICK = "tick"
    KIND_CONTROL = "control"
    KIND_CHOICES = [
        (KIND_CAPTURE, "Capture"),
        (KIND_HARVEST, "Harvest"),
        (KIND_TICK, "Tick"),
        (KIND_CONTROL, "Control"),
    ]

    message = models.TextField()
    team = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="log_entries")
    kind = models.CharField(max_length=16, choices=KIND_CHOICES, default=KIND_CONTROL)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.created_at} {self.message}"

    def save(self, *args, **kwargs):
        # Entries are append-only
        if not self._state.adding:
            raise ValueError("Audit log entries are immutable.")
        super().save(*args, **kwargs)


class GameSettings(models.Model):
    """
    Global game control state.
    Use a singleton row (singleton flag ensures one row); no row means inactive.
    """

    singleton = models.BooleanField(default=True, unique=True)
    is_active = models.BooleanField(default=False)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"Game settings (active={self.is_active})"
