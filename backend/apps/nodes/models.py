from __future__ import annotations

import hmac
import secrets
import uuid

from django.db import models
from django.utils import timezone

from apps.core.models import ResourceType, Team


def generate_secret_key() -> str:
    return secrets.token_urlsafe(16)


class Node(models.Model):
    # Fixed ids are printed on the physical QR credential
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    resource_type = models.CharField(max_length=16, choices=ResourceType.CHOICES, default=ResourceType.AMMO)
    capture_rate = models.PositiveIntegerField(default=10)
    owner = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="nodes")
    last_settled_at = models.DateTimeField(default=timezone.now)
    secret_key = models.CharField(max_length=128, default=generate_secret_key)
    # Map position in percent; the engine never reads it
    x = models.FloatField(default=50.0)
    y = models.FloatField(default=50.0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(condition=models.Q(capture_rate__gt=0), name="node_capture_rate_positive"),
        ]

    def __str__(self) -> str:
        return self.name


def verify_secret(node: Node, submitted: str) -> bool:
    return hmac.compare_digest((submitted or "").encode("utf-8"), (node.secret_key or "").encode("utf-8"))
