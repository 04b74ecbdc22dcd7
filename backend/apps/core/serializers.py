from __future__ import annotations

from rest_framework import serializers

from .control import ACTION_CHOICES
from .models import AuditLog, ResourceLedgerEntry, Team


class ResourceLedgerEntrySerializer(serializers.ModelSerializer):
    type = serializers.CharField(source="resource_type", read_only=True)

    class Meta:
        model = ResourceLedgerEntry
        fields = ["type", "amount"]


class TeamSerializer(serializers.ModelSerializer):
    resources = ResourceLedgerEntrySerializer(many=True, read_only=True)
    nodeCount = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = ["id", "name", "color", "score", "resources", "nodeCount"]

    def get_nodeCount(self, obj):
        annotated = getattr(obj, "node_count", None)
        if annotated is not None:
            return annotated
        return obj.nodes.count()


class AuditLogSerializer(serializers.ModelSerializer):
    teamId = serializers.IntegerField(source="team_id", read_only=True, allow_null=True)
    teamColor = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = AuditLog
        fields = ["id", "message", "kind", "teamId", "teamColor", "createdAt"]

    def get_teamColor(self, obj):
        return obj.team.color if obj.team_id else None


class ControlRequestSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=ACTION_CHOICES)
