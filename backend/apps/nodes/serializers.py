from __future__ import annotations

from rest_framework import serializers

from .models import Node
from .resolver import ACTION_CHOICES


class NodePublicSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source="resource_type", read_only=True)
    captureRate = serializers.IntegerField(source="capture_rate", read_only=True)
    ownerId = serializers.IntegerField(source="owner_id", read_only=True, allow_null=True)
    ownerColor = serializers.SerializerMethodField()
    lastSettledAt = serializers.DateTimeField(source="last_settled_at", read_only=True)

    class Meta:
        model = Node
        fields = ["id", "name", "type", "captureRate", "ownerId", "ownerColor", "lastSettledAt", "x", "y"]

    def get_ownerColor(self, obj):
        return obj.owner.color if obj.owner_id else None


class NodeAdminSerializer(serializers.ModelSerializer):
    class Meta:
        model = Node
        fields = [
            "id",
            "name",
            "resource_type",
            "capture_rate",
            "owner",
            "last_settled_at",
            "secret_key",
            "x",
            "y",
            "created_at",
        ]
        read_only_fields = ["owner", "last_settled_at", "created_at"]
        extra_kwargs = {"secret_key": {"required": False}}

    def validate_capture_rate(self, value):
        if value <= 0:
            raise serializers.ValidationError("capture_rate must be positive.")
        return value


class ActionRequestSerializer(serializers.Serializer):
    nodeId = serializers.CharField()
    teamName = serializers.CharField()
    secret = serializers.CharField()
    action = serializers.ChoiceField(choices=ACTION_CHOICES, required=False)
