from __future__ import annotations

import logging

from django.db.models import Count
from rest_framework import permissions
from rest_framework.generics import ListAPIView, ListCreateAPIView, RetrieveAPIView, RetrieveUpdateDestroyAPIView
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.control import is_game_active
from apps.core.models import AuditLog, Team
from apps.core.serializers import AuditLogSerializer, TeamSerializer
from . import resolver, tick
from .models import Node
from .serializers import ActionRequestSerializer, NodeAdminSerializer, NodePublicSerializer

logger = logging.getLogger(__name__)


class NodeListView(ListAPIView):
    serializer_class = NodePublicSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["resource_type", "owner"]

    def get_queryset(self):
        return Node.objects.select_related("owner").order_by("name")


class NodeDetailView(RetrieveAPIView):
    queryset = Node.objects.select_related("owner")
    serializer_class = NodePublicSerializer
    permission_classes = [permissions.AllowAny]
    lookup_field = "id"


class ActionView(APIView):
    """
    Capture or harvest a node after scanning its credential.
    The acting team is named in the body; the node secret is the capability.
    """

    permission_classes = [permissions.AllowAny]
    throttle_scope = "node-action"

    def post(self, request):
        serializer = ActionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = resolver.resolve_action(
            node_id=data["nodeId"],
            team_name=data["teamName"],
            secret=data["secret"],
            requested=data.get("action"),
        )
        payload = {"success": result.success, "action": result.action, "message": result.message}
        if result.amount is not None:
            payload["amount"] = result.amount
        if result.new_score is not None:
            payload["newScore"] = result.new_score
        if result.node is not None:
            payload["node"] = NodePublicSerializer(result.node).data
        return Response(payload)


class TickView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        result = tick.run_tick()
        return Response(result.as_dict())


class GameStateView(APIView):
    """Everything a map client needs on first load."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        nodes = Node.objects.select_related("owner").order_by("name")
        teams = Team.objects.annotate(node_count=Count("nodes")).prefetch_related("resources").order_by("-score", "name")
        logs = AuditLog.objects.select_related("team").order_by("-created_at", "-id")[:20]
        return Response(
            {
                "isActive": is_game_active(),
                "nodes": NodePublicSerializer(nodes, many=True).data,
                "teams": TeamSerializer(teams, many=True).data,
                "logs": AuditLogSerializer(logs, many=True).data,
            }
        )


class AdminNodeListCreateView(ListCreateAPIView):
    queryset = Node.objects.all().order_by("name")
    serializer_class = NodeAdminSerializer
    permission_classes = [permissions.IsAdminUser]


class AdminNodeDetailView(RetrieveUpdateDestroyAPIView):
    queryset = Node.objects.all()
    serializer_class = NodeAdminSerializer
    permission_classes = [permissions.IsAdminUser]
    lookup_field = "id"

    def perform_destroy(self, instance):
        logger.info("Node %s (%s) deleted by %s", instance.id, instance.name, self.request.user)
        instance.delete()
