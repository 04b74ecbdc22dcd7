from __future__ import annotations

import logging

from django.db import DatabaseError, connection
from django.db.models import Count
from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import control
from .models import AuditLog, Team
from .serializers import AuditLogSerializer, ControlRequestSerializer, TeamSerializer

logger = logging.getLogger(__name__)


class TeamListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        teams = (
            Team.objects.annotate(node_count=Count("nodes"))
            .prefetch_related("resources")
            .order_by("-score", "name")
        )
        return Response(TeamSerializer(teams, many=True).data)


class AuditLogListView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        qs = AuditLog.objects.select_related("team").order_by("-created_at", "-id")
        team = request.query_params.get("team")
        if team:
            if not team.isdigit():
                return Response({"success": False, "error": "team must be an id"}, status=status.HTTP_400_BAD_REQUEST)
            qs = qs.filter(team_id=int(team))
        return Response(AuditLogSerializer(qs[:20], many=True).data)


class ControlView(APIView):
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        serializer = ControlRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        action = serializer.validated_data["action"]
        logger.info("Control action %s requested by %s", action, request.user)
        result = control.apply(action)
        return Response({"success": result.success, "message": result.message})


class HealthzView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"status": "ok"})


class ReadinessView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError:
            logger.exception("Readiness check failed")
            return Response({"status": "unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "ready"})


class MetricsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        # Expose Prometheus metrics
        data = generate_latest()
        return HttpResponse(data, content_type=CONTENT_TYPE_LATEST)
