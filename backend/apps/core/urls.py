from django.urls import path

from .views import (
    AuditLogListView,
    ControlView,
    HealthzView,
    MetricsView,
    ReadinessView,
    TeamListView,
)

urlpatterns = [
    path("teams", TeamListView.as_view()),
    path("logs", AuditLogListView.as_view()),
    path("admin/control", ControlView.as_view()),
    # Observability
    path("healthz", HealthzView.as_view()),
    path("readiness", ReadinessView.as_view()),
    path("metrics", MetricsView.as_view()),
]
