from django.urls import path

from .views import (
    ActionView,
    AdminNodeDetailView,
    AdminNodeListCreateView,
    GameStateView,
    NodeDetailView,
    NodeListView,
    TickView,
)

urlpatterns = [
    path("nodes", NodeListView.as_view()),
    path("nodes/<uuid:id>", NodeDetailView.as_view()),
    path("action", ActionView.as_view()),
    path("game/state", GameStateView.as_view()),
    path("game/tick", TickView.as_view()),
    # Admin
    path("admin/nodes", AdminNodeListCreateView.as_view()),
    path("admin/nodes/<uuid:id>", AdminNodeDetailView.as_view()),
]
