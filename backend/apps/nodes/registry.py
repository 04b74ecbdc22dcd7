from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional, Union

from django.db.models import QuerySet

from apps.core.exceptions import NodeNotFound
from apps.core.models import Team
from .models import Node


def _node_pk(node_id: Union[str, uuid.UUID]) -> uuid.UUID:
    if isinstance(node_id, uuid.UUID):
        return node_id
    try:
        return uuid.UUID(str(node_id))
    except (TypeError, ValueError):
        raise NodeNotFound()


def _fetch(qs: QuerySet, node_id) -> Node:
    try:
        return qs.get(pk=_node_pk(node_id))
    except Node.DoesNotExist:
        raise NodeNotFound()


def get_node(node_id) -> Node:
    return _fetch(Node.objects.all(), node_id)


def lock_node(node_id) -> Node:
    """Fetch a node and lock its row until the caller's transaction ends."""
    return _fetch(Node.objects.select_for_update(), node_id)


def _observed(node: Node) -> QuerySet:
    # Matches only if nobody changed the owner or timer since `node` was read
    return Node.objects.filter(pk=node.pk, owner_id=node.owner_id, last_settled_at=node.last_settled_at)


def set_owner(node: Node, team: Team, settled_at: datetime) -> bool:
    settled_at = max(settled_at, node.last_settled_at)
    updated = _observed(node).update(owner=team, last_settled_at=settled_at)
    if updated:
        node.owner = team
        node.last_settled_at = settled_at
    return bool(updated)


def reset_timer(node: Node, settled_at: datetime) -> bool:
    settled_at = max(settled_at, node.last_settled_at)
    updated = _observed(node).update(last_settled_at=settled_at)
    if updated:
        node.last_settled_at = settled_at
    return bool(updated)


def list_owned(team_id: Optional[int] = None) -> List[Node]:
    qs = Node.objects.filter(owner__isnull=False)
    if team_id is not None:
        qs = qs.filter(owner_id=team_id)
    return list(qs.order_by("owner_id", "name"))


def lock_owned(team_id: int) -> List[Node]:
    """Nodes currently held by the team, locked until the caller's transaction ends."""
    return list(Node.objects.select_for_update().filter(owner_id=team_id).order_by("pk"))


def release_all(now: datetime) -> int:
    return Node.objects.update(owner=None, last_settled_at=now)
