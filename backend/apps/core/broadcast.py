"""
Game event broadcasting.

Every state change the clients care about is described by one of the event
types below. Each type has a fixed wire name and payload schema. Events are
handed to a ``Broadcaster`` only after the surrounding transaction commits, so
a rolled-back mutation never produces an event. Delivery is best effort.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Union

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

SYSTEM_COLOR = "#fff"


@dataclass(frozen=True)
class OwnershipChanged:
    name: ClassVar[str] = "ownership-change"

    node_id: str
    team_id: int
    team_color: str

    def payload(self) -> Dict[str, Any]:
        return {"nodeId": self.node_id, "teamId": self.team_id, "teamColor": self.team_color}


@dataclass(frozen=True)
class ScoreChanged:
    name: ClassVar[str] = "score-change"

    team_id: int
    new_score: int

    def payload(self) -> Dict[str, Any]:
        return {"teamId": self.team_id, "newScore": self.new_score}


@dataclass(frozen=True)
class LogEntryCreated:
    name: ClassVar[str] = "new-log-entry"

    id: int
    message: str
    created_at: datetime
    team_color: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
            "teamColor": self.team_color or SYSTEM_COLOR,
        }


@dataclass(frozen=True)
class ResetRequired:
    name: ClassVar[str] = "full-reset-required"

    message: str

    def payload(self) -> Dict[str, Any]:
        return {"message": self.message}


GameEvent = Union[OwnershipChanged, ScoreChanged, LogEntryCreated, ResetRequired]


class Broadcaster:
    """Transport used to push events to connected clients."""

    def publish(self, channel: str, event_name: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class ChannelLayerBroadcaster(Broadcaster):
    """Publishes into a Channels group; GameConsumer relays to websockets."""

    def publish(self, channel: str, event_name: str, payload: Dict[str, Any]) -> None:
        channel_layer = get_channel_layer()
        async_to_sync(channel_layer.group_send)(
            channel,
            {"type": "game.event", "event": event_name, "payload": payload},
        )


def get_broadcaster() -> Broadcaster:
    return import_string(settings.GAME_BROADCASTER)()


def publish(event: GameEvent) -> None:
    try:
        get_broadcaster().publish(settings.GAME_BROADCAST_GROUP, event.name, event.payload())
    except Exception:
        # Broadcasting must not break the request flow
        logger.warning("Failed to publish %s", event.name, exc_info=True)


def publish_on_commit(event: GameEvent) -> None:
    transaction.on_commit(lambda: publish(event))
