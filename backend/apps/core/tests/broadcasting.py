from __future__ import annotations

from typing import Any, Dict, List, Tuple

from apps.core.broadcast import Broadcaster


class RecordingBroadcaster(Broadcaster):
    """Keeps published events in memory; point GAME_BROADCASTER at it in tests."""

    events: List[Tuple[str, str, Dict[str, Any]]] = []

    def publish(self, channel, event_name, payload):
        RecordingBroadcaster.events.append((channel, event_name, payload))

    @classmethod
    def reset(cls):
        cls.events = []

    @classmethod
    def names(cls) -> List[str]:
        return [name for _, name, _ in cls.events]


class FailingBroadcaster(Broadcaster):
    def publish(self, channel, event_name, payload):
        raise ConnectionError("transport down")
