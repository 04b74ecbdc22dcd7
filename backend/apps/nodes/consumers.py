from __future__ import annotations

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.conf import settings


class GameConsumer(AsyncJsonWebsocketConsumer):
    """
    Streams game events (ownership, score, log, reset) to connected clients.
    Group: settings.GAME_BROADCAST_GROUP
    """

    async def connect(self):
        self.group_name = settings.GAME_BROADCAST_GROUP
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def game_event(self, event):
        # event: { "type": "game.event", "event": "<name>", "payload": { ... } }
        await self.send_json({"event": event["event"], "payload": event.get("payload", {})})
