"""Room membership and message fan-out over websockets."""

import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class RoomHub:
    """room_id -> {player_id: websocket}; knows nothing about game rules."""

    def __init__(self):
        self.rooms: dict[str, dict[str, WebSocket]] = {}

    def add(self, room_id: str, player_id: str, ws: WebSocket) -> None:
        self.rooms.setdefault(room_id, {})[player_id] = ws

    def remove(self, room_id: str, player_id: str) -> None:
        members = self.rooms.get(room_id)
        if members is None:
            return
        members.pop(player_id, None)
        if not members:
            del self.rooms[room_id]

    def members(self, room_id: str) -> list[str]:
        return list(self.rooms.get(room_id, {}).keys())

    async def broadcast(self, room_id: str, message: str) -> None:
        for player_id in self.members(room_id):
            await self.send_to(room_id, player_id, message)

    async def send_to(self, room_id: str, player_id: str, message: str) -> None:
        ws = self.rooms.get(room_id, {}).get(player_id)
        if ws is None:
            return
        try:
            await ws.send_text(message)
        except Exception as e:
            logger.warning("Send to %s in room %s failed: %s", player_id, room_id, e)
