import json
from typing import Dict, List, Optional, Set
from datetime import datetime

import structlog
from fastapi import WebSocket

logger = structlog.get_logger(__name__)


class WebSocketManager:
    """Tracks websocket connections grouped into per-session rooms."""

    def __init__(self):
        self._rooms: Dict[str, List[WebSocket]] = {}
        self._connection_metadata: Dict[WebSocket, Dict] = {}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connection_metadata[websocket] = {
            "connected_at": datetime.utcnow(),
            "sessions": set()
        }

    async def join_session(self, websocket: WebSocket, session_id: str) -> None:
        if websocket not in self._connection_metadata:
            return

        room = self._rooms.setdefault(session_id, [])
        if websocket not in room:
            room.append(websocket)
        self._connection_metadata[websocket]["sessions"].add(session_id)
        logger.info("websocket_joined_session", session_id=session_id, room_size=len(room))

    async def leave_session(self, websocket: WebSocket, session_id: str) -> None:
        room = self._rooms.get(session_id)
        if room and websocket in room:
            room.remove(websocket)
            if not room:
                del self._rooms[session_id]

        if websocket in self._connection_metadata:
            self._connection_metadata[websocket]["sessions"].discard(session_id)

    async def disconnect(self, websocket: WebSocket) -> None:
        if websocket not in self._connection_metadata:
            return

        for session_id in list(self._connection_metadata[websocket]["sessions"]):
            await self.leave_session(websocket, session_id)

        del self._connection_metadata[websocket]

    async def broadcast_to_session(
        self,
        session_id: str,
        message: Dict,
        exclude: Optional[WebSocket] = None
    ) -> int:
        """Send message to every member of the room except exclude; returns delivery count."""
        members = [ws for ws in self._rooms.get(session_id, []) if ws is not exclude]
        if not members:
            return 0

        message_json = json.dumps({
            "session_id": session_id,
            "timestamp": datetime.utcnow().isoformat(),
            **message
        })

        delivered = 0
        dead_connections = []
        for websocket in members:
            try:
                await websocket.send_text(message_json)
                delivered += 1
            except Exception as e:
                logger.warning("websocket_send_failed", session_id=session_id, error=str(e))
                dead_connections.append(websocket)

        for dead_ws in dead_connections:
            await self.disconnect(dead_ws)

        return delivered

    def get_session_connections(self, session_id: str) -> List[WebSocket]:
        return list(self._rooms.get(session_id, []))

    def get_sessions(self, websocket: WebSocket) -> Set[str]:
        metadata = self._connection_metadata.get(websocket)
        return set(metadata["sessions"]) if metadata else set()

    def get_stats(self) -> Dict:
        return {
            "total_connections": len(self._connection_metadata),
            "active_sessions": len(self._rooms),
            "sessions": {session_id: len(room) for session_id, room in self._rooms.items()}
        }


# Global WebSocket manager instance
websocket_manager = WebSocketManager()
