import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from examgen.core.websocket_manager import WebSocketManager


def _socket():
    websocket = MagicMock()
    websocket.accept = AsyncMock()
    websocket.send_text = AsyncMock()
    return websocket


class TestWebSocketManager:
    @pytest.fixture(autouse=True)
    def setup_manager(self):
        self.manager = WebSocketManager()

    @pytest.mark.asyncio
    async def test_broadcast_skips_sender(self):
        sender, peer, outsider = _socket(), _socket(), _socket()
        for websocket in (sender, peer, outsider):
            await self.manager.connect(websocket)
        await self.manager.join_session(sender, "s1")
        await self.manager.join_session(peer, "s1")
        await self.manager.join_session(outsider, "s2")

        delivered = await self.manager.broadcast_to_session(
            "s1", {"type": "question-updated", "data": {"id": "Q1"}}, exclude=sender
        )

        assert delivered == 1
        sender.send_text.assert_not_called()
        outsider.send_text.assert_not_called()
        message = json.loads(peer.send_text.call_args.args[0])
        assert message["type"] == "question-updated"
        assert message["data"] == {"id": "Q1"}
        assert message["session_id"] == "s1"

    @pytest.mark.asyncio
    async def test_dead_connection_dropped(self):
        healthy, broken = _socket(), _socket()
        broken.send_text.side_effect = RuntimeError("closed")
        for websocket in (healthy, broken):
            await self.manager.connect(websocket)
            await self.manager.join_session(websocket, "s1")

        delivered = await self.manager.broadcast_to_session("s1", {"type": "question-updated"})

        assert delivered == 1
        assert self.manager.get_session_connections("s1") == [healthy]

    @pytest.mark.asyncio
    async def test_disconnect_leaves_all_rooms(self):
        websocket = _socket()
        await self.manager.connect(websocket)
        await self.manager.join_session(websocket, "s1")
        await self.manager.join_session(websocket, "s2")

        await self.manager.disconnect(websocket)

        assert self.manager.get_stats() == {"total_connections": 0, "active_sessions": 0, "sessions": {}}

    @pytest.mark.asyncio
    async def test_join_requires_connect(self):
        websocket = _socket()

        await self.manager.join_session(websocket, "s1")

        assert self.manager.get_session_connections("s1") == []

    @pytest.mark.asyncio
    async def test_broadcast_to_empty_room(self):
        assert await self.manager.broadcast_to_session("nobody", {"type": "question-updated"}) == 0

    @pytest.mark.asyncio
    async def test_leave_session_keeps_other_rooms(self):
        websocket = _socket()
        await self.manager.connect(websocket)
        await self.manager.join_session(websocket, "s1")
        await self.manager.join_session(websocket, "s2")

        await self.manager.leave_session(websocket, "s1")

        assert self.manager.get_sessions(websocket) == {"s2"}
        assert self.manager.get_stats()["sessions"] == {"s2": 1}
