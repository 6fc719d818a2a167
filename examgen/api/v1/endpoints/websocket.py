import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ....core.websocket_manager import websocket_manager

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.websocket("/ws/sessions/{session_id}")
async def websocket_session_endpoint(websocket: WebSocket, session_id: str):
    await websocket_manager.connect(websocket)
    await websocket_manager.join_session(websocket, session_id)

    try:
        await websocket.send_json({
            "type": "connection_established",
            "sessionId": session_id,
            "message": f"Connected to session {session_id} updates"
        })

        while True:
            try:
                data = await websocket.receive_json()
                if not isinstance(data, dict):
                    raise ValueError("message must be a JSON object")
                message_type = data.get("type")

                if message_type == "join-session":
                    new_session_id = data.get("sessionId")
                    if new_session_id:
                        await websocket_manager.join_session(websocket, new_session_id)
                        await websocket.send_json({
                            "type": "session-joined",
                            "sessionId": new_session_id
                        })

                elif message_type == "question-update":
                    target = data.get("sessionId") or session_id
                    await websocket_manager.broadcast_to_session(
                        target,
                        {"type": "question-updated", "data": data.get("data")},
                        exclude=websocket
                    )

                elif message_type == "ping":
                    await websocket.send_json({"type": "pong"})

                else:
                    logger.debug("Unknown WebSocket message type",
                                 session_id=session_id, message_type=message_type)

            except WebSocketDisconnect:
                break
            except ValueError as e:
                logger.warning("Invalid WebSocket message", session_id=session_id, error=str(e))
                await websocket.send_json({"type": "error", "message": "Invalid message"})

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected", session_id=session_id)
    except Exception as e:
        logger.error("WebSocket connection error", session_id=session_id, error=str(e))
    finally:
        await websocket_manager.disconnect(websocket)


@router.get("/ws/stats")
async def websocket_stats():
    return websocket_manager.get_stats()
