"""WebSocket relay and ConnectionManager. Route: /ws.

Every connection is an independent session: frames received on a socket are
evaluated and the feedback is sent back on that same socket only.
"""
from __future__ import annotations

import json
import uuid
from typing import Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from posturecheck.api.routers.posture import build_feedback
from posturecheck.api.schemas import PostureInput, SocketError

router = APIRouter(tags=["ws"])


class ConnectionManager:
    def __init__(self) -> None:
        self._sessions: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        session_id = uuid.uuid4().hex[:12]
        self._sessions[session_id] = websocket
        return session_id

    async def disconnect(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    @property
    def count(self) -> int:
        return len(self._sessions)


manager = ConnectionManager()


def _handle_message(raw: str | bytes) -> dict:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            return SocketError(error="invalid_payload", detail=str(exc)).model_dump()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        return SocketError(error="invalid_json", detail=str(exc)).model_dump()
    if not isinstance(data, dict):
        return SocketError(error="invalid_payload", detail="expected a JSON object").model_dump()
    try:
        payload = PostureInput.model_validate(data)
    except ValidationError as exc:
        return SocketError(error="invalid_payload", detail=str(exc)).model_dump()
    return build_feedback(payload).model_dump()


@router.websocket("/ws")
async def ws_endpoint(websocket: WebSocket):
    session_id = await manager.connect(websocket)
    logger.info("A user connected: {}", session_id)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            reply = _handle_message(raw)
            if reply.get("event") == "error":
                logger.warning("Malformed frame from {}: {}", session_id, reply.get("error"))
            await websocket.send_json(reply)
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(session_id)
        logger.info("User disconnected: {}", session_id)
