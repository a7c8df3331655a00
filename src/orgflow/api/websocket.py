"""WebSocket API endpoints for real-time updates."""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from orgflow.factory import get_connection_manager, get_document_store
from orgflow.websocket.connection_manager import document_changed_message

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint for document change notifications.

    New clients first receive the current counts, then a message after every
    change. A ``ping`` text is answered with ``pong``.
    """
    connection_manager = get_connection_manager()
    await connection_manager.connect(websocket)
    try:
        tasks, notes = get_document_store().size()
        await websocket.send_json(document_changed_message(tasks, notes))
        while True:
            data = await websocket.receive_text()
            logger.debug(f"[WebSocket] Received from client: {data}")
            if data == "ping":
                await websocket.send_text("pong")

    except WebSocketDisconnect:
        logger.info("[WebSocket] Client disconnected normally")
        connection_manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"[WebSocket] Error: {e}", exc_info=True)
        connection_manager.disconnect(websocket)
