"""Push document change notifications to WebSocket clients."""

import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


def document_changed_message(tasks: int, notes: int) -> dict[str, Any]:
    """Build the message sent to clients when the document changed."""
    return {"type": "document_changed", "tasks": tasks, "notes": notes}


class ConnectionManager:
    """Registry of connected clients that should hear about document changes."""

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"[ConnectionManager] {len(self.active_connections)} clients listening")

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info(f"[ConnectionManager] {len(self.active_connections)} clients listening")

    async def notify_document_changed(self, size: tuple[int, int]) -> None:
        """Send the new task and note counts to every client.

        A client that cannot be reached is forgotten.
        """
        tasks, notes = size
        message = document_changed_message(tasks, notes)
        for websocket in list(self.active_connections):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning(f"[ConnectionManager] Dropping client after failed send: {e}")
                self.disconnect(websocket)
