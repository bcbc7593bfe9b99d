# backend/modules/kitchen/services/kitchen_websocket_manager.py

"""
WebSocket push of kitchen events to connected preparation screens.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import asyncio
import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)

ITEM_PREPARED = "item_prepared"
ITEM_UNPREPARED = "item_unprepared"
PREPARATION_STARTED = "preparation_started"
PREPARATION_COMPLETED = "preparation_completed"
PREPARATION_CANCELLED = "preparation_cancelled"


class KitchenWebSocketManager:
    """Keeps WebSocket connections per preparation screen"""

    def __init__(self):
        # screen_id -> open connections
        self.active_connections: Dict[int, List[WebSocket]] = {}
        self.lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, screen_id: int):
        await websocket.accept()

        async with self.lock:
            self.active_connections.setdefault(screen_id, []).append(websocket)

        logger.info(
            f"WebSocket connected for screen {screen_id}. "
            f"Total connections: {self.get_connection_count(screen_id)}"
        )

    def disconnect(self, websocket: WebSocket, screen_id: int):
        connections = self.active_connections.get(screen_id, [])
        if websocket not in connections:
            logger.warning(
                f"WebSocket not found in active connections for screen {screen_id}"
            )
            return

        connections.remove(websocket)
        if not connections:
            del self.active_connections[screen_id]
        logger.info(f"WebSocket disconnected for screen {screen_id}")

    async def broadcast_to_screen(self, screen_id: int, message: dict):
        """Send a message to every connection of a screen, dropping dead ones"""
        connections = list(self.active_connections.get(screen_id, []))
        if not connections:
            return

        message_text = json.dumps(message, default=str)
        dead_connections = []
        for websocket in connections:
            try:
                await websocket.send_text(message_text)
            except Exception as e:
                logger.error(f"Error broadcasting to screen {screen_id}: {str(e)}")
                dead_connections.append(websocket)

        for websocket in dead_connections:
            self.disconnect(websocket, screen_id)

    async def broadcast_to_all_screens(self, message: dict):
        tasks = [
            self.broadcast_to_screen(screen_id, message)
            for screen_id in list(self.active_connections)
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def notify(
        self,
        event: str,
        order_id: Optional[int],
        screen_id: Optional[int],
        data: Optional[Dict[str, Any]] = None,
    ):
        """
        Publish a kitchen event to every connected screen.

        Other screens display the order's per-screen progress, so events
        are not limited to the acting screen. Failures are logged only.
        """
        message = {
            "type": event,
            "order_id": order_id,
            "screen_id": screen_id,
            "data": data or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            await self.broadcast_to_all_screens(message)
        except Exception as e:
            logger.error(f"Failed to publish kitchen event {event}: {str(e)}")

    def get_connection_count(self, screen_id: int) -> int:
        return len(self.active_connections.get(screen_id, []))

    def get_all_connection_counts(self) -> Dict[int, int]:
        return {
            screen_id: len(connections)
            for screen_id, connections in self.active_connections.items()
        }

    async def close_all_connections(self):
        tasks = [
            websocket.close()
            for connections in self.active_connections.values()
            for websocket in connections
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        self.active_connections.clear()
        logger.info("All kitchen WebSocket connections closed")


# Global instance
kitchen_websocket_manager = KitchenWebSocketManager()
