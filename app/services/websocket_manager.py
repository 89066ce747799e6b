from fastapi import WebSocket
from typing import Dict, List, Optional, Set
import asyncio
import json
import logging
from datetime import datetime

from app.services.notification_service import NotificationService, Toast

logger = logging.getLogger(__name__)

class WebSocketManager:
    def __init__(self):
        # Store active connections by client id
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe = None

    async def connect(self, websocket: WebSocket, client_id: str):
        """Register an accepted WebSocket under a client id"""
        # Note: websocket.accept() is called in the main endpoint, not here
        self._loop = asyncio.get_running_loop()

        if client_id not in self.active_connections:
            self.active_connections[client_id] = set()

        self.active_connections[client_id].add(websocket)
        logger.info(f"Client {client_id} connected. Total connections: {self.get_total_connections()}")

        # Send welcome message
        await self.send_personal_message(
            {
                "type": "connection",
                "message": "Connected to notification service",
                "client_id": client_id,
                "timestamp": datetime.now().isoformat()
            },
            websocket
        )

    def disconnect(self, websocket: WebSocket, client_id: str):
        """Disconnect a WebSocket of a client"""
        if client_id in self.active_connections:
            self.active_connections[client_id].discard(websocket)

            # Remove client if no more connections
            if not self.active_connections[client_id]:
                del self.active_connections[client_id]

            logger.info(f"Client {client_id} disconnected. Remaining connections: {self.get_total_connections()}")

    async def send_personal_message(self, message: dict, websocket: WebSocket) -> bool:
        """Send a message to a specific WebSocket connection"""
        try:
            await websocket.send_text(json.dumps(message))
            return True
        except Exception as e:
            logger.error(f"Error sending message to WebSocket: {e}")
            return False

    async def broadcast_to_all(self, message: dict):
        """Broadcast a message to all connected clients"""
        disconnected_websockets = set()

        for client_id, connections in list(self.active_connections.items()):
            for websocket in list(connections):
                if not await self.send_personal_message(message, websocket):
                    disconnected_websockets.add((websocket, client_id))

        # Clean up disconnected websockets
        for websocket, client_id in disconnected_websockets:
            self.disconnect(websocket, client_id)

    async def broadcast_toast(self, toast: Toast):
        """Send a structured toast notification to every connected client"""
        await self.broadcast_to_all({
            "type": "toast",
            "toast_type": toast.type.value,  # "success", "error", "warning", "info"
            "title": toast.title,
            "message": toast.message,
            "timestamp": toast.timestamp.isoformat(),
            "data": toast.data
        })

    def _forward_toast(self, toast: Toast):
        # Called from the thread that ran the store mutation
        loop = self._loop
        if not self.active_connections or loop is None or loop.is_closed():
            return
        asyncio.run_coroutine_threadsafe(self.broadcast_toast(toast), loop)

    def attach(self, notifier: NotificationService):
        """Forward every toast of ``notifier`` to the connected clients"""
        self.detach()
        self._unsubscribe = notifier.subscribe(self._forward_toast)

    def detach(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def get_connected_clients(self) -> List[str]:
        """Get list of currently connected client IDs"""
        return list(self.active_connections.keys())

    def get_total_connections(self) -> int:
        """Get total number of active connections"""
        return sum(len(connections) for connections in self.active_connections.values())

# Global instance
websocket_manager = WebSocketManager()
