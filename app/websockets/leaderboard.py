import logging
from fastapi import WebSocket, WebSocketDisconnect
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from app.leaderboard.utils import get_leaderboard_data, serialize_leaderboard

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.active_connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: dict):
        # Iterate over a copy; dead sockets are dropped as we go.
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as exc:
                logger.warning("Dropping leaderboard listener: %s", exc)
                self.disconnect(connection)


manager = ConnectionManager()


async def leaderboard_websocket_endpoint(websocket: WebSocket, db: AsyncSession):
    """Send the current snapshot on connect; later snapshots arrive via broadcast after each rebuild."""
    await manager.connect(websocket)
    try:
        entries = await get_leaderboard_data(db)
        snapshot = serialize_leaderboard(entries)
        # Don't hold a pooled connection while the socket sits idle.
        await db.close()
        await websocket.send_json({"leaderboard": snapshot})
        while True:
            # Client messages are ignored; receiving keeps the connection open until it closes.
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Leaderboard listener disconnected")
    finally:
        manager.disconnect(websocket)
