"""
WebSocket Manager

Live listeners for chat conversations. Every conversation event (new
message, edit, reaction, typing, read receipt, presence change) is published
on the Redis channel ``chat:{conversation_id}``; each API instance subscribes
to ``chat:*`` and relays to the sockets it holds. With Redis disabled or
unreachable, events are delivered to local sockets only.
"""

import asyncio
import json
import logging
from typing import Dict, Set, Optional, Any
from dataclasses import dataclass, asdict
from datetime import datetime, timezone

from fastapi import WebSocket

from causeconnect.core.config import settings
from causeconnect.db.redis import get_redis

logger = logging.getLogger(__name__)


# ============================================================
# Message Types
# ============================================================

@dataclass
class WebSocketMessage:
    """Envelope pushed to listeners."""
    type: str
    conversation_id: str
    data: Dict[str, Any]
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str)

    @classmethod
    def from_json(cls, data: str) -> "WebSocketMessage":
        return cls(**json.loads(data))


class MessageTypes:
    NEW_MESSAGE = "new_message"
    MESSAGE_UPDATED = "message_updated"
    READ = "read"
    TYPING = "typing"
    PRESENCE = "presence"
    CONNECTED = "connected"
    ERROR = "error"


# ============================================================
# Connection Manager
# ============================================================

class ConnectionManager:
    """
    Tracks WebSocket connections per conversation and per user, and fans
    events out to them.
    """

    def __init__(self):
        # conversation_id -> sockets
        self._conversation_connections: Dict[str, Set[WebSocket]] = {}
        # user_id -> sockets
        self._user_connections: Dict[str, Set[WebSocket]] = {}
        # socket -> (user_id, conversation_id)
        self._connection_info: Dict[WebSocket, tuple] = {}

        self._redis_subscriber_task: Optional[asyncio.Task] = None

    # ============================================================
    # Connection Management
    # ============================================================

    async def connect(
        self,
        websocket: WebSocket,
        user_id: str,
        conversation_id: str
    ) -> None:
        """
        Accept and register a listener for one conversation.
        """
        await websocket.accept()

        self._conversation_connections.setdefault(conversation_id, set()).add(websocket)
        self._user_connections.setdefault(user_id, set()).add(websocket)
        self._connection_info[websocket] = (user_id, conversation_id)

        logger.info(
            f"WebSocket connected: user={user_id}, conversation={conversation_id}. "
            f"Total connections for conversation: {len(self._conversation_connections[conversation_id])}"
        )

        await self._send_to_socket(websocket, WebSocketMessage(
            type=MessageTypes.CONNECTED,
            conversation_id=conversation_id,
            data={"userId": user_id, "status": "connected"}
        ))

        if settings.REDIS_ENABLED:
            await self._ensure_redis_subscriber()

    def disconnect(self, websocket: WebSocket) -> None:
        """Unsubscribe a listener. Safe to call twice."""
        info = self._connection_info.pop(websocket, None)
        if info is None:
            return

        user_id, conversation_id = info

        sockets = self._conversation_connections.get(conversation_id)
        if sockets is not None:
            sockets.discard(websocket)
            if not sockets:
                del self._conversation_connections[conversation_id]

        sockets = self._user_connections.get(user_id)
        if sockets is not None:
            sockets.discard(websocket)
            if not sockets:
                del self._user_connections[user_id]

        logger.info(f"WebSocket disconnected: user={user_id}, conversation={conversation_id}")

    def listener_count(self, conversation_id: str) -> int:
        return len(self._conversation_connections.get(conversation_id, ()))

    # ============================================================
    # Broadcasting
    # ============================================================

    async def broadcast_to_conversation(
        self,
        conversation_id: str,
        message: WebSocketMessage
    ) -> None:
        """
        Publish an event for every listener of a conversation, on any instance.
        """
        if not settings.REDIS_ENABLED:
            await self._deliver_to_conversation_local(conversation_id, message)
            return

        channel = f"chat:{conversation_id}"
        try:
            redis = await get_redis()
            await redis.publish(channel, message.to_json())
            logger.debug(f"Published {message.type} to Redis channel {channel}")
        except Exception as e:
            logger.error(f"Failed to publish to Redis: {e}")
            await self._deliver_to_conversation_local(conversation_id, message)

    async def _deliver_to_conversation_local(
        self,
        conversation_id: str,
        message: WebSocketMessage
    ) -> None:
        connections = self._conversation_connections.get(conversation_id, set())

        if not connections:
            logger.debug(f"No local connections for conversation {conversation_id}")
            return

        disconnected = []
        for websocket in list(connections):
            try:
                await self._send_to_socket(websocket, message)
            except Exception as e:
                logger.warning(f"Failed to send to websocket: {e}")
                disconnected.append(websocket)

        for ws in disconnected:
            self.disconnect(ws)

    async def _send_to_socket(
        self,
        websocket: WebSocket,
        message: WebSocketMessage
    ) -> None:
        await websocket.send_text(message.to_json())

    # ============================================================
    # Redis Pub/Sub Subscriber
    # ============================================================

    async def _ensure_redis_subscriber(self) -> None:
        if self._redis_subscriber_task is None or self._redis_subscriber_task.done():
            self._redis_subscriber_task = asyncio.create_task(
                self._redis_subscriber_loop()
            )
            logger.info("Started Redis Pub/Sub subscriber task")

    async def _redis_subscriber_loop(self) -> None:
        """
        Subscribe to ``chat:*`` and relay each event to local listeners.
        """
        try:
            redis = await get_redis()
            pubsub = redis.pubsub()
            await pubsub.psubscribe("chat:*")
            logger.info("Subscribed to Redis pattern: chat:*")

            async for message in pubsub.listen():
                if message["type"] != "pmessage":
                    continue
                try:
                    channel = message["channel"]
                    if isinstance(channel, bytes):
                        channel = channel.decode("utf-8")
                    conversation_id = channel.split(":", 1)[1]

                    data = message["data"]
                    if isinstance(data, bytes):
                        data = data.decode("utf-8")

                    await self._deliver_to_conversation_local(
                        conversation_id,
                        WebSocketMessage.from_json(data)
                    )
                except Exception as e:
                    logger.error(f"Error processing Redis message: {e}")

        except asyncio.CancelledError:
            logger.info("Redis subscriber task cancelled")
            raise
        except Exception as e:
            logger.error(f"Redis subscriber error: {e}")
            await asyncio.sleep(5)
            self._redis_subscriber_task = None
            if self._connection_info:
                await self._ensure_redis_subscriber()

    async def shutdown(self) -> None:
        """Cancel the subscriber and close every socket."""
        if self._redis_subscriber_task:
            self._redis_subscriber_task.cancel()
            try:
                await self._redis_subscriber_task
            except asyncio.CancelledError:
                pass

        for websocket in list(self._connection_info.keys()):
            try:
                await websocket.close()
            except RuntimeError as e:
                logger.debug(f"Socket already closed: {e}")

        self._conversation_connections.clear()
        self._user_connections.clear()
        self._connection_info.clear()

        logger.info("WebSocket ConnectionManager shutdown complete")


# ============================================================
# Singleton Instance
# ============================================================

_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Get the singleton ConnectionManager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager


async def shutdown_connection_manager() -> None:
    """Shutdown the connection manager on app shutdown."""
    global _connection_manager
    if _connection_manager is not None:
        await _connection_manager.shutdown()
        _connection_manager = None
