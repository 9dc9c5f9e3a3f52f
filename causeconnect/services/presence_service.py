"""
Presence Service

One presence row per user: online/away/busy/offline plus last-seen. Login
and logout set it imperatively; clients may also PUT their status. Every
change is pushed to the user's conversations so open chat views update live.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models.chat import PresenceStatus
from causeconnect.repositories.chat_repo import ConversationRepository, PresenceRepository
from causeconnect.schemas.chat import PresenceResponse
from causeconnect.services.websocket_manager import (
    MessageTypes,
    WebSocketMessage,
    get_connection_manager,
)
from causeconnect.core.exceptions import ValidationFailed

logger = logging.getLogger(__name__)


class PresenceService:

    def __init__(self, db: AsyncSession):
        self.db = db
        self.presence_repo = PresenceRepository(db)
        self.conversation_repo = ConversationRepository(db)

    async def set_status(self, user_id: UUID, status: str) -> PresenceResponse:
        if status not in PresenceStatus.ALL:
            raise ValidationFailed(f"Invalid status: {status}")

        presence = await self.presence_repo.upsert(
            user_id, status, is_online=status != PresenceStatus.OFFLINE
        )
        response = PresenceResponse(
            user_id=user_id,
            status=presence.status,
            is_online=presence.is_online,
            last_seen=presence.last_seen,
        )

        manager = get_connection_manager()
        payload = response.model_dump(mode="json", by_alias=True)
        for conversation in await self.conversation_repo.list_for_user(user_id):
            await manager.broadcast_to_conversation(
                str(conversation.id),
                WebSocketMessage(
                    type=MessageTypes.PRESENCE,
                    conversation_id=str(conversation.id),
                    data=payload,
                ),
            )

        logger.debug(f"Presence for {user_id} set to {status}")
        return response

    async def get_status(self, user_id: UUID) -> PresenceResponse:
        presence = await self.presence_repo.get(user_id)
        if presence is None:
            return PresenceResponse(user_id=user_id, status=PresenceStatus.OFFLINE, is_online=False)
        return PresenceResponse(
            user_id=user_id,
            status=presence.status,
            is_online=presence.is_online,
            last_seen=presence.last_seen,
        )
