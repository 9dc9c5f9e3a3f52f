"""
Chat Repositories

Conversations keep their participant ids in a JSON list. Membership
queries match the quoted id inside the serialized list, which is exact
because ids are fixed-width UUID strings.
"""

import uuid
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import String, cast, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.models.chat import (
    ChatMessage,
    Conversation,
    ConversationType,
    Presence,
    TypingIndicator,
)
from causeconnect.repositories.base import BaseRepository
from causeconnect.repositories.toggle_repo import insert_ignore
from causeconnect.models.base import utcnow


def _participant_clause(user_id):
    return cast(Conversation.participants, String).like(f'%"{user_id}"%')


class ConversationRepository(BaseRepository[Conversation]):

    def __init__(self, db: AsyncSession):
        super().__init__(Conversation, db)

    async def list_for_user(self, user_id: UUID) -> List[Conversation]:
        """Conversations the user takes part in, most recently active first."""
        result = await self.db.execute(
            select(Conversation)
            .where(_participant_clause(user_id))
            .order_by(Conversation.updated_at.desc())
        )
        return list(result.scalars().all())

    async def find_private(self, user_a: UUID, user_b: UUID) -> Optional[Conversation]:
        """
        Existing two-party private chat between the users, if any.

        Scans ``user_b``'s conversations for an exact two-element participant
        match. Linear in that user's conversation count.
        """
        wanted = {str(user_a), str(user_b)}
        for conversation in await self.list_for_user(user_b):
            if conversation.type != ConversationType.PRIVATE:
                continue
            participants = conversation.participants or []
            if len(participants) == 2 and set(participants) == wanted:
                return conversation
        return None


class ChatMessageRepository(BaseRepository[ChatMessage]):

    def __init__(self, db: AsyncSession):
        super().__init__(ChatMessage, db)

    async def list_recent(self, conversation_id: UUID, limit: int) -> List[ChatMessage]:
        """The latest ``limit`` messages, returned oldest first."""
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
        )
        messages = list(result.scalars().all())
        messages.reverse()
        return messages

    async def list_all(self, conversation_id: UUID) -> List[ChatMessage]:
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at)
        )
        return list(result.scalars().all())


class TypingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def touch(self, conversation_id: UUID, user_id: UUID) -> None:
        existing = await self.db.execute(
            select(TypingIndicator).where(
                TypingIndicator.conversation_id == conversation_id,
                TypingIndicator.user_id == user_id,
            )
        )
        indicator = existing.scalar_one_or_none()
        if indicator is not None:
            indicator.updated_at = utcnow()
        else:
            now = utcnow()
            await self.db.execute(
                insert_ignore(self.db, TypingIndicator).values(
                    id=uuid.uuid4(),
                    conversation_id=conversation_id,
                    user_id=user_id,
                    created_at=now,
                    updated_at=now,
                )
            )
        await self.db.commit()

    async def clear(self, conversation_id: UUID, user_id: UUID) -> None:
        await self.db.execute(
            delete(TypingIndicator).where(
                TypingIndicator.conversation_id == conversation_id,
                TypingIndicator.user_id == user_id,
            )
        )
        await self.db.commit()

    async def active_since(self, conversation_id: UUID, since: datetime) -> List[TypingIndicator]:
        result = await self.db.execute(
            select(TypingIndicator).where(
                TypingIndicator.conversation_id == conversation_id,
                TypingIndicator.updated_at >= since,
            )
        )
        return list(result.scalars().all())


class PresenceRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UUID) -> Optional[Presence]:
        result = await self.db.execute(select(Presence).where(Presence.user_id == user_id))
        return result.scalar_one_or_none()

    async def upsert(self, user_id: UUID, status: str, is_online: bool) -> Presence:
        presence = await self.get(user_id)
        if presence is None:
            presence = Presence(user_id=user_id)
            self.db.add(presence)
        presence.status = status
        presence.is_online = is_online
        presence.last_seen = utcnow()
        await self.db.commit()
        await self.db.refresh(presence)
        return presence
