"""
Chat Service

Conversations, messages, read receipts, typing indicators, reactions and
attachments. Conversations are documents:

- ``participants``: list of user ids
- ``unread_counts``: {user_id: n}, bumped for everyone but the sender on
  each message, zeroed by the reader on mark-read
- messages carry ``read_by`` and ``reactions`` ({emoji: [user_id, ...]})

Every mutation is pushed to live listeners through the ConnectionManager.
"""

import logging
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.core.config import settings
from causeconnect.core.exceptions import Forbidden, NotFound, ValidationFailed
from causeconnect.models.base import utcnow
from causeconnect.models.chat import ChatMessage, Conversation, ConversationType
from causeconnect.repositories.chat_repo import (
    ChatMessageRepository,
    ConversationRepository,
    TypingRepository,
)
from causeconnect.repositories.squad_repo import SquadRepository
from causeconnect.repositories.user_repo import UserRepository
from causeconnect.schemas.chat import (
    Attachment,
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    TypingUser,
)
from causeconnect.services.websocket_manager import (
    MessageTypes,
    WebSocketMessage,
    get_connection_manager,
)
from causeconnect.storage import get_storage
from causeconnect.utils.file_utils import attachment_kind, detect_mime_type, sanitize_filename
from causeconnect.utils.time import now_millis

logger = logging.getLogger(__name__)

ATTACHMENT_PREVIEW = "Sent an attachment"


def conversation_response(conversation: Conversation, user_id: UUID) -> ConversationResponse:
    return ConversationResponse(
        id=conversation.id,
        type=conversation.type,
        participants=list(conversation.participants or []),
        group_name=conversation.group_name,
        group_avatar=conversation.group_avatar,
        squad_id=conversation.squad_id,
        last_message=conversation.last_message,
        last_sender_id=conversation.last_sender_id,
        last_message_at=conversation.last_message_at,
        unread_count=(conversation.unread_counts or {}).get(str(user_id), 0),
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
    )


def message_response(message: ChatMessage) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        conversation_id=message.conversation_id,
        sender_id=message.sender_id,
        text=message.text,
        attachments=list(message.attachments or []),
        read_by=list(message.read_by or []),
        reactions=dict(message.reactions or {}),
        edited=message.edited,
        deleted=message.deleted,
        created_at=message.created_at,
    )


class ChatService:
    """Service for the chat/presence layer."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.conversation_repo = ConversationRepository(db)
        self.message_repo = ChatMessageRepository(db)
        self.typing_repo = TypingRepository(db)
        self.user_repo = UserRepository(db)
        self.squad_repo = SquadRepository(db)
        self.manager = get_connection_manager()

    # ============================================================
    # Access
    # ============================================================

    async def get_conversation_for(self, user_id: UUID, conversation_id: UUID) -> Conversation:
        """
        Raises:
            NotFound: Unknown conversation
            Forbidden: Caller is not a participant
        """
        conversation = await self.conversation_repo.get_by_id(conversation_id)
        if not conversation:
            raise NotFound("Conversation not found")
        if str(user_id) not in (conversation.participants or []):
            raise Forbidden("You are not a participant in this conversation")
        return conversation

    async def _publish(self, conversation_id: UUID, event_type: str, data: dict) -> None:
        await self.manager.broadcast_to_conversation(
            str(conversation_id),
            WebSocketMessage(type=event_type, conversation_id=str(conversation_id), data=data),
        )

    # ============================================================
    # Conversations
    # ============================================================

    async def create_conversation(self, user_id: UUID, data: ConversationCreate) -> Conversation:
        if data.type == ConversationType.GROUP:
            return await self.create_group(
                user_id,
                data.participants or [],
                group_name=data.group_name,
                group_avatar=data.group_avatar,
                squad_id=data.squad_id,
            )
        return await self.start_private(user_id, data.participant_id)

    async def start_private(self, user_id: UUID, other_id: UUID) -> Conversation:
        """
        Open (or reuse) the two-party chat between the caller and ``other_id``.
        """
        if other_id == user_id:
            raise ValidationFailed("Cannot start a conversation with yourself")

        other = await self.user_repo.get_by_id(other_id)
        if not other:
            raise NotFound("User not found")

        if await self.user_repo.is_blocked_between(user_id, other_id):
            raise Forbidden("You cannot message this user")

        existing = await self.conversation_repo.find_private(user_id, other_id)
        if existing:
            return existing

        conversation = await self.conversation_repo.create(
            type=ConversationType.PRIVATE,
            participants=[str(user_id), str(other_id)],
            unread_counts={str(user_id): 0, str(other_id): 0},
            created_by=user_id,
        )
        logger.info(f"Private conversation {conversation.id} created by {user_id}")
        return conversation

    async def create_group(
        self,
        user_id: UUID,
        participant_ids: List[UUID],
        group_name: Optional[str] = None,
        group_avatar: Optional[str] = None,
        squad_id: Optional[UUID] = None,
    ) -> Conversation:
        participants = [str(user_id)]
        for pid in participant_ids:
            if str(pid) not in participants:
                participants.append(str(pid))

        if len(participants) < 2:
            raise ValidationFailed("A conversation needs at least 2 participants")

        for pid in participants[1:]:
            if not await self.user_repo.get_by_id(UUID(pid)):
                raise NotFound(f"User not found: {pid}")

        if squad_id is not None:
            squad = await self.squad_repo.get_by_id(squad_id)
            if not squad:
                raise NotFound("Squad not found")
            if not await self.squad_repo.get_membership(squad_id, user_id):
                raise Forbidden("Only squad members can create a squad chat")
            group_name = group_name or squad.name
            group_avatar = group_avatar or squad.avatar

        conversation = await self.conversation_repo.create(
            type=ConversationType.GROUP,
            participants=participants,
            unread_counts={pid: 0 for pid in participants},
            group_name=group_name,
            group_avatar=group_avatar,
            squad_id=squad_id,
            created_by=user_id,
        )
        logger.info(f"Group conversation {conversation.id} created with {len(participants)} participants")
        return conversation

    async def list_conversations(self, user_id: UUID) -> List[ConversationResponse]:
        conversations = await self.conversation_repo.list_for_user(user_id)
        return [conversation_response(c, user_id) for c in conversations]

    # ============================================================
    # Messages
    # ============================================================

    async def get_messages(
        self,
        user_id: UUID,
        conversation_id: UUID,
        limit: Optional[int] = None,
    ) -> List[MessageResponse]:
        await self.get_conversation_for(user_id, conversation_id)
        messages = await self.message_repo.list_recent(
            conversation_id, limit or settings.CHAT_MESSAGE_PAGE_SIZE
        )
        return [message_response(m) for m in messages]

    async def send_message(self, user_id: UUID, data: MessageCreate) -> MessageResponse:
        text = (data.text or "").strip()
        if not text and not data.attachments:
            raise ValidationFailed("Message text or attachments are required")

        conversation = await self.get_conversation_for(user_id, data.conversation_id)
        sender = str(user_id)

        message = ChatMessage(
            conversation_id=conversation.id,
            sender_id=user_id,
            text=text or None,
            attachments=[a.model_dump(by_alias=True) for a in data.attachments],
            read_by=[sender],
            reactions={},
        )
        self.db.add(message)

        counts = dict(conversation.unread_counts or {})
        for participant in conversation.participants:
            if participant != sender:
                counts[participant] = counts.get(participant, 0) + 1
        conversation.unread_counts = counts

        preview = text or ATTACHMENT_PREVIEW
        conversation.last_message = preview[:settings.CHAT_LAST_MESSAGE_PREVIEW]
        conversation.last_sender_id = sender
        conversation.last_message_at = utcnow()
        conversation.updated_at = utcnow()

        await self.db.commit()
        await self.db.refresh(message)

        response = message_response(message)
        await self._publish(
            conversation.id,
            MessageTypes.NEW_MESSAGE,
            response.model_dump(mode="json", by_alias=True),
        )
        return response

    async def mark_as_read(self, user_id: UUID, conversation_id: UUID) -> int:
        """
        Zero the caller's unread counter and add the caller to ``read_by`` of
        every message still missing it.

        Returns:
            Number of messages updated
        """
        conversation = await self.get_conversation_for(user_id, conversation_id)
        reader = str(user_id)

        counts = dict(conversation.unread_counts or {})
        counts[reader] = 0
        conversation.unread_counts = counts

        updated = 0
        for message in await self.message_repo.list_all(conversation_id):
            read_by = list(message.read_by or [])
            if reader not in read_by:
                message.read_by = read_by + [reader]
                updated += 1

        await self.db.commit()

        if updated:
            await self._publish(conversation_id, MessageTypes.READ, {"userId": reader, "updated": updated})
        return updated

    async def _get_message_for(self, user_id: UUID, message_id: UUID) -> ChatMessage:
        message = await self.message_repo.get_by_id(message_id)
        if not message:
            raise NotFound("Message not found")
        await self.get_conversation_for(user_id, message.conversation_id)
        return message

    async def toggle_reaction(self, user_id: UUID, message_id: UUID, emoji: str) -> MessageResponse:
        message = await self._get_message_for(user_id, message_id)
        if message.deleted:
            raise ValidationFailed("Cannot react to a deleted message")

        reactor = str(user_id)
        reactions = {k: list(v) for k, v in (message.reactions or {}).items()}
        users = reactions.get(emoji, [])
        if reactor in users:
            users.remove(reactor)
        else:
            users.append(reactor)

        if users:
            reactions[emoji] = users
        else:
            reactions.pop(emoji, None)
        message.reactions = reactions

        await self.db.commit()
        return await self._after_message_update(message)

    async def edit_message(self, user_id: UUID, message_id: UUID, text: str) -> MessageResponse:
        message = await self._get_message_for(user_id, message_id)
        if message.sender_id != user_id:
            raise Forbidden("You can only edit your own messages")
        if message.deleted:
            raise ValidationFailed("Cannot edit a deleted message")

        message.text = text.strip()
        message.edited = True
        await self.db.commit()
        return await self._after_message_update(message)

    async def delete_message(self, user_id: UUID, message_id: UUID) -> MessageResponse:
        message = await self._get_message_for(user_id, message_id)
        if message.sender_id != user_id:
            raise Forbidden("You can only delete your own messages")

        message.deleted = True
        message.text = None
        message.attachments = []
        message.reactions = {}
        await self.db.commit()
        return await self._after_message_update(message)

    async def _after_message_update(self, message: ChatMessage) -> MessageResponse:
        await self.db.refresh(message)
        response = message_response(message)
        await self._publish(
            message.conversation_id,
            MessageTypes.MESSAGE_UPDATED,
            response.model_dump(mode="json", by_alias=True),
        )
        return response

    # ============================================================
    # Typing
    # ============================================================

    async def set_typing(self, user_id: UUID, conversation_id: UUID, is_typing: bool) -> None:
        await self.get_conversation_for(user_id, conversation_id)
        if is_typing:
            await self.typing_repo.touch(conversation_id, user_id)
        else:
            await self.typing_repo.clear(conversation_id, user_id)
        await self._publish(
            conversation_id,
            MessageTypes.TYPING,
            {"userId": str(user_id), "isTyping": is_typing},
        )

    async def list_typing(self, user_id: UUID, conversation_id: UUID) -> List[TypingUser]:
        await self.get_conversation_for(user_id, conversation_id)
        since = utcnow() - timedelta(seconds=settings.TYPING_INDICATOR_TTL_SECONDS)
        indicators = await self.typing_repo.active_since(conversation_id, since)
        return [
            TypingUser(user_id=i.user_id, updated_at=i.updated_at)
            for i in indicators
            if i.user_id != user_id
        ]

    # ============================================================
    # Attachments
    # ============================================================

    async def upload_attachment(
        self,
        user_id: UUID,
        conversation_id: UUID,
        filename: str,
        content: bytes,
        declared_type: Optional[str] = None,
    ) -> Attachment:
        await self.get_conversation_for(user_id, conversation_id)

        if not content:
            raise ValidationFailed("File is empty")
        if len(content) > settings.MAX_FILE_SIZE_BYTES:
            raise ValidationFailed(f"File exceeds the {settings.MAX_FILE_SIZE_MB} MB limit")

        name = sanitize_filename(filename)
        mime_type = detect_mime_type(content, declared_type)
        path = f"chat/{conversation_id}/{user_id}/{now_millis()}-{name}"

        stored = await get_storage().save(content, path, mime_type)
        return Attachment(
            url=f"{settings.PUBLIC_FILES_URL}/{stored.path}",
            name=name,
            size=stored.size,
            mime_type=mime_type,
            type=attachment_kind(mime_type),
        )
