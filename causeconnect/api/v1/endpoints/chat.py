"""
Chat and Presence Endpoints

Endpoints:
----------
Conversations:
- POST   /chat-conversations          - Start a private chat or create a group
- GET    /chat-conversations          - List the caller's conversations
- GET    /chat-user-profile           - Contact card for a chat participant

Messages:
- GET    /chat-messages               - Latest messages, oldest first
- POST   /chat-messages               - Send a message
- PATCH  /chat-read                   - Mark a conversation read
- POST   /chat-reaction               - Toggle an emoji reaction
- PATCH  /chat-message-edit           - Edit own message
- DELETE /chat-message-delete         - Soft-delete own message
- POST   /chat-upload                 - Upload an attachment

Live state:
- POST   /chat-typing, GET /chat-typing
- PUT    /presence, GET /presence
- WS     /chat-ws?token=&conversationId=
"""

import logging
from typing import List
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Query,
    UploadFile,
    WebSocket,
    WebSocketDisconnect,
)
from sqlalchemy.ext.asyncio import AsyncSession

from causeconnect.db.database import get_db, AsyncSessionLocal
from causeconnect.api.deps import get_current_user, get_current_user_ws
from causeconnect.core.exceptions import AppError
from causeconnect.models import User
from causeconnect.schemas.base import ErrorResponse, SuccessResponse
from causeconnect.schemas.chat import (
    Attachment,
    ConversationCreate,
    ConversationResponse,
    MessageCreate,
    MessageEditRequest,
    MessageResponse,
    PresenceResponse,
    PresenceUpdate,
    ReactionRequest,
    ReadReceiptResponse,
    TypingRequest,
    TypingUser,
)
from causeconnect.schemas.user import UserSearchResult
from causeconnect.services.chat_service import ChatService, conversation_response
from causeconnect.services.presence_service import PresenceService
from causeconnect.services.user_service import UserService
from causeconnect.services.websocket_manager import get_connection_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Chat"])

WS_UNAUTHORIZED = 4401
WS_FORBIDDEN = 4403


def get_chat_service(db: AsyncSession = Depends(get_db)) -> ChatService:
    """Dependency that provides ChatService instance."""
    return ChatService(db)


# ============================================================
# Conversations
# ============================================================

@router.post("/chat-conversations", response_model=ConversationResponse)
async def create_conversation(
    data: ConversationCreate,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """
    Start a private chat (``participantId``) or create a group
    (``type="group"``, ``participants``). Private chats are reused.
    """
    conversation = await chat_service.create_conversation(current_user.id, data)
    return conversation_response(conversation, current_user.id)


@router.get("/chat-conversations", response_model=List[ConversationResponse])
async def list_conversations(
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.list_conversations(current_user.id)


@router.get(
    "/chat-user-profile",
    response_model=UserSearchResult,
    responses={404: {"model": ErrorResponse, "description": "User not found"}}
)
async def get_chat_user_profile(
    user_id: UUID = Query(..., alias="userId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).get_chat_profile(user_id)


# ============================================================
# Messages
# ============================================================

@router.get("/chat-messages", response_model=List[MessageResponse])
async def get_messages(
    conversation_id: UUID = Query(..., alias="conversationId"),
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.get_messages(current_user.id, conversation_id, limit)


@router.post("/chat-messages", response_model=MessageResponse)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.send_message(current_user.id, data)


@router.patch("/chat-read", response_model=ReadReceiptResponse)
async def mark_as_read(
    conversation_id: UUID = Query(..., alias="conversationId"),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    updated = await chat_service.mark_as_read(current_user.id, conversation_id)
    return ReadReceiptResponse(updated=updated)


@router.post("/chat-reaction", response_model=MessageResponse)
async def toggle_reaction(
    data: ReactionRequest,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.toggle_reaction(current_user.id, data.message_id, data.emoji)


@router.patch("/chat-message-edit", response_model=MessageResponse)
async def edit_message(
    data: MessageEditRequest,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.edit_message(current_user.id, data.message_id, data.text)


@router.delete("/chat-message-delete", response_model=MessageResponse)
async def delete_message(
    message_id: UUID = Query(..., alias="messageId"),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    return await chat_service.delete_message(current_user.id, message_id)


@router.post("/chat-upload", response_model=Attachment)
async def upload_attachment(
    conversation_id: UUID = Form(..., alias="conversationId"),
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    content = await file.read()
    return await chat_service.upload_attachment(
        current_user.id,
        conversation_id,
        file.filename or "file",
        content,
        file.content_type,
    )


# ============================================================
# Typing and presence
# ============================================================

@router.post("/chat-typing", response_model=SuccessResponse, response_model_exclude_none=True)
async def set_typing(
    data: TypingRequest,
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    await chat_service.set_typing(current_user.id, data.conversation_id, data.is_typing)
    return SuccessResponse()


@router.get("/chat-typing", response_model=List[TypingUser])
async def list_typing(
    conversation_id: UUID = Query(..., alias="conversationId"),
    current_user: User = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service)
):
    """Users typing within the indicator TTL, excluding the caller."""
    return await chat_service.list_typing(current_user.id, conversation_id)


@router.put("/presence", response_model=PresenceResponse)
async def set_presence(
    data: PresenceUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PresenceService(db).set_status(current_user.id, data.status)


@router.get("/presence", response_model=PresenceResponse)
async def get_presence(
    user_id: UUID = Query(..., alias="userId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await PresenceService(db).get_status(user_id)


# ============================================================
# Live listener
# ============================================================

@router.websocket("/chat-ws")
async def chat_websocket(websocket: WebSocket):
    """
    Stream conversation events to one participant.

    Query params: ``token`` (access token) and ``conversationId``.
    Closes with 4401 on bad credentials and 4403 for non-participants.
    """
    token = websocket.query_params.get("token")
    conversation_id = websocket.query_params.get("conversationId")

    user = await get_current_user_ws(token) if token else None
    if user is None:
        await websocket.close(code=WS_UNAUTHORIZED)
        return

    try:
        conversation_uuid = UUID(conversation_id or "")
        async with AsyncSessionLocal() as db:
            await ChatService(db).get_conversation_for(user.id, conversation_uuid)
    except (AppError, ValueError) as e:
        logger.warning(f"WebSocket rejected for user {user.id}: {e}")
        await websocket.close(code=WS_FORBIDDEN)
        return

    manager = get_connection_manager()
    await manager.connect(websocket, str(user.id), str(conversation_uuid))
    try:
        while True:
            # Inbound frames are keep-alives only
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug(f"Listener for {conversation_uuid} went away")
    finally:
        manager.disconnect(websocket)
