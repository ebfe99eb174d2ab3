from fastapi import APIRouter, Depends, status

from dependencies.auth import (
    CurrentIdentity,
    get_current_identity,
    require_conversation_participant,
    require_self,
)
from dependencies.messages import ConversationServiceDep, MessageServiceDep
from models.message_model import (
    ConversationListEnvelope,
    DeleteConversationResponse,
    MarkReadResponse,
    MessageCreate,
    MessageEnvelope,
    MessageListEnvelope,
    UnreadCountResponse,
)

# Every route requires a verified caller; per-user routes check ownership
# before their services (and the database) are resolved
router = APIRouter(dependencies=[Depends(get_current_identity)])

@router.get("/conversations", response_model=ConversationListEnvelope)
async def get_conversations(
    identity: CurrentIdentity,
    conversation_service: ConversationServiceDep
):
    """List the caller's conversations, most recent first"""
    conversations = await conversation_service.get_conversations(identity.user_id)
    return ConversationListEnvelope(data=conversations)

@router.get(
    "/conversation/{user_id}/{other_id}",
    response_model=MessageListEnvelope,
    dependencies=[Depends(require_self("You can only view your own conversations"))]
)
async def get_conversation(
    user_id: str,
    other_id: str,
    identity: CurrentIdentity,
    message_service: MessageServiceDep
):
    """Full message history between the caller and another user"""
    messages = await message_service.get_messages(identity, user_id, other_id)
    return MessageListEnvelope(data=messages)

@router.post("/send", response_model=MessageEnvelope, status_code=status.HTTP_201_CREATED)
async def send_message(
    message: MessageCreate,
    identity: CurrentIdentity,
    message_service: MessageServiceDep
):
    """Send a new message from the caller"""
    created = await message_service.send_message(identity, message)
    return MessageEnvelope(data=created, message="Message sent successfully")

@router.get(
    "/unread-count/{user_id}",
    response_model=UnreadCountResponse,
    dependencies=[Depends(require_self("You can only view your own unread count"))]
)
async def get_unread_count(
    user_id: str,
    identity: CurrentIdentity,
    message_service: MessageServiceDep
):
    """Number of unread messages addressed to the caller"""
    count = await message_service.get_unread_count(identity, user_id)
    return UnreadCountResponse(unread_count=count, count=count)

@router.put(
    "/mark-read/{user_id}/{other_id}",
    response_model=MarkReadResponse,
    dependencies=[Depends(require_self("You can only mark your own messages as read"))]
)
async def mark_messages_as_read(
    user_id: str,
    other_id: str,
    identity: CurrentIdentity,
    message_service: MessageServiceDep
):
    """Mark everything other_id sent to the caller as read"""
    modified = await message_service.mark_messages_as_read(identity, user_id, other_id)
    return MarkReadResponse(message="Messages marked as read", modified_count=modified)

@router.delete(
    "/conversation/{conversation_id}",
    response_model=DeleteConversationResponse,
    dependencies=[Depends(require_conversation_participant("You are not authorized to delete this conversation"))]
)
async def delete_conversation(
    conversation_id: str,
    identity: CurrentIdentity,
    message_service: MessageServiceDep
):
    """Delete every message between the two users named in conversation_id"""
    deleted = await message_service.delete_conversation(identity, conversation_id)
    return DeleteConversationResponse(message="Conversation deleted", deleted_count=deleted)
