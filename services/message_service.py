from typing import List

from config import MESSAGE_MAX_LENGTH
from db.mongodb import is_valid_object_id
from helpers.conversation import conversation_key, parse_conversation_key
from logger.logger import logger
from models.auth_model import AuthenticatedIdentity
from models.message_model import MessageCreate, MessageResponse
from realtime.delivery_gateway import LiveDeliveryGateway
from repos.message_repo import MessageRepository
from repos.user_repo import UserRepository
from services.access_guard import AccessGuard
from utils.exceptions import InvalidOperationError, NotFoundError, ValidationError


def _require_valid_id(value: str) -> None:
    if not is_valid_object_id(value):
        raise ValidationError("Invalid ID format")


class MessageService:
    """
    Direct-messaging operations for an authenticated caller.

    Order of work is always: access check and input validation, then the
    store write, then best-effort live delivery. Delivery never changes the
    outcome of the call.
    """

    def __init__(
        self,
        message_repo: MessageRepository,
        user_repo: UserRepository,
        gateway: LiveDeliveryGateway,
        guard: AccessGuard = None,
        max_length: int = MESSAGE_MAX_LENGTH,
    ):
        self.message_repo = message_repo
        self.user_repo = user_repo
        self.gateway = gateway
        self.guard = guard or AccessGuard()
        self.max_length = max_length

    async def send_message(self, identity: AuthenticatedIdentity, message: MessageCreate) -> MessageResponse:
        """Persist a new unread message from the caller and push it to live connections"""
        sender_id = identity.user_id
        receiver_id = (message.receiver_id or "").strip()

        if not receiver_id:
            raise ValidationError("receiverId and content are required")
        if sender_id == receiver_id:
            raise InvalidOperationError("Cannot send message to yourself")

        content = (message.content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty")
        if len(content) > self.max_length:
            raise ValidationError(f"Message content cannot exceed {self.max_length} characters")

        _require_valid_id(receiver_id)
        if message.product_id is not None:
            _require_valid_id(message.product_id)

        if not await self.user_repo.exists(receiver_id):
            raise NotFoundError("Receiver not found")
        if not await self.user_repo.exists(sender_id):
            raise NotFoundError("Sender not found")

        document = await self.message_repo.create_message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            product_id=message.product_id,
            message_type=message.message_type.value,
        )
        created = MessageResponse.from_document(document)
        logger.info(f"Message {created.id} sent from {sender_id} to {receiver_id}")

        await self.gateway.notify_message_created(created, conversation_key(sender_id, receiver_id))
        return created

    async def get_messages(self, identity: AuthenticatedIdentity, user_id: str, other_user_id: str) -> List[MessageResponse]:
        """Whole history between user_id (the caller) and other_user_id, oldest first"""
        self.guard.require_self(identity, user_id, "You can only view your own conversations")
        if user_id == other_user_id:
            raise ValidationError("Cannot get messages with yourself")

        documents = await self.message_repo.get_messages_between(user_id, other_user_id)
        return [MessageResponse.from_document(doc) for doc in documents]

    async def get_unread_count(self, identity: AuthenticatedIdentity, user_id: str) -> int:
        self.guard.require_self(identity, user_id, "You can only view your own unread count")
        return await self.message_repo.count_unread(user_id)

    async def mark_messages_as_read(self, identity: AuthenticatedIdentity, user_id: str, other_user_id: str) -> int:
        """Mark everything other_user_id sent to the caller as read; returns how many changed"""
        self.guard.require_self(identity, user_id, "You can only mark your own messages as read")
        if user_id == other_user_id:
            raise ValidationError("Cannot mark messages as read with yourself")

        modified = await self.message_repo.mark_messages_as_read(sender_id=other_user_id, receiver_id=user_id)
        logger.info(f"Marked {modified} messages from {other_user_id} to {user_id} as read")

        if modified > 0:
            await self.gateway.notify_messages_read(reader_id=user_id, sender_id=other_user_id, count=modified)
        return modified

    async def delete_conversation(self, identity: AuthenticatedIdentity, conversation_id: str) -> int:
        user_a, user_b = parse_conversation_key(conversation_id)
        self.guard.require_participant(
            identity, user_a, user_b, "You are not authorized to delete this conversation"
        )

        deleted = await self.message_repo.delete_conversation(user_a, user_b)
        logger.info(f"Deleted {deleted} messages in conversation {conversation_key(user_a, user_b)}")
        return deleted
