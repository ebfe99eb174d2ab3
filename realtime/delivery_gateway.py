import asyncio
from typing import Any, Dict

from config import LIVE_SEND_TIMEOUT_SECONDS
from logger.logger import get_logger
from models.enums import ServerEvent
from models.message_model import MessageResponse
from realtime.connection_registry import ConnectionRegistry

logger = get_logger("realtime")


class LiveDeliveryGateway:
    """
    Best-effort push of messaging events to live connections.

    No method raises: a missing registration, a failed push or a push slower
    than ``send_timeout`` is logged and dropped. Durable state is always
    written before any of these are called, and clients treat every event as
    a hint to re-sync.
    """

    def __init__(self, registry: ConnectionRegistry, send_timeout: float = LIVE_SEND_TIMEOUT_SECONDS):
        self.registry = registry
        self.send_timeout = send_timeout

    async def emit(self, user_id: str, event: ServerEvent, data: Dict[str, Any]) -> bool:
        """Push one event to the user's connection; False if nobody was reached"""
        handle = self.registry.lookup(user_id)
        if handle is None:
            return False
        try:
            await asyncio.wait_for(
                handle.send_json({"event": event.value, "data": data}),
                timeout=self.send_timeout
            )
            return True
        except asyncio.TimeoutError:
            logger.warning(f"Dropping '{event.value}' for user {user_id}: push took longer than {self.send_timeout}s")
            return False
        except Exception as e:
            logger.warning(f"Dropping '{event.value}' for user {user_id}: {e!r}")
            return False

    async def notify_message_created(self, message: MessageResponse, conversation_id: str) -> None:
        payload = message.model_dump(mode="json", by_alias=True)

        async def to_receiver():
            # Same socket, so keep message:new ahead of conversation:update
            await self.emit(message.receiver_id, ServerEvent.MESSAGE_NEW, {
                "message": payload,
                "conversationId": conversation_id,
            })
            await self.emit(message.receiver_id, ServerEvent.CONVERSATION_UPDATE, {
                "senderId": message.sender_id,
                "conversationId": conversation_id,
                "lastMessage": payload,
            })

        # Acknowledge to the sender's own live surface
        to_sender = self.emit(message.sender_id, ServerEvent.MESSAGE_SENT, {
            "message": payload,
            "conversationId": conversation_id,
        })

        await asyncio.gather(to_receiver(), to_sender)

    async def notify_messages_read(self, reader_id: str, sender_id: str, count: int) -> None:
        if count <= 0:
            return
        await self.emit(sender_id, ServerEvent.MESSAGES_READ, {"userId": reader_id, "count": count})

    async def relay_typing(self, event: ServerEvent, sender_id: str, receiver_id: str) -> bool:
        """Forward a typing signal verbatim; silently dropped when the receiver is offline"""
        return await self.emit(receiver_id, event, {"userId": sender_id})
