from typing import Dict, List

from helpers.conversation import conversation_key
from logger.logger import logger
from models.message_model import Conversation, MessageResponse
from repos.message_repo import MessageRepository
from repos.user_repo import UserRepository


class ConversationService:
    """
    Derives a user's conversations from raw messages on every call.

    Nothing is cached, so a freshly inserted message is always reflected.
    """

    def __init__(self, message_repo: MessageRepository, user_repo: UserRepository):
        self.message_repo = message_repo
        self.user_repo = user_repo

    async def get_conversations(self, user_id: str) -> List[Conversation]:
        messages = await self.message_repo.get_messages_involving(user_id)
        if not messages:
            return []

        # Input is newest first, so the first message seen per counterpart is the latest
        latest: Dict[str, dict] = {}
        for message in messages:
            sender_id = message.get("sender_id")
            receiver_id = message.get("receiver_id")
            if not sender_id or not receiver_id:
                logger.warning(f"Skipping message {message.get('_id')} with missing participant")
                continue
            other_id = receiver_id if sender_id == user_id else sender_id
            if other_id not in latest:
                latest[other_id] = message

        profiles = await self.user_repo.get_public_profiles(latest.keys())

        conversations = []
        for other_id, message in latest.items():
            other_user = profiles.get(other_id)
            if other_user is None:
                logger.warning(f"Skipping conversation with unknown user {other_id} for {user_id}")
                continue

            unread_count = await self.message_repo.count_unread(user_id, sender_id=other_id)
            last_message = MessageResponse.from_document(message)
            conversations.append(Conversation(
                id=conversation_key(user_id, other_id),
                participants=[user_id, other_id],
                other_user=other_user,
                last_message=last_message,
                unread_count=unread_count,
                updated_at=last_message.created_at,
            ))

        return conversations
