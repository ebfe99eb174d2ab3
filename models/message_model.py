from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from models.enums import MessageType
from models.users_model import UserSummary


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageCreate(CamelModel):
    """Body of POST /send; the sender always comes from the access token"""
    receiver_id: str
    content: str
    product_id: Optional[str] = None
    message_type: MessageType = MessageType.TEXT


class MessageResponse(CamelModel):
    """Model for returning message information to clients"""
    id: str
    sender_id: str
    receiver_id: str
    content: str
    read: bool = False
    read_at: Optional[datetime] = None
    product_id: Optional[str] = None
    message_type: MessageType = MessageType.TEXT
    created_at: datetime

    @classmethod
    def from_document(cls, document: dict) -> "MessageResponse":
        return cls(
            id=str(document["_id"]),
            sender_id=document["sender_id"],
            receiver_id=document["receiver_id"],
            content=document["content"],
            read=document.get("read", False),
            read_at=document.get("read_at"),
            product_id=document.get("product_id"),
            message_type=document.get("message_type", MessageType.TEXT),
            created_at=document["created_at"],
        )


class Conversation(CamelModel):
    """Derived view of every message exchanged between two users"""
    id: str
    participants: List[str]
    other_user: UserSummary
    last_message: MessageResponse
    unread_count: int = 0
    updated_at: datetime


class ApiResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


class MessageEnvelope(ApiResponse):
    data: MessageResponse


class MessageListEnvelope(ApiResponse):
    data: List[MessageResponse] = Field(default_factory=list)


class ConversationListEnvelope(ApiResponse):
    data: List[Conversation] = Field(default_factory=list)


class UnreadCountResponse(ApiResponse):
    unread_count: int
    count: int


class MarkReadResponse(ApiResponse):
    modified_count: int


class DeleteConversationResponse(ApiResponse):
    deleted_count: int
