from fastapi import Depends
from starlette.requests import HTTPConnection
from typing import Annotated

from realtime.connection_registry import ConnectionRegistry
from realtime.delivery_gateway import LiveDeliveryGateway
from repos.message_repo import MessageRepository
from repos.user_repo import UserRepository
from services.access_guard import AccessGuard
from services.conversation_service import ConversationService
from services.message_service import MessageService
from .db import get_db


def get_connection_registry(connection: HTTPConnection) -> ConnectionRegistry:
    """
    The registry owned by the running application.
    Works for both HTTP requests and WebSocket connections.
    """
    return connection.app.state.connection_registry

def get_delivery_gateway(registry: ConnectionRegistry = Depends(get_connection_registry)) -> LiveDeliveryGateway:
    return LiveDeliveryGateway(registry)

def get_message_repo(db = Depends(get_db)) -> MessageRepository:
    return MessageRepository(db)

def get_user_repo(db = Depends(get_db)) -> UserRepository:
    return UserRepository(db)

def get_message_service(
    message_repo: MessageRepository = Depends(get_message_repo),
    user_repo: UserRepository = Depends(get_user_repo),
    gateway: LiveDeliveryGateway = Depends(get_delivery_gateway),
) -> MessageService:
    return MessageService(message_repo, user_repo, gateway, AccessGuard())

def get_conversation_service(
    message_repo: MessageRepository = Depends(get_message_repo),
    user_repo: UserRepository = Depends(get_user_repo),
) -> ConversationService:
    return ConversationService(message_repo, user_repo)


ConnectionRegistryDep = Annotated[ConnectionRegistry, Depends(get_connection_registry)]
DeliveryGatewayDep = Annotated[LiveDeliveryGateway, Depends(get_delivery_gateway)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
ConversationServiceDep = Annotated[ConversationService, Depends(get_conversation_service)]
