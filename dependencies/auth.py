# dependencies/auth.py
from fastapi import Depends, Header
from typing import Annotated, Optional

from helpers.auth import decode_access_token, extract_bearer_token
from helpers.conversation import parse_conversation_key
from models.auth_model import AuthenticatedIdentity
from services.access_guard import AccessGuard


async def get_current_identity(authorization: Optional[str] = Header(default=None)) -> AuthenticatedIdentity:
    """Verified caller identity from the bearer token; raises UnauthenticatedError otherwise."""
    return decode_access_token(extract_bearer_token(authorization))


# Create annotated types for cleaner dependency injection
CurrentIdentity = Annotated[AuthenticatedIdentity, Depends(get_current_identity)]


def require_self(message: str):
    """
    Route dependency: the ``user_id`` path parameter must be the caller.

    Listed in the route decorator so it resolves before the service
    dependencies, and therefore before anything touches the database.
    """
    async def check(user_id: str, identity: CurrentIdentity) -> None:
        AccessGuard().require_self(identity, user_id, message)
    return check


def require_conversation_participant(message: str):
    """Route dependency: the caller must be one of the two users in ``conversation_id``"""
    async def check(conversation_id: str, identity: CurrentIdentity) -> None:
        user_a, user_b = parse_conversation_key(conversation_id)
        AccessGuard().require_participant(identity, user_a, user_b, message)
    return check
