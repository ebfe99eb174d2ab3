"""
Import common dependencies to make them available from the package level.
This allows imports like: from dependencies import get_current_identity
"""
from .auth import get_current_identity, CurrentIdentity
from .db import get_db
from .messages import (
    get_connection_registry,
    get_delivery_gateway,
    get_message_service,
    get_conversation_service,
)
