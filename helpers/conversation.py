from typing import Tuple

from db.mongodb import is_valid_object_id
from utils.exceptions import ValidationError

SEPARATOR = "_"


def conversation_key(user_a: str, user_b: str) -> str:
    """Order-independent id of the conversation between two users"""
    first, second = sorted((user_a, user_b))
    return f"{first}{SEPARATOR}{second}"


def parse_conversation_key(conversation_id: str) -> Tuple[str, str]:
    """
    Split a conversation id into its two participants.

    Both halves must be ObjectId strings, which never contain the separator,
    so the split is unambiguous. Either participant order is accepted.
    """
    parts = conversation_id.split(SEPARATOR)
    if len(parts) != 2 or not all(is_valid_object_id(p) for p in parts) or parts[0] == parts[1]:
        raise ValidationError("Invalid conversation ID format")
    return parts[0], parts[1]
