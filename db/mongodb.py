# centralizes MongoDB utilities
from bson import ObjectId
from typing import Any

from utils.exceptions import ValidationError


def is_valid_object_id(id_value: Any) -> bool:
    """True for 24-hex strings (or ObjectIds) that MongoDB can use as _id"""
    return isinstance(id_value, (str, ObjectId)) and ObjectId.is_valid(id_value)

def convert_to_object_id(id_value: str) -> ObjectId:
    """Convert string ID to ObjectId for MongoDB queries"""
    if not is_valid_object_id(id_value):
        raise ValidationError("Invalid ID format")
    return ObjectId(id_value)
