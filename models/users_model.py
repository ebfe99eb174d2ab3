from typing import Optional
from pydantic import BaseModel

class UserSummary(BaseModel):
    """Public profile snippet shown next to a conversation"""
    id: str
    name: str = "Unknown User"
    email: str = ""
    avatar: Optional[str] = None
