import asyncio
from typing import Any, Awaitable, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from config import DB_OPERATION_TIMEOUT_SECONDS
from logger.logger import logger
from utils.exceptions import StoreUnavailableError
from utils.time import get_current_utc_time, message_clock


def pair_filter(user_a: str, user_b: str) -> Dict[str, Any]:
    """Every message between two users, in either direction"""
    return {
        "$or": [
            {"sender_id": user_a, "receiver_id": user_b},
            {"sender_id": user_b, "receiver_id": user_a}
        ]
    }


class MessageRepository:
    """
    Durable store for direct messages.

    Every call is bounded by ``timeout`` seconds; timeouts and driver errors
    surface as ``StoreUnavailableError``. Bulk updates are single filtered
    operations so concurrent callers never touch the same document twice.
    """

    def __init__(self, db, timeout: float = DB_OPERATION_TIMEOUT_SECONDS):
        self.db = db
        self.messages = db.messages
        self.timeout = timeout

    async def _run(self, operation: str, awaitable: Awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Message store timed out during {operation} after {self.timeout}s")
            raise StoreUnavailableError() from e
        except PyMongoError as e:
            logger.error(f"Message store error during {operation}: {e}")
            raise StoreUnavailableError() from e

    async def create_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        product_id: Optional[str] = None,
        message_type: str = "text",
    ) -> Dict[str, Any]:
        """Insert one unread message and return the stored document"""
        message_dict = {
            "_id": ObjectId(),
            "sender_id": sender_id,
            "receiver_id": receiver_id,
            "content": content,
            "product_id": product_id,
            "message_type": message_type,
            "read": False,
            "read_at": None,
            "created_at": message_clock.now(),
        }
        await self._run("insert", self.messages.insert_one(message_dict))
        return message_dict

    async def get_messages_between(self, user_a: str, user_b: str) -> List[Dict[str, Any]]:
        """Full history of a pair, oldest first"""
        cursor = self.messages.find(pair_filter(user_a, user_b)).sort(
            [("created_at", ASCENDING), ("_id", ASCENDING)]
        )
        return await self._run("list between", cursor.to_list(length=None))

    async def get_messages_involving(self, user_id: str) -> List[Dict[str, Any]]:
        """Every message the user sent or received, newest first"""
        cursor = self.messages.find({
            "$or": [{"sender_id": user_id}, {"receiver_id": user_id}]
        }).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        return await self._run("list involving", cursor.to_list(length=None))

    async def count_unread(self, receiver_id: str, sender_id: Optional[str] = None) -> int:
        """Unread messages addressed to receiver_id, optionally from one sender only"""
        query: Dict[str, Any] = {"receiver_id": receiver_id, "read": False}
        if sender_id is not None:
            query["sender_id"] = sender_id
        return await self._run("count unread", self.messages.count_documents(query))

    async def mark_messages_as_read(self, sender_id: str, receiver_id: str) -> int:
        """Flip read=false -> true for everything sender_id sent to receiver_id"""
        result = await self._run("mark read", self.messages.update_many(
            {
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "read": False
            },
            {
                "$set": {
                    "read": True,
                    "read_at": get_current_utc_time()
                }
            }
        ))
        return result.modified_count or 0

    async def delete_conversation(self, user_a: str, user_b: str) -> int:
        """Remove every message between the pair, irreversibly"""
        result = await self._run("delete conversation", self.messages.delete_many(pair_filter(user_a, user_b)))
        return result.deleted_count or 0
