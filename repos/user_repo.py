import asyncio
from typing import Dict, Iterable

from pymongo.errors import PyMongoError

from config import DB_OPERATION_TIMEOUT_SECONDS
from db.mongodb import convert_to_object_id, is_valid_object_id
from logger.logger import logger
from models.users_model import UserSummary
from utils.exceptions import StoreUnavailableError


class UserRepository:
    """
    Read-only view of the users collection used by messaging:
    existence checks and public profile snippets.
    """

    def __init__(self, db, timeout: float = DB_OPERATION_TIMEOUT_SECONDS):
        self.db = db
        self.users = db.users
        self.timeout = timeout

    async def _run(self, operation: str, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except (asyncio.TimeoutError, PyMongoError) as e:
            logger.error(f"User directory failed during {operation}: {e!r}")
            raise StoreUnavailableError() from e

    async def exists(self, user_id: str) -> bool:
        if not is_valid_object_id(user_id):
            return False
        user = await self._run("exists", self.users.find_one(
            {"_id": convert_to_object_id(user_id)}, {"_id": 1}
        ))
        return user is not None

    async def get_public_profiles(self, user_ids: Iterable[str]) -> Dict[str, UserSummary]:
        """
        Resolve many ids with a single query.
        Ids that are malformed or unknown are simply absent from the result.
        """
        object_ids = [convert_to_object_id(uid) for uid in set(user_ids) if is_valid_object_id(uid)]
        if not object_ids:
            return {}

        cursor = self.users.find(
            {"_id": {"$in": object_ids}},
            {"name": 1, "secondName": 1, "email": 1, "avatar": 1}
        )
        users = await self._run("profiles", cursor.to_list(length=None))

        profiles = {}
        for user in users:
            user_id = str(user["_id"])
            profiles[user_id] = UserSummary(
                id=user_id,
                name=self._display_name(user),
                email=user.get("email") or "",
                avatar=user.get("avatar"),
            )
        return profiles

    @staticmethod
    def _display_name(user: dict) -> str:
        parts = [user.get("name"), user.get("secondName")]
        name = " ".join(p.strip() for p in parts if p and p.strip())
        return name or "Unknown User"
