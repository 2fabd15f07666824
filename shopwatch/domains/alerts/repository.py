from __future__ import annotations

import logging
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from ...core.config import settings
from .models import User

logger = logging.getLogger(__name__)


class MongoUserStore:
    """User records in MongoDB, one document per user keyed by `_id`."""

    def __init__(self, db: AsyncIOMotorDatabase, collection: Optional[str] = None):
        self.db = db
        self.users = db[collection or settings.users_collection]

    async def ensure_indexes(self) -> None:
        await self.users.create_index([("alerts.channel_id", ASCENDING)])

    async def get_user(self, user_id: str) -> Optional[User]:
        doc = await self.users.find_one({"_id": user_id})
        if not doc:
            return None
        return User.from_document(doc)

    async def get_user_list(self) -> List[str]:
        cursor = self.users.find({}, projection={"_id": 1}).sort("_id", ASCENDING)
        return [str(doc["_id"]) async for doc in cursor]

    async def save_user(self, user: User) -> None:
        await self.users.replace_one({"_id": user.id}, user.to_document(), upsert=True)

    async def delete_user(self, user_id: str) -> None:
        res = await self.users.delete_one({"_id": user_id})
        if res.deleted_count:
            logger.info("Deleted user %s", user_id)


class InMemoryUserStore:
    """Dict-backed store; keeps insertion order."""

    def __init__(self, users: Optional[List[User]] = None):
        self._users: Dict[str, User] = {}
        for user in users or []:
            self._users[user.id] = user.model_copy(deep=True)

    async def get_user(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def get_user_list(self) -> List[str]:
        return list(self._users)

    async def save_user(self, user: User) -> None:
        self._users[user.id] = user.model_copy(deep=True)

    async def delete_user(self, user_id: str) -> None:
        self._users.pop(user_id, None)
