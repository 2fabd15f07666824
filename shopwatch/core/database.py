"""
MongoDB connection management for the user store.

Holds a single motor client per process; the alert cycle and the command
handlers share it.
"""

from typing import Optional, Any, Dict
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import ServerSelectionTimeoutError, ConnectionFailure

from .config import settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Async database manager"""

    def __init__(self, mongodb_url: Optional[str] = None, database_name: Optional[str] = None):
        self.mongodb_url = mongodb_url or settings.mongodb_url
        self.database_name = database_name or settings.database_name
        self.async_client: Optional[AsyncIOMotorClient] = None
        self.async_database: Optional[AsyncIOMotorDatabase] = None

    def _get_async_client_options(self) -> Dict[str, Any]:
        """Connection options for the async client"""
        return {
            "maxPoolSize": 20,
            "minPoolSize": 1,
            "connectTimeoutMS": 5000,
            "socketTimeoutMS": 20000,
            "serverSelectionTimeoutMS": 5000,
            "retryWrites": True,
            "retryReads": True,
        }

    async def connect_async(self) -> None:
        """Create async MongoDB connection"""
        try:
            self.async_client = AsyncIOMotorClient(self.mongodb_url, **self._get_async_client_options())
            self.async_database = self.async_client[self.database_name]
            await self.async_client.admin.command("ping")
            logger.info("MongoDB async connection established (%s)", self.database_name)
        except (ServerSelectionTimeoutError, ConnectionFailure) as e:
            logger.error(f"MongoDB async connection failed: {e}")
            self.async_client = None
            self.async_database = None
            raise

    async def get_async_database(self) -> AsyncIOMotorDatabase:
        if self.async_database is None:
            await self.connect_async()
        return self.async_database

    def close(self) -> None:
        if self.async_client is not None:
            self.async_client.close()
            logger.info("MongoDB connection closed")
        self.async_client = None
        self.async_database = None
