# async mongodb client for the backend api
# uses motor for non-blocking operations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from steadylog.config import settings

logger = logging.getLogger(__name__)


class Database:
    """async mongodb connection manager"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """establish connection to mongodb and make sure indexes exist"""
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {settings.MONGODB_DATABASE}")
        self.client = AsyncIOMotorClient(settings.MONGODB_URI)
        self.db = self.client[settings.MONGODB_DATABASE]

        # verify connection
        await self.client.admin.command("ping")
        await self.ensure_indexes()
        logger.info("MongoDB connection established")

    async def ensure_indexes(self):
        """one link per (professional, patient), one account per connection code"""
        await self.patient_links.create_index(
            [("professional_id", 1), ("patient_id", 1)], unique=True,
        )
        await self.profiles.create_index("connection_code", unique=True, sparse=True)
        await self.events.create_index([("owner_id", 1), ("timestamp", 1)])
        await self.medications.create_index([("owner_id", 1), ("created_at", -1)])

    async def close(self):
        """close mongodb connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    # collection accessors

    @property
    def profiles(self):
        return self.db["profiles"]

    @property
    def events(self):
        return self.db["events"]

    @property
    def medications(self):
        return self.db["medications"]

    @property
    def patient_links(self):
        return self.db["patient_links"]


# singleton instance
db = Database()


async def get_db() -> Database:
    """dependency injection for database access"""
    return db
