"""MongoDB connection manager and record store construction."""

from typing import List, Optional, Type

from beanie import Document, init_beanie
from motor.motor_asyncio import AsyncIOMotorClient

from app.config import Settings
from app.core.ids import IdGenerator
from app.core.logging import logger


class Database:
    """MongoDB database connection manager."""

    client: Optional[AsyncIOMotorClient] = None

    @classmethod
    async def connect_db(cls, mongodb_url: str, database_name: str, document_models: List[Type[Document]]):
        """Connect to MongoDB and initialize Beanie."""
        cls.client = AsyncIOMotorClient(mongodb_url)

        await init_beanie(
            database=cls.client[database_name],
            document_models=document_models,
        )

        logger.info(f"Connected to MongoDB database: {database_name}")

    @classmethod
    async def close_db(cls):
        """Close MongoDB connection."""
        if cls.client:
            cls.client.close()
            cls.client = None
            logger.info("Closed MongoDB connection")


def build_record_store(settings: Settings, id_generator: Optional[IdGenerator] = None):
    """Create the record store selected by ``STORE_BACKEND``."""
    backend = settings.STORE_BACKEND.lower()

    if backend == "memory":
        from app.store.memory import InMemoryRecordStore

        return InMemoryRecordStore(id_generator=id_generator, shared_owner_id=settings.DEMO_OWNER_ID)

    if backend == "mongo":
        from app.store.mongo import MongoRecordStore

        return MongoRecordStore(
            settings.MONGODB_URL,
            settings.DATABASE_NAME,
            id_generator=id_generator,
            shared_owner_id=settings.DEMO_OWNER_ID,
        )

    raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
