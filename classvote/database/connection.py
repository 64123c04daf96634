import logging

import motor.motor_asyncio

from classvote.config import Settings

logger = logging.getLogger(__name__)

OPTIONS_COLLECTION_NAME = "options"
VOTES_COLLECTION_NAME = "votes"


async def connect(settings: Settings) -> motor.motor_asyncio.AsyncIOMotorClient:
    """Open the MongoDB client and make sure the server answers."""
    if not settings.mongo_uri:
        raise ValueError("MONGO_URI not set. Check your .env file.")
    if not settings.mongo_db:
        raise ValueError("MONGO_DB not set. Check your .env file.")

    client = motor.motor_asyncio.AsyncIOMotorClient(settings.mongo_uri)
    try:
        await client.admin.command("ping")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        client.close()
        raise
    logger.info(f"Connected to MongoDB, database: {settings.mongo_db}")
    return client
