from motor.motor_asyncio import AsyncIOMotorClient
from config import (
    DATABASE_URL,
    DATABASE_NAME,
    DB_MAX_POOL_SIZE,
    DB_MAX_RECONNECT_ATTEMPTS,
    DB_RECONNECT_DELAY,
    DB_SERVER_SELECTION_TIMEOUT_MS,
    DB_CONNECT_TIMEOUT_MS
)
from logger.logger import logger
from utils.exceptions import StoreUnavailableError

import asyncio
from typing import Optional

# Global client with connection pool
client: Optional[AsyncIOMotorClient] = None
db = None

async def init_db(max_attempts: int = DB_MAX_RECONNECT_ATTEMPTS):
    """Initialize database connection with retries"""
    global client, db

    for attempt in range(max_attempts):
        try:
            if client is None:
                # Create client with connection pool
                client = AsyncIOMotorClient(
                    DATABASE_URL,
                    maxPoolSize=DB_MAX_POOL_SIZE,
                    serverSelectionTimeoutMS=DB_SERVER_SELECTION_TIMEOUT_MS,
                    connectTimeoutMS=DB_CONNECT_TIMEOUT_MS,
                    retryWrites=True,
                    retryReads=True,
                    tz_aware=True
                )
                db = client[DATABASE_NAME]

            # Test connection
            await client.admin.command('ping')
            logger.info(f"Successfully connected to MongoDB database '{DATABASE_NAME}'")
            return
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB (attempt {attempt+1}/{max_attempts}): {e}")
            if attempt < max_attempts - 1:
                await asyncio.sleep(DB_RECONNECT_DELAY)
            else:
                logger.error("Max reconnection attempts reached. Running with degraded database functionality.")

async def ping_db() -> bool:
    """True when the database answers a ping"""
    if client is None:
        return False
    try:
        await client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning(f"Database ping failed: {e}")
        return False

async def get_db():
    """
    Dependency function to get database connection.
    For use with FastAPI Depends().

    Returns the cached handle without a round trip; an unreachable server
    surfaces from the per-call timeouts in the repositories. Startup does the
    retrying, so a request only ever makes a single connection attempt.
    """
    if db is None:
        await init_db(max_attempts=1)

    if db is None:
        raise StoreUnavailableError("Database service unavailable")
    return db

async def close_db_connection():
    """Close database connection"""
    global client, db
    if client:
        client.close()
        client = None
        db = None
        logger.info("DB connection closed")
