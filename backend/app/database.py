"""
Database connection - MongoDB async (Motor).
"""

from motor.motor_asyncio import AsyncIOMotorClient

from app.config import MONGO_URL, DB_NAME, QUERY_TIMEOUT_SECONDS

_timeout_ms = QUERY_TIMEOUT_SECONDS * 1000

# Async client (used by all app queries). Connects lazily on first operation.
client = AsyncIOMotorClient(
    MONGO_URL,
    serverSelectionTimeoutMS=_timeout_ms,
    timeoutMS=_timeout_ms,
)
db = client[DB_NAME]
