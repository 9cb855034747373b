"""Process-wide MongoDB client.

One MongoClient is shared by every request. A client that stops answering
pings is replaced on the next call; a missing or unusable MONGO_URL is
reported once and then treated as "no database" until reset_client().
"""

import os
import logging
from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

logging.getLogger('pymongo').setLevel(logging.WARNING)

MONGO_URL = os.getenv('MONGO_URL')
DATABASE_NAME = os.getenv('MONGODB_DATABASE', 'next_tools')
USERS_COLLECTION_NAME = 'users'
SETTINGS_COLLECTION_NAME = 'global_settings'

_CLIENT_OPTIONS = dict(
    serverSelectionTimeoutMS=5000,
    connectTimeoutMS=5000,
    socketTimeoutMS=30000,
    maxPoolSize=10,
    minPoolSize=0,
    maxIdleTimeMS=30000,
    waitQueueTimeoutMS=10000,
    retryWrites=True,
    retryReads=True,
    # Stored timestamps come back as aware UTC datetimes
    tz_aware=True,
    compressors=['zlib'],
    zlibCompressionLevel=1,
)

_client: MongoClient | None = None
_ever_connected = False
_unusable = False


def reset_client():
    """Forget the cached client and any earlier configuration failure."""
    global _client, _ever_connected, _unusable
    _client = None
    _ever_connected = False
    _unusable = False


def _alive(client: MongoClient) -> bool:
    try:
        client.admin.command('ping')
        return True
    except PyMongoError:
        return False


def get_mongodb_client() -> MongoClient | None:
    """Return the shared client, connecting or reconnecting as needed.

    Returns None when MongoDB is not configured or the first connection
    attempt failed.
    """
    global _client, _ever_connected, _unusable

    if _client is not None:
        if _alive(_client):
            return _client
        logger.debug("Cached MongoDB client failed ping, reconnecting")
        _client = None

    if _unusable:
        return None

    if not MONGO_URL:
        logger.error("MONGO_URL is not configured")
        _unusable = True
        return None

    try:
        client = MongoClient(MONGO_URL, **_CLIENT_OPTIONS)
        client.admin.command('ping')
    except PyMongoError as e:
        # Later failures are transient; only a failed first attempt is fatal
        if not _ever_connected:
            logger.error("Initial MongoDB connection failed", extra={"error": str(e)[:200]})
            _unusable = True
        return None

    if not _ever_connected:
        logger.info("Connected to MongoDB", extra={"database": DATABASE_NAME})
    _ever_connected = True
    _client = client
    return client
