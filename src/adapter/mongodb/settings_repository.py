"""MongoDB implementation of SettingsRepository.

All global settings live in one document with ``_id = 'app'``.
"""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo.database import Database
from pymongo.errors import PyMongoError

from adapter.mongodb.connection import SETTINGS_COLLECTION_NAME
from domain.model.errors import ProviderError
from domain.model.settings import SETTINGS_VERSION

logger = getLogger(__name__)

SETTINGS_DOCUMENT_ID = 'app'
_METADATA_FIELDS = ('_id', 'last_updated', 'version')


class MongoSettingsRepository:
    def __init__(self, db: Database):
        self.collection = db[SETTINGS_COLLECTION_NAME]

    def load(self) -> dict[str, Any] | None:
        try:
            doc = self.collection.find_one({'_id': SETTINGS_DOCUMENT_ID})
        except PyMongoError as e:
            logger.error("Failed to load global settings", extra={"error": str(e)})
            raise ProviderError("Failed to load settings") from e

        if not doc:
            return None
        return {k: v for k, v in doc.items() if k not in _METADATA_FIELDS}

    def save(self, values: dict[str, Any]) -> None:
        try:
            self.collection.update_one(
                {'_id': SETTINGS_DOCUMENT_ID},
                {'$set': {
                    **values,
                    'last_updated': datetime.now(timezone.utc),
                    'version': SETTINGS_VERSION,
                }},
                upsert=True,
            )
        except PyMongoError as e:
            logger.error("Failed to save global settings", extra={"error": str(e)})
            raise ProviderError("Failed to save settings") from e
        logger.info("Global settings saved", extra={"keys": sorted(values)})

    def clear(self) -> None:
        try:
            self.collection.delete_one({'_id': SETTINGS_DOCUMENT_ID})
        except PyMongoError as e:
            logger.error("Failed to clear global settings", extra={"error": str(e)})
            raise ProviderError("Failed to clear settings") from e
