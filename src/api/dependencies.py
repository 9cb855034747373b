"""FastAPI dependency wiring for repositories, services and identity adapters."""

from fastapi import Depends, HTTPException

from adapter.external.google_identity import GoogleIdentityAdapter
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.settings_repository import MongoSettingsRepository
from adapter.mongodb.user_repository import MongoUserRepository
from port.identity_provider import IdentityProviderPort
from port.settings_repository import SettingsRepository
from port.user_repository import UserRepository
from services.settings_service import SettingsService


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[DATABASE_NAME]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_settings_repo() -> SettingsRepository:
    return MongoSettingsRepository(_get_db())


def get_google_identity() -> IdentityProviderPort:
    return GoogleIdentityAdapter()


def get_settings_service(repo: SettingsRepository = Depends(get_settings_repo)) -> SettingsService:
    return SettingsService(repo)
