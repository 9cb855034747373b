"""MongoDB implementation of UserRepository.

Documents are keyed by the user id (``_id``); email is a separate attribute
guarded by a unique index, so two racing sign-ups cannot both be written.
"""

from datetime import datetime, timezone
from logging import getLogger
from typing import Any

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import IndexSpec, apply_indexes
from domain.model.errors import DuplicateEmailError, ProviderError
from domain.model.user import CREDENTIALS_PROVIDER, User, UserRole

logger = getLogger(__name__)

USER_INDEXES = [
    IndexSpec('idx_users_email', [('email', 1)], {'unique': True}),
    IndexSpec('idx_users_created_at', [('created_at', -1)]),
    IndexSpec('idx_users_role', [('role', 1)]),
]


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection."""
        return apply_indexes(self.collection, USER_INDEXES)

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            email=doc['email'],
            first_name=doc.get('first_name', ''),
            last_name=doc.get('last_name', ''),
            display_name=doc.get('display_name', ''),
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            role=UserRole(doc.get('role', UserRole.USER.value)),
            providers=list(doc.get('providers') or [CREDENTIALS_PROVIDER]),
            is_active=doc.get('is_active', True),
            email_verified=doc.get('email_verified', False),
            photo_url=doc.get('photo_url') or '',
            password_hash=doc.get('password_hash'),
            last_sign_in_at=doc.get('last_sign_in_at'),
        )

    def _to_document(self, user: User) -> dict:
        doc = {
            '_id': user.id,
            'email': user.email,
            'first_name': user.first_name,
            'last_name': user.last_name,
            'display_name': user.display_name,
            'role': user.role.value,
            'providers': list(user.providers),
            'is_active': user.is_active,
            'email_verified': user.email_verified,
            'photo_url': user.photo_url,
            'last_sign_in_at': user.last_sign_in_at,
            'created_at': user.created_at,
            'updated_at': user.updated_at,
        }
        # OAuth-only accounts carry no password hash at all
        if user.password_hash:
            doc['password_hash'] = user.password_hash
        return doc

    def create(self, user: User) -> User:
        """Insert a new user document."""
        try:
            self.collection.insert_one(self._to_document(user))
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": user.email})
            raise DuplicateEmailError(user.email)
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": user.email, "error": str(e)})
            raise ProviderError("Failed to create user") from e

        logger.info("User created", extra={"userId": user.id, "email": user.email})
        return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Merge fields into the user document and stamp updated_at."""
        changes = {
            key: value.value if isinstance(value, UserRole) else value
            for key, value in fields.items()
        }
        changes['updated_at'] = datetime.now(timezone.utc)
        try:
            doc = self.collection.find_one_and_update(
                {'_id': user_id},
                {'$set': changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("Failed to update user", extra={"userId": user_id, "error": str(e)})
            raise ProviderError("Failed to update user") from e

        if doc is None:
            return None
        logger.debug("User updated", extra={"userId": user_id, "fields": sorted(fields)})
        return self._to_domain(doc)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise ProviderError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise ProviderError("Failed to look up user") from e
        return self._to_domain(doc) if doc else None

    def list_all(self) -> list[User]:
        return self._find({})

    def list_by_role(self, role: UserRole) -> list[User]:
        return self._find({'role': role.value})

    def _find(self, query: dict) -> list[User]:
        try:
            return [self._to_domain(doc) for doc in self.collection.find(query)]
        except PyMongoError as e:
            logger.error("Failed to list users", extra={"query": query, "error": str(e)})
            raise ProviderError("Failed to list users") from e
