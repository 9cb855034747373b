"""In-memory implementation of UserRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import DuplicateEmailError
from domain.model.user import User, UserRole


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, user: User) -> User:
        if any(u.email == user.email for u in self.store.values()):
            raise DuplicateEmailError(user.email)

        self.store[user.id] = user
        return user

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        user = self.store.get(user_id)
        if not user:
            return None

        updated = replace(user, **{**fields, 'updated_at': datetime.now(timezone.utc)})
        self.store[user_id] = updated
        return updated

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)

    def list_all(self) -> list[User]:
        return list(self.store.values())

    def list_by_role(self, role: UserRole) -> list[User]:
        return [u for u in self.store.values() if u.role == role]
