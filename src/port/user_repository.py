"""User repository port: storage interface for user accounts."""

from typing import Any, Protocol

from domain.model.user import User, UserRole


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Lookups return None when nothing matches. Store outages raise ProviderError.
    """
    def create(self, user: User) -> User:
        """Persist a new user. Raise DuplicateEmailError if the email is taken."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def update(self, user_id: str, fields: dict[str, Any]) -> User | None:
        """Merge fields into the user and stamp updated_at.

        Return the updated User, or None if the id does not resolve.
        """
        ...

    def list_all(self) -> list[User]:
        """Return every stored user."""
        ...

    def list_by_role(self, role: UserRole) -> list[User]:
        """Return users holding the given role."""
        ...
