"""User domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

CREDENTIALS_PROVIDER = 'credentials'
GOOGLE_PROVIDER = 'google'


class UserRole(str, Enum):
    """Closed set of roles, ordered from least to most privileged."""
    GUEST = 'guest'
    USER = 'user'
    ADMIN = 'admin'
    SUPERADMIN = 'superadmin'

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]


_ROLE_RANKS = {
    UserRole.GUEST: 0,
    UserRole.USER: 1,
    UserRole.ADMIN: 2,
    UserRole.SUPERADMIN: 3,
}


@dataclass
class User:
    """Domain model representing a stored user account."""
    id: str
    email: str
    first_name: str
    last_name: str
    display_name: str
    created_at: datetime
    updated_at: datetime
    role: UserRole = UserRole.USER
    providers: list[str] = field(default_factory=lambda: [CREDENTIALS_PROVIDER])
    is_active: bool = True
    email_verified: bool = False
    photo_url: str = ''
    password_hash: str | None = None
    last_sign_in_at: datetime | None = None

    def has_provider(self, provider: str) -> bool:
        return provider in self.providers

    def to_session(self) -> 'UserSession':
        return UserSession(
            id=self.id,
            email=self.email,
            display_name=self.display_name,
            role=self.role,
            is_active=self.is_active,
            email_verified=self.email_verified,
            photo_url=self.photo_url,
            last_sign_in_at=self.last_sign_in_at,
        )


@dataclass(frozen=True)
class UserSession:
    """Session-safe projection of a User. Never carries the password hash."""
    id: str
    email: str
    display_name: str
    role: UserRole
    is_active: bool
    email_verified: bool
    photo_url: str = ''
    last_sign_in_at: datetime | None = None


@dataclass(frozen=True)
class CallerClaims:
    """Identity and role of the authenticated caller, taken from a verified session."""
    user_id: str
    email: str
    role: UserRole


@dataclass
class CreateUserData:
    """Input for creating a user account."""
    email: str
    first_name: str
    last_name: str
    password: str | None = None
    display_name: str | None = None
    photo_url: str = ''
    providers: list[str] | None = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True)
class UserFilters:
    """Admin list filters.

    Each set is OR-ed internally; the filters are AND-ed together.
    Empty sets mean "no filter".
    """
    search: str = ''
    roles: frozenset[str] = frozenset()
    statuses: frozenset[str] = frozenset()
    providers: frozenset[str] = frozenset()
    page_size: int = 20


@dataclass
class UserPage:
    users: list[User]
    total: int
    has_more: bool


@dataclass(frozen=True)
class UserStats:
    total: int
    active: int
    inactive: int
    signed_in_today: int
