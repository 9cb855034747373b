"""User service: account CRUD for the admin panel and self-service profile edits.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import DuplicateEmailError, ForbiddenError, NotFoundError, ValidationError
from domain.model.user import (
    CREDENTIALS_PROVIDER,
    CallerClaims,
    CreateUserData,
    User,
    UserFilters,
    UserPage,
    UserRole,
    UserSession,
    UserStats,
)
from port.user_repository import UserRepository
from services import access_policy
from services.passwords import hash_password, validate_password
from utils.ids import generate_user_id

logger = logging.getLogger(__name__)

PROFILE_FIELDS = frozenset({'first_name', 'last_name', 'display_name', 'photo_url'})
ADMIN_FIELDS = PROFILE_FIELDS | {'role', 'is_active'}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_display_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()


def create_user(repo: UserRepository, data: CreateUserData) -> UserSession:
    """Create a user account.

    A supplied password is validated and stored only as a bcrypt hash.

    Raises:
        DuplicateEmailError: email already on file
        ValidationError: empty email or weak password
    """
    email = normalize_email(data.email)
    if not email:
        raise ValidationError("Email is required")

    # Fast path; the store's unique index is what actually guarantees uniqueness
    if repo.get_by_email(email):
        raise DuplicateEmailError(email)

    providers = list(data.providers or [CREDENTIALS_PROVIDER])
    password_hash = None
    if CREDENTIALS_PROVIDER in providers and data.password:
        validate_password(data.password)
        password_hash = hash_password(data.password)

    now = datetime.now(timezone.utc)
    user = User(
        id=generate_user_id(),
        email=email,
        first_name=data.first_name,
        last_name=data.last_name,
        display_name=data.display_name or default_display_name(data.first_name, data.last_name),
        created_at=now,
        updated_at=now,
        role=data.role,
        providers=providers,
        photo_url=data.photo_url or '',
        password_hash=password_hash,
    )

    created = repo.create(user)
    logger.info("User account created", extra={
        "userId": created.id, "role": created.role.value, "providers": created.providers,
    })
    return created.to_session()


def get_user_by_email(repo: UserRepository, email: str) -> User | None:
    return repo.get_by_email(normalize_email(email))


def get_user_by_id(repo: UserRepository, user_id: str) -> User | None:
    return repo.get_by_id(user_id)


def _require_user(repo: UserRepository, user_id: str) -> User:
    user = repo.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def update_user(
    repo: UserRepository,
    user_id: str,
    fields: dict[str, Any],
    caller: CallerClaims,
) -> User:
    """Apply a partial update on behalf of caller.

    Callers editing themselves may only touch profile fields. Edits to
    other users need an admin caller and a target in the caller's visible
    set, and any role change goes through the role-assignment gate.

    Raises:
        NotFoundError: user_id does not resolve
        ForbiddenError: outside the caller's permitted scope
        ValidationError: unknown, read-only or null field
    """
    target = _require_user(repo, user_id)

    is_self = target.id == caller.user_id
    allowed = PROFILE_FIELDS if is_self else ADMIN_FIELDS
    rejected = set(fields) - allowed
    if rejected:
        if is_self and rejected <= ADMIN_FIELDS:
            raise ForbiddenError("You cannot change your own role or status")
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(rejected))}")
    nulls = sorted(k for k, v in fields.items() if v is None)
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")

    changes = dict(fields)
    if not is_self:
        if caller.role.rank < UserRole.ADMIN.rank:
            raise ForbiddenError("Only administrators can edit other users")
        access_policy.ensure_can_manage(caller, target)
        if 'role' in changes:
            try:
                changes['role'] = UserRole(changes['role'])
            except ValueError:
                raise ValidationError(f"Unknown role: {changes['role']}")
            access_policy.ensure_can_assign_role(caller, changes['role'])

    updated = repo.update(user_id, changes)
    if updated is None:
        raise NotFoundError("User not found")

    logger.info("User updated", extra={
        "userId": user_id, "callerId": caller.user_id, "fields": sorted(changes),
    })
    return updated


def update_user_role(
    repo: UserRepository, user_id: str, role: UserRole, caller: CallerClaims,
) -> User:
    return update_user(repo, user_id, {'role': role}, caller)


def set_user_active(repo: UserRepository, user_id: str, active: bool) -> User:
    """Activate or deactivate an account.

    Raises:
        NotFoundError: user_id does not resolve
    """
    updated = repo.update(user_id, {'is_active': active})
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("User status changed", extra={"userId": user_id, "isActive": active})
    return updated


def delete_user(repo: UserRepository, user_id: str) -> User:
    """Soft delete: the account is deactivated, never removed."""
    return set_user_active(repo, user_id, False)


def _visible_users(repo: UserRepository, caller: CallerClaims) -> list[User]:
    """Fetch only the roles the caller can see, then drop the caller."""
    candidates = []
    for role in sorted(access_policy.visible_roles(caller.role), key=lambda r: r.rank):
        candidates.extend(repo.list_by_role(role))
    return access_policy.filter_visible(candidates, caller)


def list_visible_users(
    repo: UserRepository, caller: CallerClaims, filters: UserFilters | None = None,
) -> UserPage:
    """Users the caller may manage, filtered, most recently updated first."""
    filters = filters or UserFilters()
    users = access_policy.apply_filters(_visible_users(repo, caller), filters)
    users = access_policy.sort_recent_first(users)

    page = users[:filters.page_size]
    return UserPage(users=page, total=len(users), has_more=len(users) > len(page))


def get_user_stats(repo: UserRepository, caller: CallerClaims) -> UserStats:
    users = _visible_users(repo, caller)
    today = datetime.now(timezone.utc)
    active = sum(1 for u in users if u.is_active)
    return UserStats(
        total=len(users),
        active=active,
        inactive=len(users) - active,
        signed_in_today=sum(1 for u in users if access_policy.signed_in_on(u, today)),
    )
