"""Role-based visibility rules for the user admin surface.

Pure functions: no repository access, no side effects.

Visibility:
    superadmin  sees guest, user and admin accounts (never other superadmins)
    any other   sees user accounts only
The caller never appears in their own "manage others" list.
"""

from datetime import datetime

from domain.model.errors import ForbiddenError
from domain.model.user import CallerClaims, User, UserFilters, UserRole

STATUS_ACTIVE = 'active'
STATUS_INACTIVE = 'inactive'

_SUPERADMIN_VISIBLE = frozenset({UserRole.GUEST, UserRole.USER, UserRole.ADMIN})
# Admins and everyone below share the same rule
_DEFAULT_VISIBLE = frozenset({UserRole.USER})


def visible_roles(caller_role: UserRole) -> frozenset[UserRole]:
    if caller_role == UserRole.SUPERADMIN:
        return _SUPERADMIN_VISIBLE
    return _DEFAULT_VISIBLE


def can_view(caller: CallerClaims, target: User) -> bool:
    if target.email == caller.email:
        return False
    return target.role in visible_roles(caller.role)


def filter_visible(users: list[User], caller: CallerClaims) -> list[User]:
    return [u for u in users if can_view(caller, u)]


def ensure_can_manage(caller: CallerClaims, target: User) -> None:
    """Raises ForbiddenError unless target is in the caller's visible set."""
    if not can_view(caller, target):
        raise ForbiddenError("You don't have permission to manage this user")


def ensure_can_assign_role(caller: CallerClaims, role: UserRole) -> None:
    """A caller may only hand out roles it can see and that rank below its own."""
    if role not in visible_roles(caller.role) or role.rank >= caller.role.rank:
        raise ForbiddenError(f"You don't have permission to assign the '{role.value}' role")


# ── search & filters ─────────────────────────────────────────


def matches_search(user: User, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    haystack = (user.email, user.first_name, user.last_name, user.display_name, user.role.value)
    return any(needle in value.lower() for value in haystack if value)


def _matches_status(user: User, statuses: frozenset[str]) -> bool:
    return (STATUS_ACTIVE in statuses and user.is_active) or (
        STATUS_INACTIVE in statuses and not user.is_active
    )


def apply_filters(users: list[User], filters: UserFilters) -> list[User]:
    """Search, then roles, then statuses, then providers. All conjunctive."""
    result = [u for u in users if matches_search(u, filters.search)]
    if filters.roles:
        result = [u for u in result if u.role.value in filters.roles]
    if filters.statuses:
        result = [u for u in result if _matches_status(u, filters.statuses)]
    if filters.providers:
        result = [u for u in result if any(p in filters.providers for p in u.providers)]
    return result


def sort_recent_first(users: list[User]) -> list[User]:
    return sorted(users, key=lambda u: (u.updated_at, u.id), reverse=True)


def signed_in_on(user: User, day: datetime) -> bool:
    if user.last_sign_in_at is None:
        return False
    return user.last_sign_in_at.date() == day.date()
