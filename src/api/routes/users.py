"""User management routes.

Every list and mutation goes through the role-based access policy:
admins manage "user" accounts, superadmins manage everyone except
other superadmins, and nobody manages themselves through these routes
except for profile edits via PATCH /users/{id}.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_user_repo
from api.models import (
    ActiveUpdateRequest,
    CreateUserRequest,
    RoleUpdateRequest,
    SessionUserResponse,
    StatusFilter,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
    UserStatsResponse,
)
from api.security import get_current_claims, require_admin
from domain.model.errors import NotFoundError
from domain.model.user import CallerClaims, CreateUserData, UserFilters, UserRole
from port.user_repository import UserRepository
from services import access_policy, user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def _load_managed_user(repo: UserRepository, user_id: str, caller: CallerClaims):
    target = repo.get_by_id(user_id)
    if not target:
        raise NotFoundError("User not found")
    access_policy.ensure_can_manage(caller, target)
    return target


@router.get("", response_model=UserListResponse)
async def list_users(
    search: str = Query(default="", max_length=100),
    roles: list[UserRole] = Query(default=[]),
    statuses: list[StatusFilter] = Query(default=[]),
    providers: list[str] = Query(default=[]),
    page_size: int = Query(default=20, ge=1, le=200),
    caller: CallerClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """List the users the caller may see, with search and filters."""
    filters = UserFilters(
        search=search.strip(),
        roles=frozenset(r.value for r in roles),
        statuses=frozenset(statuses),
        providers=frozenset(providers),
        page_size=page_size,
    )
    page = user_service.list_visible_users(repo, caller, filters)
    return UserListResponse(
        users=[UserResponse.from_domain(u) for u in page.users],
        total=page.total,
        has_more=page.has_more,
    )


@router.get("/stats", response_model=UserStatsResponse)
async def user_stats(
    caller: CallerClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    stats = user_service.get_user_stats(repo, caller)
    return UserStatsResponse(
        total=stats.total,
        active=stats.active,
        inactive=stats.inactive,
        signed_in_today=stats.signed_in_today,
    )


@router.post("", response_model=SessionUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest,
    caller: CallerClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    """Create an account on behalf of someone else (admin only)."""
    access_policy.ensure_can_assign_role(caller, request.role)
    session = user_service.create_user(repo, CreateUserData(
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        password=request.password,
        display_name=request.display_name,
        photo_url=request.photo_url,
        role=request.role,
    ))
    logger.info("User created by admin", extra={"userId": session.id, "callerId": caller.user_id})
    return SessionUserResponse.from_session(session)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    caller: CallerClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    if user_id == caller.user_id:
        target = repo.get_by_id(user_id)
        if not target:
            raise NotFoundError("User not found")
    else:
        target = _load_managed_user(repo, user_id, caller)
    return UserResponse.from_domain(target)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    caller: CallerClaims = Depends(get_current_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """Partial update. Self-edits are limited to profile fields."""
    fields = request.model_dump(exclude_unset=True)
    updated = user_service.update_user(repo, user_id, fields, caller)
    return UserResponse.from_domain(updated)


@router.put("/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    request: RoleUpdateRequest,
    caller: CallerClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    updated = user_service.update_user_role(repo, user_id, request.role, caller)
    return UserResponse.from_domain(updated)


@router.put("/{user_id}/active", response_model=UserResponse)
async def set_user_active(
    user_id: str,
    request: ActiveUpdateRequest,
    caller: CallerClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    _load_managed_user(repo, user_id, caller)
    updated = user_service.set_user_active(repo, user_id, request.is_active)
    return UserResponse.from_domain(updated)


@router.delete("/{user_id}", response_model=UserResponse)
async def delete_user(
    user_id: str,
    caller: CallerClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    """Soft delete: deactivates the account."""
    _load_managed_user(repo, user_id, caller)
    updated = user_service.delete_user(repo, user_id)
    logger.info("User deleted", extra={"userId": user_id, "callerId": caller.user_id})
    return UserResponse.from_domain(updated)
