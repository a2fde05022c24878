"""User Routes — registration, self lookups, and admin user management.

Invariants:
    - POST /add-user is public; everything else requires a verified bearer token
    - Role/status mutation and user listings require the stored role admin
    - Self lookups (profile, role) return 404 for a verified but unregistered identity
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.api.dependencies import (
    get_current_claims, get_current_user, require_admin,
)
from blood_center.core.domain_types import UserStatus
from blood_center.core.errors import ResourceNotFoundError
from blood_center.core.pagination import DEFAULT_LIMIT, DEFAULT_PAGE, MAX_LIMIT
from blood_center.infrastructure.database import get_db
from blood_center.infrastructure.identity_verifier import Claims
from blood_center.models.user import User
from blood_center.schemas.common import UpdateResult
from blood_center.schemas.user import (
    RoleUpdateByEmail,
    UserCreate,
    UserPage,
    UserProfileUpdate,
    UserRegistered,
    UserResponse,
    UserRoleResponse,
    UserRoleUpdate,
    UserStatusUpdate,
)
from blood_center.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


def _require_registered_self(user: User | None, claims: Claims) -> User:
    if user is None:
        raise ResourceNotFoundError("User", claims.email)
    return user


@router.post(
    "/add-user", response_model=UserRegistered,
    status_code=status.HTTP_201_CREATED,
)
async def register_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    """Self-registration (donor/active)."""
    user = await UserDirectory(db).register(body)
    return UserRegistered(message="User registered", userId=str(user.id))


@router.get("/user-profile", response_model=UserResponse)
async def get_user_profile(
    user: User | None = Depends(get_current_user),
    claims: Claims = Depends(get_current_claims),
):
    return _require_registered_self(user, claims)


@router.get("/get-user-role", response_model=UserRoleResponse)
async def get_user_role(
    user: User | None = Depends(get_current_user),
    claims: Claims = Depends(get_current_claims),
):
    user = _require_registered_self(user, claims)
    return UserRoleResponse(msg="ok", role=user.role, status=user.status)


@router.get("/users", response_model=UserPage)
async def list_users(
    page: int = Query(DEFAULT_PAGE, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    status_filter: UserStatus | None = Query(None, alias="status"),
    email: str | None = Query(None, max_length=320),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Paginated user listing (admin)."""
    users, total = await UserDirectory(db).list_users(
        page, limit, status=status_filter, email=email,
    )
    return UserPage(
        users=[UserResponse.model_validate(u) for u in users], total=total,
    )


@router.get("/get-users", response_model=list[UserResponse])
async def list_other_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Every user except the calling admin."""
    return await UserDirectory(db).list_others(admin.email)


@router.patch("/users/{user_id}", response_model=UpdateResult)
async def update_user_profile(
    user_id: UUID,
    body: UserProfileUpdate,
    actor: User | None = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit profile fields — the user themself or an admin."""
    return await UserDirectory(db).update_profile(actor, user_id, body)


@router.patch("/users/{user_id}/status", response_model=UpdateResult)
async def update_user_status(
    user_id: UUID,
    body: UserStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).set_status(admin, user_id, body.status)


@router.patch("/users/{user_id}/role", response_model=UpdateResult)
async def update_user_role(
    user_id: UUID,
    body: UserRoleUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await UserDirectory(db).set_role(admin, user_id, body.role)


@router.patch("/update-role", response_model=UpdateResult)
async def update_role_by_email(
    body: RoleUpdateByEmail,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Role change addressed by email."""
    return await UserDirectory(db).set_role_by_email(admin, body.email, body.role)
