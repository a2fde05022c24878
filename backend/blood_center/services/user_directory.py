"""User Directory — registration, lookups, profile edits, admin role/status changes.

Invariants:
    - Email uniqueness enforced twice: pre-check for a clean 409, and the
      users.email UNIQUE constraint for the concurrent case (IntegrityError → 409)
    - Self-registration always yields donor/active (core/user_rules)
    - Role/status changes require an admin actor who is not the target
    - List ordering is created_at DESC, id DESC so pages partition one sequence

Design Decisions:
    - Update results mirror a document store's {matched, modified} counts:
      modified is 0 when the new value equals the stored one
"""

import logging
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.domain_types import Role, UserStatus
from blood_center.core.errors import (
    DuplicateUserError, ForbiddenError, InvalidInputError, ResourceNotFoundError,
)
from blood_center.core.pagination import page_offset
from blood_center.core.user_rules import (
    check_self_modification,
    find_non_editable_profile_fields,
    missing_registration_fields,
    normalize_email,
    registration_defaults,
)
from blood_center.core.access_policy import authorize_profile_edit
from blood_center.models.user import User
from blood_center.schemas.user import UserCreate, UserProfileUpdate

logger = logging.getLogger(__name__)


class UserDirectory:
    """Persistence and rules for the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email)),
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError("User", str(user_id))
        return user

    async def register(self, body: UserCreate) -> User:
        """Create a donor/active user or raise InvalidInput / DuplicateUser."""
        payload = body.model_dump()
        missing = missing_registration_fields(payload)
        if missing:
            raise InvalidInputError("Missing required fields", fields=missing)

        email = normalize_email(body.email)
        if await self.get_by_email(email):
            raise DuplicateUserError(email)

        role, status, ignored = registration_defaults(body.role, body.status)
        if ignored:
            logger.warning(
                f"Ignoring self-assigned {', '.join(ignored)} on registration",
                extra={"user_email": email},
            )

        user = User(
            name=body.name,
            email=email,
            photo=body.photo,
            blood_group=body.blood_group,
            district=body.district,
            upazila=body.upazila,
            role=role.value,
            status=status.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost the race against a concurrent registration
            await self.db.rollback()
            raise DuplicateUserError(email)
        await self.db.refresh(user)
        logger.info("User registered", extra={"user_email": email})
        return user

    async def list_users(
        self,
        page: int,
        limit: int,
        status: UserStatus | None = None,
        email: str | None = None,
    ) -> tuple[list[User], int]:
        query = select(User)
        count_query = select(func.count()).select_from(User)
        if status:
            query = query.where(User.status == status.value)
            count_query = count_query.where(User.status == status.value)
        if email:
            term = User.email.contains(email.strip().lower(), autoescape=True)
            query = query.where(term)
            count_query = count_query.where(term)

        total = (await self.db.execute(count_query)).scalar_one()
        result = await self.db.execute(
            query.order_by(User.created_at.desc(), User.id.desc())
            .limit(limit).offset(page_offset(page, limit)),
        )
        return list(result.scalars().all()), total

    async def list_others(self, caller_email: str) -> list[User]:
        """Every user except the caller (admin user-management view)."""
        result = await self.db.execute(
            select(User)
            .where(User.email != normalize_email(caller_email))
            .order_by(User.created_at.desc(), User.id.desc()),
        )
        return list(result.scalars().all())

    async def update_profile(
        self, actor: User | None, user_id: UUID, body: UserProfileUpdate,
    ) -> dict:
        requested = body.model_dump(exclude_unset=True)
        rejected = find_non_editable_profile_fields(requested)
        if rejected:
            raise InvalidInputError(
                f"Fields cannot be edited here: {', '.join(rejected)}",
                fields=rejected,
            )
        # explicit nulls would violate NOT NULL columns
        changes = {k: v for k, v in requested.items() if v is not None}
        target = await self.get_by_id(user_id)
        denial = authorize_profile_edit(actor, target.email)
        if denial:
            raise ForbiddenError(denial["message"], denial["code"])
        return await self._apply(target, changes)

    async def set_status(self, actor: User, user_id: UUID, status: UserStatus) -> dict:
        target = await self.get_by_id(user_id)
        self._check_not_self(actor, target)
        result = await self._apply(target, {"status": status.value})
        logger.info(
            f"User status set to {status.value}",
            extra={"user_email": actor.email, "resource_id": str(target.id)},
        )
        return result

    async def set_role(self, actor: User, user_id: UUID, role: Role) -> dict:
        target = await self.get_by_id(user_id)
        return await self._set_role(actor, target, role)

    async def set_role_by_email(self, actor: User, email: str, role: Role) -> dict:
        target = await self.get_by_email(email)
        if not target:
            raise ResourceNotFoundError("User", normalize_email(email))
        return await self._set_role(actor, target, role)

    async def _set_role(self, actor: User, target: User, role: Role) -> dict:
        self._check_not_self(actor, target)
        result = await self._apply(target, {"role": role.value})
        logger.info(
            f"User role set to {role.value}",
            extra={"user_email": actor.email, "resource_id": str(target.id)},
        )
        return result

    def _check_not_self(self, actor: User, target: User) -> None:
        denial = check_self_modification(actor, target)
        if denial:
            raise ForbiddenError(denial["message"], denial["code"])

    async def _apply(self, user: User, changes: dict) -> dict:
        modified = any(getattr(user, k) != v for k, v in changes.items())
        for key, value in changes.items():
            setattr(user, key, value)
        await self.db.commit()
        return {"matched_count": 1, "modified_count": int(modified)}
