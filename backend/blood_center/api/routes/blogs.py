"""Blog Routes — staff create, authenticated read, admin publish/delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.api.dependencies import (
    get_current_claims, require_admin, require_staff,
)
from blood_center.core.domain_types import BlogStatus
from blood_center.infrastructure.database import get_db
from blood_center.infrastructure.identity_verifier import Claims
from blood_center.models.user import User
from blood_center.schemas.blog import BlogCreate, BlogResponse, BlogStatusUpdate
from blood_center.schemas.common import CreatedResponse, DeleteResult, UpdateResult
from blood_center.services.blogs import BlogService

router = APIRouter(prefix="/blogs", tags=["blogs"])


@router.post(
    "", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED,
)
async def create_blog(
    body: BlogCreate,
    staff: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    blog = await BlogService(db).create(body)
    return CreatedResponse(message="Blog created", id=str(blog.id))


@router.get("", response_model=list[BlogResponse])
async def list_blogs(
    status_filter: BlogStatus | None = Query(None, alias="status"),
    claims: Claims = Depends(get_current_claims),
    db: AsyncSession = Depends(get_db),
):
    return await BlogService(db).list_blogs(status_filter)


@router.patch("/{blog_id}/status", response_model=UpdateResult)
async def set_blog_status(
    blog_id: UUID,
    body: BlogStatusUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Publish or unpublish."""
    return await BlogService(db).set_status(blog_id, body.status)


@router.delete("/{blog_id}", response_model=DeleteResult)
async def delete_blog(
    blog_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await BlogService(db).delete(blog_id)
