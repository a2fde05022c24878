"""Blog Service — staff-authored posts; admins publish and delete."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blood_center.core.domain_types import BlogStatus
from blood_center.core.errors import ResourceNotFoundError
from blood_center.models.blog import Blog
from blood_center.schemas.blog import BlogCreate

logger = logging.getLogger(__name__)


class BlogService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, body: BlogCreate) -> Blog:
        blog = Blog(
            title=body.title,
            thumbnail=body.thumbnail,
            content=body.content,
            status=BlogStatus.DRAFT.value,
        )
        self.db.add(blog)
        await self.db.commit()
        logger.info("Blog created", extra={"resource_id": str(blog.id)})
        return blog

    async def list_blogs(self, status: BlogStatus | None = None) -> list[Blog]:
        query = select(Blog)
        if status:
            query = query.where(Blog.status == status.value)
        result = await self.db.execute(
            query.order_by(Blog.created_at.desc(), Blog.id.desc()),
        )
        return list(result.scalars().all())

    async def set_status(self, blog_id: UUID, status: BlogStatus) -> dict:
        blog = await self._get(blog_id)
        modified = blog.status != status.value
        blog.status = status.value
        await self.db.commit()
        return {"matched_count": 1, "modified_count": int(modified)}

    async def delete(self, blog_id: UUID) -> dict:
        blog = await self._get(blog_id)
        await self.db.delete(blog)
        await self.db.commit()
        logger.info("Blog deleted", extra={"resource_id": str(blog_id)})
        return {"deleted_count": 1}

    async def _get(self, blog_id: UUID) -> Blog:
        blog = await self.db.get(Blog, blog_id)
        if not blog:
            raise ResourceNotFoundError("Blog", str(blog_id))
        return blog
