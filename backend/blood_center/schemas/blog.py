"""Blog Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from blood_center.core.domain_types import BlogStatus
from blood_center.schemas.common import CamelInput, CamelOutput


class BlogCreate(CamelInput):
    title: str = Field(min_length=1, max_length=300)
    thumbnail: str = Field(min_length=1, max_length=1000)
    content: str = Field(min_length=1)


class BlogStatusUpdate(CamelInput):
    status: BlogStatus


class BlogResponse(CamelOutput):
    id: UUID
    title: str
    thumbnail: str
    content: str
    status: str
    created_at: datetime
