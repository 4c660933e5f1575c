"""Request/response schemas for blog posts."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

TITLE_MAX_LENGTH = 200
EXCERPT_MAX_LENGTH = 500


class PostCreate(BaseModel):
    """Fields accepted when creating a post. The slug is derived from the title."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1)
    excerpt: str | None = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    published: bool = False


class PostUpdate(BaseModel):
    """Partial update. Only fields the caller actually sent are applied."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, min_length=1)
    excerpt: str | None = Field(default=None, max_length=EXCERPT_MAX_LENGTH)
    published: bool | None = None


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    content: str
    excerpt: str | None
    published: bool
    author_id: int
    created_at: datetime
    updated_at: datetime
