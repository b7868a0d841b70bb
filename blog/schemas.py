from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

from blog.config import settings


# --- User ---

class UserBase(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: str = Field(max_length=255)
    display_name: str | None = None
    is_admin: bool = False


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class UserDetail(UserResponse):
    articles: list["ArticleSummary"] = []


# --- Article ---

class ArticleBase(BaseModel):
    title: str = Field(min_length=1, max_length=settings.TITLE_MAX_LENGTH)
    content: str = Field(max_length=settings.CONTENT_MAX_LENGTH)


class ArticleCreate(ArticleBase):
    pass


class ArticleUpdate(ArticleBase):
    pass


class ArticleSummary(BaseModel):
    id: int
    title: str
    author_id: int
    is_public: bool
    published_on: datetime | None
    created_at: datetime | None
    model_config = ConfigDict(from_attributes=True)


class ArticleDetail(ArticleSummary):
    content: str
    updated_at: datetime | None = None


# --- Pagination ---

class PaginatedResponse(BaseModel):
    items: list[ArticleSummary]
    total: int
    page: int
    page_size: int
    pages: int


# Required for forward-reference resolution (UserDetail.articles)
UserDetail.model_rebuild()
