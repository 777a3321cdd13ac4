from datetime import datetime

from sqlmodel import Field, SQLModel

from .fields import utcnow


class Article(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(unique=True, index=True)
    content: str
    author_id: int | None = Field(
        default=None, foreign_key="user.id", ondelete="SET NULL"
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow, index=True
    )
    views: int = Field(default=0)


class ArticleSummary(SQLModel):
    """Read-only projection used for listings."""

    title: str
    created_at: datetime
    updated_at: datetime
    author: str | None = None
    history_count: int = 0
