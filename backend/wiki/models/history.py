from datetime import datetime

from sqlmodel import Field, SQLModel

from .fields import utcnow


class HistoryEntry(SQLModel, table=True):
    """Archived snapshot of an article's content. Never updated once written."""

    id: int | None = Field(default=None, primary_key=True)
    article_id: int = Field(foreign_key="article.id", ondelete="CASCADE", index=True)
    content: str
    author_id: int | None = Field(
        default=None, foreign_key="user.id", ondelete="SET NULL"
    )
    created_at: datetime = Field(
        default_factory=utcnow, index=True
    )


class HistoryEntryRead(SQLModel):
    """History entry as shown to readers, with the author's username."""

    id: int
    article_id: int
    content: str
    author_id: int | None = None
    author: str | None = None
    created_at: datetime
