from datetime import datetime

from sqlmodel import Field, SQLModel

from .fields import utcnow


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)


class UserRead(SQLModel):
    username: str
    created_at: datetime
