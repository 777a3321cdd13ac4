import secrets
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.engine import Engine

from ..constants import ADMIN_PASSWORD, DATABASE_URL
from ..core import Wiki
from ..db import get_engine as create_db_engine


@lru_cache
def get_engine() -> Engine:
    return create_db_engine(DATABASE_URL)


def get_wiki(request: Request) -> Wiki:
    return request.app.state.wiki


def get_current_author(x_wiki_user: str | None = Header(default=None)) -> str | None:
    """Username of the current author. Absent means anonymous."""
    return x_wiki_user or None


def get_admin_password() -> str | None:
    return ADMIN_PASSWORD


def require_admin(
    x_admin_password: str | None = Header(default=None),
    expected: str | None = Depends(get_admin_password),
) -> None:
    if (
        expected is None
        or x_admin_password is None
        or not secrets.compare_digest(x_admin_password, expected)
    ):
        raise HTTPException(status_code=403, detail="Admin password required")
