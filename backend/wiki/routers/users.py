from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..core import Wiki
from ..models.user import UserRead
from .common import get_wiki, require_admin

router = APIRouter(
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


class RegisterUserRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


@router.post("", status_code=201)
def register_user(body: RegisterUserRequest, wiki: Wiki = Depends(get_wiki)) -> UserRead:
    user = wiki.users.register(body.username, body.password)
    return UserRead(username=user.username, created_at=user.created_at)


@router.delete("/{username}", status_code=204, dependencies=[Depends(require_admin)])
def delete_user(username: str, wiki: Wiki = Depends(get_wiki)) -> None:
    wiki.users.delete(username)
