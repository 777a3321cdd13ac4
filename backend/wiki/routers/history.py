from fastapi import APIRouter, Depends

from ..core import Wiki
from ..models.article import Article
from .common import get_current_author, get_wiki

router = APIRouter(
    tags=["history"],
    responses={404: {"description": "Not found"}},
)


@router.post("/{entry_id}/restore")
def restore_version(
    entry_id: int,
    wiki: Wiki = Depends(get_wiki),
    author: str | None = Depends(get_current_author),
) -> Article:
    """Make a past version current again. The replaced content is archived."""
    return wiki.restore_version(entry_id, author)
