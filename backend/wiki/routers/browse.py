from fastapi import APIRouter, Depends, HTTPException

from ..core import Wiki
from ..models.article import Article
from .common import get_wiki

router = APIRouter(
    tags=["browse"],
    responses={404: {"description": "Not found"}},
)


@router.get("/search")
def search_articles(q: str = "", wiki: Wiki = Depends(get_wiki)) -> list[Article]:
    return wiki.search_articles(q)


@router.get("/today")
def article_of_the_day(wiki: Wiki = Depends(get_wiki)) -> Article:
    article = wiki.article_of_the_day()
    if article is None:
        raise HTTPException(status_code=404, detail="The wiki has no articles yet")
    return article
