from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from ..core import Wiki
from ..models.article import Article, ArticleSummary
from ..models.history import HistoryEntryRead
from ..store import ArticleOrder
from .common import get_current_author, get_wiki, require_admin

router = APIRouter(
    tags=["articles"],
    responses={404: {"description": "Not found"}},
)


class CreateArticleRequest(BaseModel):
    title: str = Field(min_length=1)
    content: str


class UpdateArticleRequest(BaseModel):
    content: str


@router.post("", status_code=201)
def create_article(
    body: CreateArticleRequest,
    wiki: Wiki = Depends(get_wiki),
    author: str | None = Depends(get_current_author),
) -> Article:
    return wiki.create_article(body.title, body.content, author)


@router.get("")
def list_articles(
    order_by: ArticleOrder = ArticleOrder.UPDATED_AT,
    descending: bool = True,
    wiki: Wiki = Depends(get_wiki),
) -> list[ArticleSummary]:
    return wiki.list_articles(order_by, descending)


@router.get("/{title}")
def get_article(title: str, wiki: Wiki = Depends(get_wiki)) -> Article:
    return wiki.get_article(title)


@router.get("/{title}/html", response_class=HTMLResponse)
def get_article_html(title: str, wiki: Wiki = Depends(get_wiki)) -> str:
    return wiki.render_article(title)


@router.put("/{title}")
def update_article(
    title: str,
    body: UpdateArticleRequest,
    wiki: Wiki = Depends(get_wiki),
    author: str | None = Depends(get_current_author),
) -> Article:
    return wiki.update_article(title, body.content, author)


@router.delete("/{title}", status_code=204, dependencies=[Depends(require_admin)])
def delete_article(title: str, wiki: Wiki = Depends(get_wiki)) -> None:
    wiki.delete_article(title)


@router.get("/{title}/history")
def get_history(title: str, wiki: Wiki = Depends(get_wiki)) -> list[HistoryEntryRead]:
    return wiki.describe_history(title)
