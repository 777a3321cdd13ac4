from enum import Enum

from loguru import logger
from sqlalchemy import func, or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, update

from .backup import BackupNotifier, NullBackupNotifier, notify_changed, notify_deleted
from .db import transaction
from .errors import Conflict, NotFound
from .ledger import HistoryLedger
from .models.article import Article, ArticleSummary
from .models.fields import utcnow
from .models.history import HistoryEntry
from .models.user import User
from .titles import TitlePolicy


class ArticleOrder(str, Enum):
    UPDATED_AT = "updated_at"
    CREATED_AT = "created_at"
    TITLE = "title"


class ArticleStore:
    """Canonical mapping from article title to current content.

    Every content mutation archives the replaced content through the ledger in
    the same transaction. Backups are notified only after the commit.
    """

    def __init__(
        self,
        engine: Engine,
        ledger: HistoryLedger | None = None,
        notifier: BackupNotifier | None = None,
        titles: TitlePolicy | None = None,
        count_views: bool = False,
    ):
        self.engine = engine
        self.notifier = notifier or NullBackupNotifier()
        self.ledger = ledger or HistoryLedger(engine, self.notifier)
        self.titles = titles or TitlePolicy()
        self.count_views = count_views

    def _find(self, session: Session, key: str) -> Article:
        article = session.exec(select(Article).where(Article.title == key)).first()
        if article is None:
            raise NotFound(f"Article '{key}' not found")
        return article

    def create(self, title: str, content: str, author_id: int | None = None) -> Article:
        key = self.titles.key(title)
        with transaction(self.engine) as session:
            if session.exec(select(Article).where(Article.title == key)).first():
                raise Conflict(f"Article '{key}' already exists")
            now = utcnow()
            article = Article(
                title=key,
                content=content,
                author_id=author_id,
                created_at=now,
                updated_at=now,
            )
            session.add(article)
            try:
                session.flush()
            except IntegrityError as e:
                # created concurrently between the lookup and the insert
                raise Conflict(f"Article '{key}' already exists") from e
            self.ledger.record(session, article, content, author_id)

        logger.info(f"Created article '{key}'")
        notify_changed(self.notifier, key, content)
        return article

    def get(self, title: str, count_view: bool | None = None) -> Article:
        key = self.titles.key(title)
        if count_view is None:
            count_view = self.count_views
        with transaction(self.engine) as session:
            article = self._find(session, key)
            if count_view:
                session.exec(  # type: ignore[call-overload]
                    update(Article)
                    .where(Article.id == article.id)  # type: ignore[arg-type]
                    .values(views=Article.views + 1)
                )
                session.refresh(article)
        logger.debug(f"Loaded article '{key}'")
        return article

    def update(self, title: str, content: str, author_id: int | None = None) -> Article:
        key = self.titles.key(title)
        with transaction(self.engine) as session:
            article = self._find(session, key)
            self.ledger.supersede(session, article, content, author_id)

        logger.info(f"Updated article '{key}'")
        notify_changed(self.notifier, key, content)
        return article

    def delete(self, title: str) -> None:
        key = self.titles.key(title)
        with transaction(self.engine) as session:
            article = self._find(session, key)
            removed = self.ledger.purge(session, article.id)  # type: ignore[arg-type]
            session.delete(article)

        logger.info(f"Deleted article '{key}' and {removed} history entries")
        notify_deleted(self.notifier, key)

    def list_summaries(
        self,
        order_by: ArticleOrder = ArticleOrder.UPDATED_AT,
        descending: bool = True,
    ) -> list[ArticleSummary]:
        column = getattr(Article, ArticleOrder(order_by).value)
        history_count = (
            select(func.count(HistoryEntry.id))  # type: ignore[arg-type]
            .where(HistoryEntry.article_id == Article.id)
            .correlate(Article)
            .scalar_subquery()
        )
        statement = (
            select(
                Article.title,
                Article.created_at,
                Article.updated_at,
                User.username,
                history_count,
            )
            .join(User, Article.author_id == User.id, isouter=True)  # type: ignore[arg-type]
            .order_by(column.desc() if descending else column.asc())
        )
        with Session(self.engine) as session:
            rows = session.exec(statement).all()  # type: ignore[call-overload]
        return [
            ArticleSummary(
                title=title,
                created_at=created_at,
                updated_at=updated_at,
                author=username,
                history_count=count,
            )
            for title, created_at, updated_at, username, count in rows
        ]

    def search(self, query: str) -> list[Article]:
        """Case-sensitive substring match over title or content, newest first.

        An empty query matches nothing.
        """
        if not query:
            return []
        statement = (
            select(Article)
            .where(
                or_(
                    Article.title.contains(query, autoescape=True),  # type: ignore[attr-defined]
                    Article.content.contains(query, autoescape=True),  # type: ignore[attr-defined]
                )
            )
            .order_by(Article.updated_at.desc(), Article.id.desc())  # type: ignore[attr-defined, union-attr]
        )
        with Session(self.engine) as session:
            candidates = session.exec(statement).all()
        # LIKE ignores ASCII case on SQLite
        matches = [a for a in candidates if query in a.title or query in a.content]
        logger.debug(f"Search for '{query}' matched {len(matches)} articles")
        return matches
