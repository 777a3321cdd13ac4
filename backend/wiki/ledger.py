from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import Session, delete, select

from .backup import BackupNotifier, NullBackupNotifier, notify_changed
from .db import transaction
from .errors import NotFound
from .models.article import Article
from .models.fields import utcnow
from .models.history import HistoryEntry, HistoryEntryRead
from .models.user import User


class HistoryLedger:
    """Append-only log of past article contents.

    Entries are only ever written as part of an article mutation, through
    `record` or `supersede`, inside the caller's transaction.
    """

    def __init__(self, engine: Engine, notifier: BackupNotifier | None = None):
        self.engine = engine
        self.notifier = notifier or NullBackupNotifier()

    def record(
        self,
        session: Session,
        article: Article,
        snapshot: str,
        author_id: int | None = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(
            article_id=article.id,
            content=snapshot,
            author_id=author_id,
        )
        session.add(entry)
        session.flush()
        return entry

    def supersede(
        self,
        session: Session,
        article: Article,
        content: str,
        author_id: int | None = None,
    ) -> HistoryEntry:
        """Archive the article's current content, then replace it."""
        entry = self.record(session, article, article.content, article.author_id)
        article.content = content
        article.author_id = author_id
        article.updated_at = utcnow()
        session.add(article)
        return entry

    def purge(self, session: Session, article_id: int) -> int:
        result = session.exec(  # type: ignore[call-overload]
            delete(HistoryEntry).where(HistoryEntry.article_id == article_id)  # type: ignore[arg-type]
        )
        return result.rowcount

    def list_for(self, article: Article) -> list[HistoryEntry]:
        """Entries of an article, most recent first."""
        with Session(self.engine) as session:
            return list(
                session.exec(
                    select(HistoryEntry)
                    .where(HistoryEntry.article_id == article.id)
                    .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())  # type: ignore[attr-defined, union-attr]
                ).all()
            )

    def list_with_authors(self, article: Article) -> list[HistoryEntryRead]:
        """Like `list_for`, with each entry's author resolved to a username."""
        with Session(self.engine) as session:
            rows = session.exec(
                select(HistoryEntry, User.username)
                .join(User, HistoryEntry.author_id == User.id, isouter=True)  # type: ignore[arg-type]
                .where(HistoryEntry.article_id == article.id)
                .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())  # type: ignore[attr-defined, union-attr]
            ).all()
        return [
            HistoryEntryRead(**entry.model_dump(), author=username)
            for entry, username in rows
        ]

    def get(self, entry_id: int) -> HistoryEntry:
        with Session(self.engine) as session:
            entry = session.get(HistoryEntry, entry_id)
        if entry is None:
            raise NotFound(f"History entry {entry_id} not found")
        return entry

    def restore(self, entry_id: int, author_id: int | None = None) -> Article:
        """Make a past snapshot current again, archiving the content it replaces."""
        with transaction(self.engine) as session:
            entry = session.get(HistoryEntry, entry_id)
            if entry is None:
                raise NotFound(f"History entry {entry_id} not found")
            article = session.get(Article, entry.article_id)
            if article is None:
                raise NotFound(
                    f"Article {entry.article_id} of history entry {entry_id} not found"
                )
            self.supersede(session, article, entry.content, author_id)

        logger.info(f"Restored '{article.title}' to history entry {entry_id}")
        notify_changed(self.notifier, article.title, article.content)
        return article
