from sqlalchemy.engine import Engine

from .backup import BackupNotifier, NullBackupNotifier, QueueBackupNotifier
from .constants import BACKUP_DIR, COUNT_VIEWS, REDIS_URL, SANITIZE_TITLES
from .daily import DailyArticleCache
from .ledger import HistoryLedger
from .models.article import Article, ArticleSummary
from .models.history import HistoryEntry, HistoryEntryRead
from .render import render_markdown
from .store import ArticleOrder, ArticleStore
from .titles import TitlePolicy
from .users import UserDirectory


class Wiki:
    """Entry point used by the HTTP adapter and the CLI.

    Authors are given as usernames and resolved to user ids once, here,
    before they reach the store.
    """

    def __init__(
        self,
        store: ArticleStore,
        users: UserDirectory,
        daily: DailyArticleCache | None = None,
    ):
        self.store = store
        self.ledger: HistoryLedger = store.ledger
        self.users = users
        self.daily = daily or DailyArticleCache()

    @classmethod
    def from_engine(
        cls,
        engine: Engine,
        notifier: BackupNotifier | None = None,
        count_views: bool = False,
        sanitize_titles: bool = True,
    ) -> "Wiki":
        store = ArticleStore(
            engine,
            notifier=notifier,
            titles=TitlePolicy(sanitize=sanitize_titles),
            count_views=count_views,
        )
        return cls(store, UserDirectory(engine))

    @classmethod
    def from_settings(cls, engine: Engine) -> "Wiki":
        notifier: BackupNotifier = (
            QueueBackupNotifier.from_url(REDIS_URL) if BACKUP_DIR else NullBackupNotifier()
        )
        return cls.from_engine(
            engine,
            notifier=notifier,
            count_views=COUNT_VIEWS,
            sanitize_titles=SANITIZE_TITLES,
        )

    def create_article(self, title: str, content: str, author: str | None = None) -> Article:
        return self.store.create(title, content, self.users.resolve_author(author))

    def get_article(self, title: str) -> Article:
        return self.store.get(title)

    def update_article(self, title: str, content: str, author: str | None = None) -> Article:
        return self.store.update(title, content, self.users.resolve_author(author))

    def delete_article(self, title: str) -> None:
        self.store.delete(title)

    def list_articles(
        self,
        order_by: ArticleOrder = ArticleOrder.UPDATED_AT,
        descending: bool = True,
    ) -> list[ArticleSummary]:
        return self.store.list_summaries(order_by, descending)

    def search_articles(self, query: str) -> list[Article]:
        return self.store.search(query)

    def get_history(self, title: str) -> list[HistoryEntry]:
        article = self.store.get(title, count_view=False)
        return self.ledger.list_for(article)

    def describe_history(self, title: str) -> list[HistoryEntryRead]:
        article = self.store.get(title, count_view=False)
        return self.ledger.list_with_authors(article)

    def restore_version(self, entry_id: int, author: str | None = None) -> Article:
        return self.ledger.restore(entry_id, self.users.resolve_author(author))

    def render_article(self, title: str) -> str:
        return render_markdown(self.store.get(title).content)

    def article_of_the_day(self) -> Article | None:
        return self.daily.pick(self.store)
