import random
from collections.abc import Callable, Sequence
from datetime import date

from loguru import logger

from .errors import NotFound
from .models.article import Article
from .store import ArticleStore


class DailyArticleCache:
    """Picks one random article per calendar day.

    The pick is replaced when the day changes or when the picked article
    no longer exists.
    """

    def __init__(
        self,
        clock: Callable[[], date] = date.today,
        choose: Callable[[Sequence[str]], str] = random.choice,
    ):
        self._clock = clock
        self._choose = choose
        self._day: date | None = None
        self._title: str | None = None

    def invalidate(self) -> None:
        self._day = None
        self._title = None

    def pick(self, store: ArticleStore) -> Article | None:
        today = self._clock()
        if self._day == today and self._title is not None:
            try:
                return store.get(self._title, count_view=False)
            except NotFound:
                logger.debug(f"Article of the day '{self._title}' is gone, picking again")

        titles = [summary.title for summary in store.list_summaries()]
        if not titles:
            self.invalidate()
            return None
        self._day = today
        self._title = self._choose(titles)
        logger.info(f"Article of the day for {today}: '{self._title}'")
        return store.get(self._title, count_view=False)
