"""Best-effort mirroring of article content outside the primary store.

The store never waits on a sink: once a transaction has committed it hands the
change to a `BackupNotifier`, which either writes inline, enqueues a job for the
rq worker, or does nothing. Failures are logged and swallowed here.
"""
from pathlib import Path
from typing import Protocol

from loguru import logger
from redis import Redis  # type: ignore
from rq import Queue, Retry
from sqlalchemy.engine import Engine
from sqlmodel import Session, select
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .errors import BackupFailure
from .models.article import Article


class BackupSink(Protocol):
    def persist(self, title: str, content: str) -> None: ...

    def remove(self, title: str) -> None: ...


class FileBackupSink:
    """Writes every article to `<directory>/<title>.md`."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, title: str) -> Path:
        # verbatim titles may contain path separators
        name = title.replace("/", "_").replace("\\", "_")
        return self.directory / f"{name}.md"

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=0.1, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )
    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def persist(self, title: str, content: str) -> None:
        path = self.path_for(title)
        try:
            self._write(path, content)
        except OSError as e:
            raise BackupFailure(f"Could not back up '{title}' to {path}: {e}") from e
        logger.info(f"Backed up '{title}' to {path}")

    def remove(self, title: str) -> None:
        path = self.path_for(title)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise BackupFailure(f"Could not remove backup {path}: {e}") from e
        logger.info(f"Removed backup of '{title}'")


class BackupNotifier(Protocol):
    def article_changed(self, title: str, content: str) -> None: ...

    def article_deleted(self, title: str) -> None: ...


class NullBackupNotifier:
    def article_changed(self, title: str, content: str) -> None:
        pass

    def article_deleted(self, title: str) -> None:
        pass


class InlineBackupNotifier:
    """Writes to the sink in the calling process."""

    def __init__(self, sink: BackupSink):
        self.sink = sink

    def article_changed(self, title: str, content: str) -> None:
        self.sink.persist(title, content)

    def article_deleted(self, title: str) -> None:
        self.sink.remove(title)


class QueueBackupNotifier:
    """Hands the change to the rq worker through the `backup` queue."""

    def __init__(self, queue: Queue):
        self.queue = queue

    @classmethod
    def from_url(cls, redis_url: str) -> "QueueBackupNotifier":
        queue = Queue("backup", connection=Redis.from_url(redis_url), default_timeout=60)
        return cls(queue)

    def article_changed(self, title: str, content: str) -> None:
        self.queue.enqueue(
            "wiki.tasks.persist_backup", args=(title, content), retry=Retry(max=3)
        )

    def article_deleted(self, title: str) -> None:
        self.queue.enqueue("wiki.tasks.remove_backup", args=(title,), retry=Retry(max=3))


def notify_changed(notifier: BackupNotifier, title: str, content: str) -> None:
    try:
        notifier.article_changed(title, content)
    except Exception as e:
        logger.warning(f"Backup of '{title}' failed: {e}")


def notify_deleted(notifier: BackupNotifier, title: str) -> None:
    try:
        notifier.article_deleted(title)
    except Exception as e:
        logger.warning(f"Removing backup of '{title}' failed: {e}")


def mirror_articles(engine: Engine, sink: BackupSink) -> int:
    """Persist every article to the sink. Returns how many were written."""
    written = 0
    with Session(engine) as session:
        for article in session.exec(select(Article).order_by(Article.title)):
            try:
                sink.persist(article.title, article.content)
            except BackupFailure as e:
                logger.warning(e)
            else:
                written += 1
    logger.info(f"Mirrored {written} articles")
    return written
