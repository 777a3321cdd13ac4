#!/usr/bin/env python
"""Enqueue a full backup mirror on BACKUP_CRON (daily at 3am UTC by default).

The mirror catches anything a failed post-commit backup missed.
"""

from datetime import datetime, timezone
from time import sleep

from croniter import croniter  # type: ignore[import-untyped]
from loguru import logger
from redis import Redis  # type: ignore[attr-defined]
from rq import Queue

from wiki.constants import BACKUP_CRON, REDIS_URL
from wiki.tasks import mirror_all_articles


def next_mirror(now: datetime, cron: str = BACKUP_CRON) -> datetime:
    return croniter(cron, now).get_next(datetime)


def enqueue_mirror_if_due(queue: Queue, due: datetime, now: datetime) -> datetime:
    """Enqueue the mirror when `due` has passed and return the next due time."""
    if now < due:
        return due
    try:
        queue.enqueue(  # type: ignore[arg-type]
            mirror_all_articles,
            job_id=f"mirror_all_articles:{now:%Y%m%d%H%M}",
            job_timeout=600,
        )
    except Exception as e:
        logger.error(f"Failed to enqueue backup mirror: {e}")
    due = next_mirror(now)
    logger.info(f"Next backup mirror: {due.isoformat()}")
    return due


def run_scheduler() -> None:
    queue = Queue("backup", connection=Redis.from_url(REDIS_URL))
    due = next_mirror(datetime.now(timezone.utc))
    logger.info(f"Starting scheduler, first backup mirror: {due.isoformat()}")
    while True:
        due = enqueue_mirror_if_due(queue, due, datetime.now(timezone.utc))
        sleep(60)


if __name__ == "__main__":
    run_scheduler()
