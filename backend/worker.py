#!/usr/bin/env python
from sys import argv
from redis import Redis  # type: ignore
from rq import Worker

# Preload libraries
import wiki.tasks  # noqa: F401
from loguru import logger

from wiki.constants import REDIS_URL


queue_names: list[str] = argv[1:] or ["backup"]
logger.info(f"Starting worker with queues: {queue_names}")

w = Worker(
    queue_names,
    connection=Redis.from_url(REDIS_URL),
)
w.work()
