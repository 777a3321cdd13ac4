from loguru import logger

from .backup import FileBackupSink, mirror_articles
from .constants import BACKUP_DIR
from .db import get_engine
from .errors import BackupFailure

ENGINE = get_engine()
SINK = FileBackupSink(BACKUP_DIR)


def persist_backup(title: str, content: str) -> bool:
    try:
        SINK.persist(title, content)
    except BackupFailure as e:
        logger.warning(e)
        return False
    return True


def remove_backup(title: str) -> bool:
    try:
        SINK.remove(title)
    except BackupFailure as e:
        logger.warning(e)
        return False
    return True


def mirror_all_articles() -> int:
    logger.info("Starting full backup mirror")
    return mirror_articles(ENGINE, SINK)
