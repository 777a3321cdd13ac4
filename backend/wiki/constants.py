from os import getenv

DATABASE_URL = getenv("DATABASE_URL", "sqlite:///data/wiki.sqlite")
DEBUG = bool(getenv("DEBUG", False))

ROOT_PATH = getenv("ROOT_PATH", "/")

REDIS_URL = getenv("REDIS_URL", "redis://localhost:6379")
BACKUP_DIR = getenv("BACKUP_DIR", "data/backup")
BACKUP_CRON = getenv("BACKUP_CRON", "0 3 * * *")

COUNT_VIEWS = getenv("WIKI_COUNT_VIEWS", "0").lower() in ("1", "true", "yes")
SANITIZE_TITLES = getenv("WIKI_SANITIZE_TITLES", "1").lower() in ("1", "true", "yes")

ADMIN_PASSWORD = getenv("WIKI_ADMIN_PASSWORD")
