from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time without tzinfo, the form SQLite hands back on reload."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
