import pytest
from fastapi.testclient import TestClient
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool

from wiki.core import Wiki
from wiki.db import init_db
from wiki.main import app
from wiki.routers.common import get_admin_password, get_wiki

ADMIN_PASSWORD = "correct horse battery staple"


class RecordingNotifier:
    def __init__(self):
        self.changed: list[tuple[str, str]] = []
        self.deleted: list[str] = []

    def article_changed(self, title: str, content: str) -> None:
        self.changed.append((title, content))

    def article_deleted(self, title: str) -> None:
        self.deleted.append(title)


@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def wiki(engine, notifier):
    return Wiki.from_engine(engine, notifier=notifier)


@pytest.fixture
def store(wiki):
    return wiki.store


@pytest.fixture
def ledger(wiki):
    return wiki.ledger


@pytest.fixture
def client(wiki):
    app.dependency_overrides[get_wiki] = lambda: wiki
    app.dependency_overrides[get_admin_password] = lambda: ADMIN_PASSWORD
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Password": ADMIN_PASSWORD}


@pytest.fixture
def reject_history_writes(engine):
    """Make every later history insert fail inside the database."""

    def reject():
        with engine.connect() as connection:
            connection.exec_driver_sql(
                "CREATE TRIGGER reject_history BEFORE INSERT ON historyentry "
                "BEGIN SELECT RAISE(ABORT, 'history is read-only'); END"
            )
            connection.commit()

    return reject
