from loguru import logger
from passlib.context import CryptContext
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, update

from .db import transaction
from .errors import AuthenticationFailed, Conflict, NotFound
from .models.article import Article
from .models.history import HistoryEntry
from .models.user import User

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class UserDirectory:
    def __init__(self, engine: Engine):
        self.engine = engine

    def register(self, username: str, password: str) -> User:
        with transaction(self.engine) as session:
            if session.exec(select(User).where(User.username == username)).first():
                raise Conflict(f"User '{username}' already exists")
            user = User(username=username, password_hash=get_password_hash(password))
            session.add(user)
            try:
                session.flush()
            except IntegrityError as e:
                raise Conflict(f"User '{username}' already exists") from e
        logger.info(f"Registered user '{username}'")
        return user

    def get(self, username: str) -> User:
        with Session(self.engine) as session:
            user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            raise NotFound(f"User '{username}' not found")
        return user

    def list(self) -> list[User]:
        with Session(self.engine) as session:
            return list(session.exec(select(User).order_by(User.created_at.desc())).all())  # type: ignore[attr-defined]

    def authenticate(self, username: str, password: str) -> User:
        try:
            user = self.get(username)
        except NotFound:
            raise AuthenticationFailed("Invalid username or password") from None
        if not verify_password(password, user.password_hash):
            logger.warning(f"Wrong password for user '{username}'")
            raise AuthenticationFailed("Invalid username or password")
        return user

    def delete(self, username: str) -> None:
        """Delete a user. Articles and history they authored become anonymous."""
        with transaction(self.engine) as session:
            user = session.exec(select(User).where(User.username == username)).first()
            if user is None:
                raise NotFound(f"User '{username}' not found")
            session.exec(  # type: ignore[call-overload]
                update(Article).where(Article.author_id == user.id).values(author_id=None)  # type: ignore[arg-type]
            )
            session.exec(  # type: ignore[call-overload]
                update(HistoryEntry)
                .where(HistoryEntry.author_id == user.id)  # type: ignore[arg-type]
                .values(author_id=None)
            )
            session.delete(user)
        logger.info(f"Deleted user '{username}'")

    def resolve_author(self, username: str | None) -> int | None:
        """Turn the current author handle into a user id. `None` is anonymous."""
        if username is None:
            return None
        return self.get(username).id
