from functools import wraps
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .backup import (
    BackupNotifier,
    FileBackupSink,
    InlineBackupNotifier,
    NullBackupNotifier,
    mirror_articles,
)
from .constants import BACKUP_DIR, COUNT_VIEWS, SANITIZE_TITLES
from .core import Wiki
from .db import get_engine, init_db
from .errors import WikiError
from .render import render_markdown
from .store import ArticleOrder

ENGINE = get_engine()

DEMO_ARTICLES = {
    "home": (
        "# Welcome to the wiki!\n\n"
        "This is the home page.\n\n"
        "## Features\n\n"
        "- Creating articles\n"
        "- Editing articles\n"
        "- Edit history with restore\n"
        "- Searching articles\n"
    ),
    "markdown-help": (
        "# Markdown help\n\n"
        "Articles are written in **Markdown**.\n\n"
        "| Syntax | Result |\n"
        "|--------|--------|\n"
        "| `**bold**` | **bold** |\n"
        "| `*italic*` | *italic* |\n"
    ),
}

cli = typer.Typer()
console = Console()


def _notifier() -> BackupNotifier:
    if not BACKUP_DIR:
        return NullBackupNotifier()
    return InlineBackupNotifier(FileBackupSink(BACKUP_DIR))


def _wiki() -> Wiki:
    return Wiki.from_engine(
        ENGINE,
        notifier=_notifier(),
        count_views=COUNT_VIEWS,
        sanitize_titles=SANITIZE_TITLES,
    )


def _read_content(content: str | None, file: Path | None, default: str) -> str:
    if content is not None:
        return content
    if file is not None:
        return file.read_text(encoding="utf-8")
    return default


def reports_errors(func):  # type: ignore[no-untyped-def]
    @wraps(func)
    def wrapper(*args, **kwargs):  # type: ignore[no-untyped-def]
        try:
            return func(*args, **kwargs)
        except WikiError as e:
            logger.error(e)
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    return wrapper


@cli.callback()
def main():
    """Markdown wiki with edit history."""
    init_db(ENGINE)


@cli.command("init-db")
def init_database():
    """Create missing tables. Runs before every command anyway."""
    init_db(ENGINE)


@cli.command()
@reports_errors
def seed():
    """Create the demo articles when the wiki is empty."""
    wiki = _wiki()
    if wiki.list_articles():
        logger.info("Wiki already has articles, not seeding")
        return
    for title, content in DEMO_ARTICLES.items():
        wiki.create_article(title, content)
        typer.echo(f"Created {title}")


@cli.command()
@reports_errors
def create(
    title: str,
    content: str | None = typer.Option(None, "--content", "-c"),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True),
    author: str | None = typer.Option(None, "--author", "-a"),
):
    default = f"# {title}\n\nStart writing your article here..."
    article = _wiki().create_article(title, _read_content(content, file, default), author)
    typer.echo(f"Created {article.title}")


@cli.command()
@reports_errors
def show(title: str, html: bool = typer.Option(False, "--html")):
    article = _wiki().get_article(title)
    typer.echo(render_markdown(article.content) if html else article.content)


@cli.command()
@reports_errors
def edit(
    title: str,
    content: str | None = typer.Option(None, "--content", "-c"),
    file: Path | None = typer.Option(None, "--file", "-f", exists=True),
    author: str | None = typer.Option(None, "--author", "-a"),
):
    if content is None and file is None:
        raise typer.BadParameter("Pass --content or --file")
    article = _wiki().update_article(title, _read_content(content, file, ""), author)
    typer.echo(f"Updated {article.title}")


@cli.command()
@reports_errors
def delete(title: str, yes: bool = typer.Option(False, "--yes", "-y")):
    if not yes:
        typer.confirm(f"Delete '{title}' and its whole history?", abort=True)
    _wiki().delete_article(title)
    typer.echo(f"Deleted {title}")


@cli.command("list")
@reports_errors
def list_articles(
    order_by: ArticleOrder = typer.Option(ArticleOrder.UPDATED_AT, "--order-by"),
    ascending: bool = typer.Option(False, "--ascending"),
):
    table = Table("Title", "Author", "Updated", "Versions")
    for summary in _wiki().list_articles(order_by, descending=not ascending):
        table.add_row(
            summary.title,
            summary.author or "-",
            f"{summary.updated_at:%Y-%m-%d %H:%M}",
            str(summary.history_count),
        )
    console.print(table)


@cli.command()
@reports_errors
def search(query: str):
    articles = _wiki().search_articles(query)
    for article in articles:
        typer.echo(article.title)
    logger.info(f"{len(articles)} articles match '{query}'")


@cli.command()
@reports_errors
def history(title: str):
    table = Table("Id", "Created", "Author", "Size")
    wiki = _wiki()
    for entry in wiki.describe_history(title):
        table.add_row(
            str(entry.id),
            f"{entry.created_at:%Y-%m-%d %H:%M:%S}",
            entry.author or "-",
            str(len(entry.content)),
        )
    console.print(table)


@cli.command()
@reports_errors
def restore(entry_id: int, author: str | None = typer.Option(None, "--author", "-a")):
    article = _wiki().restore_version(entry_id, author)
    typer.echo(f"Restored {article.title} to version {entry_id}")


@cli.command("add-user")
@reports_errors
def add_user(
    username: str,
    password: str = typer.Option(
        ..., prompt=True, hide_input=True, confirmation_prompt=True
    ),
):
    _wiki().users.register(username, password)
    typer.echo(f"Registered {username}")


@cli.command("delete-user")
@reports_errors
def delete_user(username: str):
    _wiki().users.delete(username)
    typer.echo(f"Deleted {username}")


@cli.command()
def mirror(directory: Path = typer.Option(Path(BACKUP_DIR), "--directory", "-d")):
    """Write every article to the backup directory."""
    written = mirror_articles(ENGINE, FileBackupSink(directory))
    typer.echo(f"Mirrored {written} articles to {directory}")


if __name__ == "__main__":
    cli()
