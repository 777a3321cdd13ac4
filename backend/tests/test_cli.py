from unittest import mock

import pytest
from sqlmodel import create_engine
from sqlmodel.pool import StaticPool
from typer.testing import CliRunner

from wiki.cli import cli
from wiki.core import Wiki

runner = CliRunner()


@pytest.fixture
def engine(tmp_path):
    """Patch the CLI engine and backup directory with throwaway ones."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with (
        mock.patch("wiki.cli.ENGINE", engine),
        mock.patch("wiki.cli.BACKUP_DIR", str(tmp_path / "backup")),
    ):
        yield engine


@pytest.fixture
def cli_wiki(engine):
    return Wiki.from_engine(engine)


class TestArticles:
    def test_create_and_show(self, engine, tmp_path):
        result = runner.invoke(cli, ["create", "Home", "--content", "# Hi"])
        assert result.exit_code == 0, result.output
        assert "Created home" in result.output

        result = runner.invoke(cli, ["show", "Home"])
        assert result.exit_code == 0
        assert "# Hi" in result.output
        assert (tmp_path / "backup" / "home.md").read_text(encoding="utf-8") == "# Hi"

    def test_create_default_content(self, engine, cli_wiki):
        runner.invoke(cli, ["create", "Home"])

        assert cli_wiki.get_article("home").content.startswith("# Home")

    def test_create_from_file(self, engine, cli_wiki, tmp_path):
        source = tmp_path / "home.md"
        source.write_text("# From file", encoding="utf-8")

        result = runner.invoke(cli, ["create", "Home", "--file", str(source)])

        assert result.exit_code == 0
        assert cli_wiki.get_article("home").content == "# From file"

    def test_create_duplicate(self, engine):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["create", "Home", "--content", "# Again"])

        assert result.exit_code == 1

    def test_show_html(self, engine):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["show", "Home", "--html"])

        assert '<h1 id="hi">Hi</h1>' in result.output

    def test_show_missing(self, engine):
        result = runner.invoke(cli, ["show", "missing"])

        assert result.exit_code == 1

    def test_edit(self, engine, cli_wiki):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["edit", "Home", "--content", "# Hello"])

        assert result.exit_code == 0
        assert cli_wiki.get_article("home").content == "# Hello"

    def test_edit_requires_content(self, engine):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["edit", "Home"])

        assert result.exit_code != 0

    def test_delete(self, engine, cli_wiki):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["delete", "Home", "--yes"])

        assert result.exit_code == 0
        assert cli_wiki.list_articles() == []

    def test_delete_asks_for_confirmation(self, engine, cli_wiki):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])

        result = runner.invoke(cli, ["delete", "Home"], input="n\n")

        assert result.exit_code == 1
        assert len(cli_wiki.list_articles()) == 1

    def test_list_and_search(self, engine):
        runner.invoke(cli, ["create", "Cats", "--content", "meow"])
        runner.invoke(cli, ["create", "Dogs", "--content", "woof"])

        result = runner.invoke(cli, ["list"])
        assert result.exit_code == 0
        assert "cats" in result.output
        assert "dogs" in result.output

        result = runner.invoke(cli, ["search", "meow"])
        assert result.exit_code == 0
        assert result.output.split() == ["cats"]

    def test_seed(self, engine, cli_wiki):
        result = runner.invoke(cli, ["seed"])
        assert result.exit_code == 0
        titles = {s.title for s in cli_wiki.list_articles()}
        assert titles == {"home", "markdown-help"}

        runner.invoke(cli, ["seed"])
        assert len(cli_wiki.list_articles()) == 2


class TestHistory:
    def test_history_and_restore(self, engine, cli_wiki):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])
        runner.invoke(cli, ["edit", "Home", "--content", "# Hello"])
        baseline = cli_wiki.get_history("home")[-1]

        result = runner.invoke(cli, ["history", "Home"])
        assert result.exit_code == 0
        assert str(baseline.id) in result.output

        result = runner.invoke(cli, ["restore", str(baseline.id)])
        assert result.exit_code == 0
        assert cli_wiki.get_article("home").content == "# Hi"
        assert len(cli_wiki.get_history("home")) == 3

    def test_restore_missing(self, engine):
        result = runner.invoke(cli, ["restore", "12345"])

        assert result.exit_code == 1


class TestUsers:
    def test_add_user_and_author(self, engine, cli_wiki):
        result = runner.invoke(cli, ["add-user", "alice"], input="secret\nsecret\n")
        assert result.exit_code == 0, result.output

        runner.invoke(cli, ["create", "Home", "--content", "# Hi", "--author", "alice"])

        assert cli_wiki.list_articles()[0].author == "alice"
        assert cli_wiki.users.authenticate("alice", "secret")

        result = runner.invoke(cli, ["history", "Home"])
        assert result.exit_code == 0
        assert "alice" in result.output

    def test_unknown_author(self, engine):
        result = runner.invoke(
            cli, ["create", "Home", "--content", "# Hi", "--author", "nobody"]
        )

        assert result.exit_code == 1

    def test_delete_user(self, engine, cli_wiki):
        runner.invoke(cli, ["add-user", "alice"], input="secret\nsecret\n")

        result = runner.invoke(cli, ["delete-user", "alice"])

        assert result.exit_code == 0
        assert cli_wiki.users.list() == []


class TestMirror:
    def test_mirror(self, engine, tmp_path):
        runner.invoke(cli, ["create", "Home", "--content", "# Hi"])
        target = tmp_path / "mirror"

        result = runner.invoke(cli, ["mirror", "--directory", str(target)])

        assert result.exit_code == 0
        assert (target / "home.md").read_text(encoding="utf-8") == "# Hi"
