from unittest import mock

import pytest

from wiki.backup import (
    FileBackupSink,
    InlineBackupNotifier,
    QueueBackupNotifier,
    mirror_articles,
)
from wiki.errors import BackupFailure
from wiki.store import ArticleStore


class BrokenNotifier:
    def article_changed(self, title, content):
        raise BackupFailure("sink unavailable")

    def article_deleted(self, title):
        raise ConnectionError("redis unavailable")


class TestFileBackupSink:
    def test_persist(self, tmp_path):
        sink = FileBackupSink(tmp_path / "backup")

        sink.persist("home", "# Hi")

        assert (tmp_path / "backup" / "home.md").read_text(encoding="utf-8") == "# Hi"

    def test_persist_overwrites(self, tmp_path):
        sink = FileBackupSink(tmp_path)
        sink.persist("home", "old")

        sink.persist("home", "new")

        assert (tmp_path / "home.md").read_text(encoding="utf-8") == "new"

    def test_path_separators_stay_inside_directory(self, tmp_path):
        sink = FileBackupSink(tmp_path)

        assert sink.path_for("a/b\\c") == tmp_path / "a_b_c.md"

    def test_remove(self, tmp_path):
        sink = FileBackupSink(tmp_path)
        sink.persist("home", "# Hi")

        sink.remove("home")
        sink.remove("never-written")

        assert not (tmp_path / "home.md").exists()

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        sink = FileBackupSink(blocker / "backup")

        with pytest.raises(BackupFailure):
            sink.persist("home", "# Hi")


class TestNotification:
    def test_backup_failure_does_not_fail_mutations(self, engine):
        store = ArticleStore(engine, notifier=BrokenNotifier())

        store.create("Home", "C1")
        store.update("Home", "C2")
        assert store.get("Home").content == "C2"
        store.delete("Home")

        assert store.list_summaries() == []

    def test_inline_notifier_mirrors_files(self, engine, tmp_path):
        store = ArticleStore(engine, notifier=InlineBackupNotifier(FileBackupSink(tmp_path)))

        article = store.create("Home", "C1")
        store.update("Home", "C2")
        assert (tmp_path / "home.md").read_text(encoding="utf-8") == "C2"

        store.ledger.restore(store.ledger.list_for(article)[0].id)
        assert (tmp_path / "home.md").read_text(encoding="utf-8") == "C1"

        store.delete("Home")
        assert not (tmp_path / "home.md").exists()

    def test_queue_notifier_enqueues_jobs(self):
        queue = mock.MagicMock()
        notifier = QueueBackupNotifier(queue)

        notifier.article_changed("home", "# Hi")
        notifier.article_deleted("home")

        assert queue.enqueue.call_count == 2
        changed, deleted = queue.enqueue.call_args_list
        assert changed.args == ("wiki.tasks.persist_backup",)
        assert changed.kwargs["args"] == ("home", "# Hi")
        assert deleted.args == ("wiki.tasks.remove_backup",)
        assert deleted.kwargs["args"] == ("home",)


class TestMirror:
    def test_mirror_articles(self, engine, store, tmp_path):
        store.create("Home", "# Hi")
        store.create("Other", "other")

        written = mirror_articles(engine, FileBackupSink(tmp_path))

        assert written == 2
        assert sorted(p.name for p in tmp_path.iterdir()) == ["home.md", "other.md"]

    def test_mirror_skips_failures(self, engine, store):
        store.create("Home", "# Hi")
        sink = mock.MagicMock()
        sink.persist.side_effect = BackupFailure("disk full")

        assert mirror_articles(engine, sink) == 0


class TestTasks:
    def test_persist_backup(self, tmp_path):
        from wiki import tasks

        with mock.patch("wiki.tasks.SINK", FileBackupSink(tmp_path)):
            assert tasks.persist_backup("home", "# Hi") is True
            assert tasks.remove_backup("home") is True

        assert not (tmp_path / "home.md").exists()

    def test_persist_backup_swallows_failures(self):
        from wiki import tasks

        sink = mock.MagicMock()
        sink.persist.side_effect = BackupFailure("disk full")
        with mock.patch("wiki.tasks.SINK", sink):
            assert tasks.persist_backup("home", "# Hi") is False

    def test_mirror_all_articles(self, engine, store, tmp_path):
        from wiki import tasks

        store.create("Home", "# Hi")
        with (
            mock.patch("wiki.tasks.ENGINE", engine),
            mock.patch("wiki.tasks.SINK", FileBackupSink(tmp_path)),
        ):
            assert tasks.mirror_all_articles() == 1
        assert (tmp_path / "home.md").exists()
