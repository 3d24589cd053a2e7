"""Tests for forwarding filesystem events to the change tracker."""

from unittest.mock import MagicMock

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from devserver.watch.watcher import AddOnEventHandler, SourceWatcher, is_hidden


class TestIsHidden:
    """Tests for is_hidden."""

    def test_dotfiles_and_dot_directories(self):
        assert is_hidden("src/.DS_Store")
        assert is_hidden(".git/config")
        assert is_hidden("src/.cache/file.js")

    def test_regular_paths(self):
        assert not is_hidden("src/code.js")
        assert not is_hidden("../src/code.js")


class TestAddOnEventHandler:
    """Tests for AddOnEventHandler."""

    def test_file_events_are_forwarded(self):
        on_path = MagicMock()
        handler = AddOnEventHandler(on_path)

        handler.dispatch(FileCreatedEvent("/add-on/src/a.js"))
        handler.dispatch(FileModifiedEvent("/add-on/src/b.js"))
        handler.dispatch(FileDeletedEvent("/add-on/src/c.js"))

        assert [call.args[0] for call in on_path.call_args_list] == [
            "/add-on/src/a.js",
            "/add-on/src/b.js",
            "/add-on/src/c.js",
        ]

    def test_move_reports_both_paths(self):
        on_path = MagicMock()
        AddOnEventHandler(on_path).dispatch(FileMovedEvent("/add-on/src/old.js", "/add-on/src/new.js"))

        assert [call.args[0] for call in on_path.call_args_list] == ["/add-on/src/old.js", "/add-on/src/new.js"]

    def test_directory_events_are_ignored(self):
        on_path = MagicMock()
        AddOnEventHandler(on_path).dispatch(DirCreatedEvent("/add-on/src/components"))

        on_path.assert_not_called()


class TestSourceWatcher:
    """Tests for SourceWatcher."""

    def make_watcher(self, tmp_path, loop=None, observer_factory=None):
        return SourceWatcher(
            tracker=MagicMock(),
            add_on_id="panel-1",
            src_directory=tmp_path / "src",
            root_directory=tmp_path,
            loop=loop or MagicMock(),
            observer_factory=observer_factory or MagicMock(),
        )

    def test_paths_are_relative_to_root(self, tmp_path):
        loop = MagicMock()
        loop.is_closed.return_value = False
        watcher = self.make_watcher(tmp_path, loop=loop)

        watcher.on_path(str(tmp_path / "src" / "code.js"))

        loop.call_soon_threadsafe.assert_called_once_with(watcher.tracker.track, "panel-1", "src/code.js")

    def test_hidden_files_are_skipped(self, tmp_path):
        loop = MagicMock()
        loop.is_closed.return_value = False
        watcher = self.make_watcher(tmp_path, loop=loop)

        watcher.on_path(str(tmp_path / "src" / ".DS_Store"))

        loop.call_soon_threadsafe.assert_not_called()

    def test_closed_loop_drops_events(self, tmp_path):
        loop = MagicMock()
        loop.is_closed.return_value = True
        watcher = self.make_watcher(tmp_path, loop=loop)

        watcher.on_path(str(tmp_path / "src" / "code.js"))

        loop.call_soon_threadsafe.assert_not_called()

    def test_start_and_stop(self, tmp_path):
        observer = MagicMock()
        watcher = self.make_watcher(tmp_path, observer_factory=MagicMock(return_value=observer))

        watcher.start()
        assert watcher.is_running
        observer.schedule.assert_called_once()
        assert observer.schedule.call_args.args[1] == str(tmp_path / "src")
        assert observer.schedule.call_args.kwargs == {"recursive": True}
        observer.start.assert_called_once()

        watcher.stop()
        assert not watcher.is_running
        observer.stop.assert_called_once()
        observer.join.assert_called_once()
