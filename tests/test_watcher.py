"""Tests for the document file watcher."""

from pathlib import Path

from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from orgflow.watcher import DocumentEventHandler, DocumentWatcher


def test_handler_reports_document_events(tmp_path: Path) -> None:
    """Test that events on the document file reach the callback."""
    document = tmp_path / "refile.org"
    events: list[str] = []
    handler = DocumentEventHandler(document, events.append)

    handler.on_modified(FileModifiedEvent(str(document)))
    handler.on_created(FileCreatedEvent(str(document)))

    assert events == ["modified", "created"]


def test_handler_ignores_other_files(tmp_path: Path) -> None:
    """Test that events on sibling files are ignored."""
    document = tmp_path / "refile.org"
    events: list[str] = []
    handler = DocumentEventHandler(document, events.append)

    handler.on_modified(FileModifiedEvent(str(tmp_path / "other.org")))

    assert events == []


def test_handler_reports_move_onto_document(tmp_path: Path) -> None:
    """Test that an atomic save, seen as a rename onto the document, is reported."""
    document = tmp_path / "refile.org"
    events: list[str] = []
    handler = DocumentEventHandler(document, events.append)

    handler.on_moved(FileMovedEvent(str(tmp_path / ".refile.org.abc.tmp"), str(document)))

    assert events == ["moved"]


def test_handler_survives_callback_error(tmp_path: Path) -> None:
    """Test that a failing callback does not propagate."""
    document = tmp_path / "refile.org"

    def callback(event_type: str) -> None:
        raise RuntimeError("boom")

    handler = DocumentEventHandler(document, callback)
    handler.on_modified(FileModifiedEvent(str(document)))


def test_watcher_start_stop(tmp_path: Path) -> None:
    """Test that the watcher starts and stops cleanly."""
    watcher = DocumentWatcher(tmp_path / "refile.org")
    watcher.set_callback(lambda event_type: None)

    watcher.start()
    watcher.stop()

    assert watcher._observer is None
