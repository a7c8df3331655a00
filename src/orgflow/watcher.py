"""File system watcher for the document file."""

import logging
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

logger = logging.getLogger(__name__)


class DocumentWatcher:
    """Watches the document's directory and reports changes to the document file."""

    def __init__(self, document_path: Path):
        """Initialize watcher for a document file.

        Args:
            document_path: Absolute path of the document file
        """
        self.document_path = document_path
        self._observer: BaseObserver | None = None
        self._callback: Callable[[str], None] | None = None

    def set_callback(self, callback: Callable[[str], None]) -> None:
        """Set callback for document events.

        Args:
            callback: Function(event_type) called on events
        """
        self._callback = callback

    def start(self) -> None:
        """Start watching in the observer's background thread."""
        handler = DocumentEventHandler(self.document_path, self._callback)
        self._observer = Observer()
        self._observer.schedule(handler, str(self.document_path.parent), recursive=False)
        logger.info(f"[DocumentWatcher] Watching {self.document_path}")
        self._observer.start()

    def stop(self) -> None:
        """Stop watching and clean up resources."""
        if self._observer:
            logger.info(f"[DocumentWatcher] Stopping watcher for {self.document_path}")
            self._observer.stop()
            self._observer.join()
            self._observer = None


class DocumentEventHandler(FileSystemEventHandler):
    """Forwards events that concern the document file."""

    def __init__(self, document_path: Path, callback: Callable[[str], None] | None):
        self.document_path = document_path
        self.callback = callback

    def _concerns_document(self, event: FileSystemEvent) -> bool:
        paths = [event.src_path, getattr(event, "dest_path", "")]
        for raw in paths:
            # Convert bytes to str if needed
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            if raw and Path(raw) == self.document_path:
                return True
        return False

    def _handle_event(self, event_type: str, event: FileSystemEvent) -> None:
        """Handle file system event and trigger callback.

        Args:
            event_type: Type of event (modified, created, deleted, moved)
            event: File system event
        """
        if event.is_directory or not self._concerns_document(event):
            return

        logger.debug(f"[DocumentEventHandler] {event_type}: {self.document_path}")

        if self.callback:
            try:
                self.callback(event_type)
            except Exception as e:
                logger.error(f"[DocumentEventHandler] Callback error: {e}", exc_info=True)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._handle_event("modified", event)

    def on_created(self, event: FileSystemEvent) -> None:
        self._handle_event("created", event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._handle_event("deleted", event)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle moves; atomic saves arrive as a move onto the document path."""
        self._handle_event("moved", event)
