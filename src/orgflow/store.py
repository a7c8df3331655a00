"""Owner of the loaded document: cached state, reloads and durable saves."""

import logging
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from orgflow.core.task import Task
from orgflow.document.document import Document
from orgflow.document.tag_index import TagIndex
from orgflow.errors import DocumentUnavailableError, FormatError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def write_atomic(path: Path, contents: str) -> None:
    """Write contents to a temporary sibling file, then rename it over path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(contents)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class DocumentStore:
    """In-memory copy of the document file, shared by API handlers and the watcher."""

    def __init__(self, path: Path, strict: bool = True) -> None:
        """Initialize store for a document path.

        Args:
            path: Absolute path of the document file
            strict: Fail-fast loading; when False, malformed lines are skipped
        """
        self.path = path
        self.strict = strict
        self._lock = threading.RLock()
        self._document = Document()
        self._tag_index: TagIndex | None = None
        self._writable = True
        self.load_errors: list[FormatError] = []

    def reload(self) -> None:
        """Load/reload the document from disk.

        Idempotent. A missing file leaves an empty, writable document in
        place. An unreadable file, or a malformed one in strict mode, leaves
        an empty document that is never saved, so the file on disk is kept
        until a later reload succeeds.
        """
        with self._lock:
            errors: list[FormatError] = []
            writable = True
            try:
                if self.strict:
                    document = Document.load(self.path)
                else:
                    document, errors = Document.load_lenient(self.path)
            except FileNotFoundError:
                logger.info(f"[DocumentStore] No document at {self.path}, starting empty")
                document = Document()
            except (OSError, FormatError) as e:
                logger.warning(
                    f"[DocumentStore] Failed to load {self.path}, serving empty read-only: {e}"
                )
                document = Document()
                errors = [e] if isinstance(e, FormatError) else []
                writable = False

            self._document = document
            self._tag_index = None
            self._writable = writable
            self.load_errors = errors

    @property
    def writable(self) -> bool:
        """False while the last load failed and the file must not be overwritten."""
        return self._writable

    def read(self, reader: Callable[[Document], T]) -> T:
        """Run reader against the current document under the store lock."""
        with self._lock:
            return reader(self._document)

    def update(self, mutate: Callable[[Document], T]) -> T:
        """Apply a mutation and persist the document.

        The document on disk is replaced atomically. If validation or the
        write fails, the in-memory document is reloaded from disk so that it
        matches the file again.

        Raises:
            DocumentUnavailableError: If the last load failed
        """
        with self._lock:
            self._check_writable()
            result = mutate(self._document)
            self._tag_index = None
            try:
                self.save()
            except Exception:
                logger.exception(f"[DocumentStore] Save failed, reloading {self.path}")
                self.reload()
                raise
            return result

    def save(self) -> None:
        with self._lock:
            self._check_writable()
            self._document.validate()
            write_atomic(self.path, self._document.render())
            logger.info(f"[DocumentStore] Saved {self.path}")

    def _check_writable(self) -> None:
        if not self._writable:
            raise DocumentUnavailableError(
                f"{self.path} failed to load; fix the file and reload before changing it"
            )

    def size(self) -> tuple[int, int]:
        return self.read(Document.size)

    def tag_index(self) -> TagIndex:
        """Tag index of the current document, rebuilt after changes."""
        with self._lock:
            if self._tag_index is None:
                self._tag_index = TagIndex.from_document(self._document)
            return self._tag_index

    def select_tasks(
        self,
        project: str | None = None,
        no_project: bool = False,
        sort_by_status: bool = False,
    ) -> list[tuple[int, Task]]:
        """Filter and order tasks, keeping their document index.

        Args:
            project: Keep tasks carrying this project tag (e.g. ``+website``)
            no_project: Keep tasks without any project tag
            sort_by_status: Open tasks first, completed last; stable otherwise

        Returns:
            List of (index in document, task)
        """
        with self._lock:
            selected = list(enumerate(self._document.tasks))

        if project is not None:
            selected = [
                (i, t) for i, t in selected if t.tags is not None and project in t.tags.project_tags()
            ]
        if no_project:
            selected = [(i, t) for i, t in selected if t.tags is None or not t.tags.project_tags()]
        if sort_by_status:
            selected.sort(key=lambda item: item[1].completed)
        return selected
