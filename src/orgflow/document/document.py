"""The task and note document: loading, rendering and saving."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from orgflow.core.note import Note
from orgflow.core.task import Task
from orgflow.document.parser import (
    NOTES_MARKER,
    TASKS_MARKER,
    BeforeTasks,
    BetweenLine,
    Effect,
    Line,
    NoteBlock,
    ParserState,
    PostLine,
    PreambleLine,
    TaskLine,
    finish,
    transition,
)
from orgflow.errors import FormatError, InvariantViolation

logger = logging.getLogger(__name__)


def _lines(text: str) -> Iterable[Line]:
    """Yield numbered non-blank lines; blank lines never reach the parser."""
    for number, raw in enumerate(text.split("\n"), start=1):
        raw = raw.removesuffix("\r")
        # Whitespace-only lines count as blank, inside note content too.
        if raw.strip():
            yield Line(number, raw)


@dataclass
class Document:
    """A whole document: opaque preamble, tasks, between block, notes, post block.

    Rendering a freshly parsed canonical document reproduces the source text
    followed by one extra trailing newline.
    """

    preamble: list[str] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    between: list[str] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    post: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> "Document":
        """Parse document text, failing on the first malformed task or note.

        Raises:
            FormatError: With ``line`` set to the offending source line
        """
        doc = cls()
        for effect in _effects(text):
            doc._apply(effect)
        return doc

    @classmethod
    def parse_lenient(cls, text: str) -> tuple["Document", list[FormatError]]:
        """Parse document text, skipping malformed task lines and note blocks.

        Skipped lines are not part of the returned document, so saving it
        drops them from the file.

        Returns:
            (document, errors for every skipped line or block)
        """
        doc = cls()
        errors: list[FormatError] = []
        for effect in _effects(text):
            try:
                doc._apply(effect)
            except FormatError as e:
                logger.warning(f"[Document] Skipping malformed entry: {e}")
                errors.append(e)
        return doc, errors

    @classmethod
    def load(cls, path: str | Path) -> "Document":
        """Read and parse a document file.

        Raises:
            OSError: If the file cannot be read
            FormatError: If the file is not UTF-8 or violates the grammar
        """
        doc = cls.parse(_read(path))
        tasks, notes = doc.size()
        logger.info(f"[Document] Loaded {tasks} tasks and {notes} notes from {path}")
        return doc

    @classmethod
    def load_lenient(cls, path: str | Path) -> tuple["Document", list[FormatError]]:
        """Read a document file in lenient mode; see ``parse_lenient``."""
        doc, errors = cls.parse_lenient(_read(path))
        tasks, notes = doc.size()
        logger.info(
            f"[Document] Loaded {tasks} tasks and {notes} notes from {path} "
            f"({len(errors)} skipped)"
        )
        return doc, errors

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, PreambleLine):
            self.preamble.append(effect.line.text)
        elif isinstance(effect, TaskLine):
            try:
                self.tasks.append(Task.parse(effect.line.text))
            except FormatError as e:
                raise e.at_line(effect.line.number) from e
        elif isinstance(effect, BetweenLine):
            self.between.append(effect.line.text)
        elif isinstance(effect, NoteBlock):
            try:
                self.notes.append(Note.parse([line.text for line in effect.lines]))
            except FormatError as e:
                raise e.at_line(effect.lines[0].number) from e
        elif isinstance(effect, PostLine):
            self.post.append(effect.line.text)

    def append_task(self, task: Task) -> None:
        self.tasks.append(task)

    def append_note(self, note: Note) -> None:
        self.notes.append(note)

    def size(self) -> tuple[int, int]:
        """Return (task count, note count)."""
        return len(self.tasks), len(self.notes)

    def to_lines(self) -> list[str]:
        """Serialize to lines, inverting the parser's section layout."""
        lines = [*self.preamble, "", TASKS_MARKER]
        lines.extend(str(task) for task in self.tasks)
        lines.append("")
        if self.between:
            lines.extend(self.between)
            lines.append("")
        lines.extend([NOTES_MARKER, ""])
        for note in self.notes:
            lines.extend(note.to_lines())
            lines.append("")
        lines.extend(self.post)
        return lines

    def render(self) -> str:
        return "".join(f"{line}\n" for line in self.to_lines())

    def validate(self) -> None:
        """Check that the rendered document reads back into the same sections.

        Raises:
            InvariantViolation: For a constructed task or note that could not
                be read back, e.g. a note without content lines, or for lines
                that would move to another section, e.g. a between block
                that does not start with a ``## `` heading
        """
        for index, task in enumerate(self.tasks):
            try:
                Task.parse(str(task))
            except FormatError as e:
                raise InvariantViolation(f"Task {index} would not load back: {e}") from e
        for index, note in enumerate(self.notes):
            try:
                Note.parse(note.to_lines())
            except FormatError as e:
                raise InvariantViolation(
                    f"Note {index} '{note.title}' would not load back: {e}"
                ) from e

        try:
            reread = Document.parse(self.render())
        except FormatError as e:
            raise InvariantViolation(f"Document would not load back: {e}") from e
        if _sections(reread) != _sections(self):
            raise InvariantViolation(
                f"Document would load back with different sections: "
                f"{reread.size()} tasks and notes instead of {self.size()}"
            )

    def save(self, path: str | Path) -> None:
        """Overwrite the file at path with the rendered document.

        The write is not atomic; callers that need durability write to a
        temporary file and rename it (see ``DocumentStore``).

        Raises:
            InvariantViolation: If the document would not load back
            OSError: If the file cannot be written
        """
        self.validate()
        Path(path).write_text(self.render(), encoding="utf-8")
        logger.debug(f"[Document] Saved to {path}")


def _effects(text: str) -> Iterable[Effect]:
    state: ParserState = BeforeTasks()
    for line in _lines(text):
        state, effects = transition(state, line)
        yield from effects
    yield from finish(state)


def _read(path: str | Path) -> str:
    data = Path(path).read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise FormatError(f"Document {path} is not valid UTF-8: {e}") from e


def _sections(doc: Document) -> tuple[list[str], list[str], list[str], list[list[str]], list[str]]:
    """Section contents as text, for comparing a document with its re-read copy."""
    return (
        doc.preamble,
        [str(task) for task in doc.tasks],
        doc.between,
        [note.to_lines() for note in doc.notes],
        doc.post,
    )
