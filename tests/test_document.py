"""Tests for document parsing, rendering and saving."""

from pathlib import Path

import pytest

from orgflow.core.note import Note
from orgflow.core.task import Task
from orgflow.document.document import Document
from orgflow.document.parser import (
    AfterNotes,
    BeforeTasks,
    BetweenLine,
    BetweenTasksAndNotes,
    InNotes,
    InTasks,
    Line,
    NoteBlock,
    PostLine,
    PreambleLine,
    TaskLine,
    finish,
    transition,
)
from orgflow.errors import FormatError, InvariantViolation, MissingDescriptionError, TagError


def test_load_sizes(document_file: Path, document_with_post_file: Path) -> None:
    """Test task and note counts of the sample documents."""
    assert Document.load(document_file).size() == (2, 3)
    assert Document.load(document_with_post_file).size() == (2, 1)


def test_render_reproduces_source(document_text: str, document_with_post_text: str) -> None:
    """Test that rendering adds exactly one trailing newline to the source."""
    for text in (document_text, document_with_post_text):
        assert Document.parse(text).render() == text + "\n"


def test_sections(document_with_post_text: str) -> None:
    """Test that lines land in the right sections."""
    doc = Document.parse(document_with_post_text)

    assert doc.preamble == ["Refile"]
    assert [str(task) for task in doc.tasks] == ["Water the plants", "Buy milk @store"]
    assert doc.between == ["## Someday", "Learn the cello"]
    assert [note.title for note in doc.notes] == ["Groceries"]
    assert doc.post == ["## Archive", "old stuff"]


def test_blank_lines_are_ignored() -> None:
    """Test that blank and whitespace-only lines carry no content."""
    doc = Document.parse("\n\n## Tasks\n   \nBuy milk\r\n\n\n## Notes\n")

    assert doc.preamble == []
    assert [task.description for task in doc.tasks] == ["Buy milk"]
    assert doc.notes == []


def test_empty_document_renders_skeleton() -> None:
    """Test rendering of a document with no content."""
    assert Document().render() == "\n## Tasks\n\n## Notes\n\n"
    assert Document.parse("").size() == (0, 0)


def test_transition_before_tasks() -> None:
    """Test that lines before the tasks marker are preamble."""
    line = Line(1, "# Title")
    assert transition(BeforeTasks(), line) == (BeforeTasks(), [PreambleLine(line)])
    assert transition(BeforeTasks(), Line(2, "## Tasks")) == (InTasks(), [])


def test_transition_in_tasks() -> None:
    """Test task lines and section changes inside the tasks section."""
    task = Line(3, "Buy milk")
    other = Line(4, "## Someday")

    assert transition(InTasks(), task) == (InTasks(), [TaskLine(task)])
    assert transition(InTasks(), other) == (BetweenTasksAndNotes(), [BetweenLine(other)])
    assert transition(InTasks(), Line(5, "## Notes")) == (InNotes(), [])


def test_transition_between() -> None:
    """Test that the between block runs until the notes marker."""
    line = Line(6, "- [ ] not a task")
    assert transition(BetweenTasksAndNotes(), line) == (BetweenTasksAndNotes(), [BetweenLine(line)])
    assert transition(BetweenTasksAndNotes(), Line(7, "## Notes")) == (InNotes(), [])


def test_transition_in_notes() -> None:
    """Test note block accumulation and flushing."""
    heading = Line(8, "### A")
    meta = Line(9, "> meta")
    next_heading = Line(10, "### B")
    archive = Line(11, "## Archive")

    state, effects = transition(InNotes(), heading)
    assert (state, effects) == (InNotes((heading,)), [])
    state, effects = transition(state, meta)
    assert (state, effects) == (InNotes((heading, meta)), [])
    state, effects = transition(state, next_heading)
    assert (state, effects) == (InNotes((next_heading,)), [NoteBlock((heading, meta))])
    state, effects = transition(state, archive)
    assert (state, effects) == (AfterNotes(), [NoteBlock((next_heading,)), PostLine(archive)])
    assert transition(state, Line(12, "### C")) == (AfterNotes(), [PostLine(Line(12, "### C"))])


def test_finish_flushes_pending_block() -> None:
    """Test that the last note block is emitted at end of input."""
    line = Line(1, "### A")
    assert finish(InNotes((line,))) == [NoteBlock((line,))]
    assert finish(InNotes()) == []
    assert finish(InTasks()) == []


def test_parse_fails_fast_with_line_number() -> None:
    """Test that the first malformed task aborts with its line number."""
    text = "## Tasks\nBuy milk\nBuy bread p:pes rec:+24\nx (A) @phone\n## Notes\n"

    with pytest.raises(TagError) as info:
        Document.parse(text)
    assert info.value.line == 3
    assert str(info.value).startswith("line 3:")


def test_note_error_reports_heading_line() -> None:
    """Test that a malformed note reports the line of its heading."""
    text = "## Tasks\n## Notes\n\n### Broken\n> cre:2022-03-03\n- content\n"

    with pytest.raises(FormatError) as info:
        Document.parse(text)
    assert info.value.line == 4


def test_parse_lenient_skips_bad_entries(document_text: str) -> None:
    """Test that lenient parsing keeps good entries and reports bad ones."""
    text = document_text.replace("## Tasks\n", "## Tasks\nx (A) @phone\n")

    doc, errors = Document.parse_lenient(text)

    assert doc.size() == (2, 3)
    assert len(errors) == 1
    assert isinstance(errors[0], MissingDescriptionError)
    assert errors[0].line == 5


def test_load_lenient(tmp_path: Path) -> None:
    """Test lenient loading from a file."""
    path = tmp_path / "refile.org"
    path.write_text("## Tasks\nBuy milk\nx x Task\n## Notes\n", encoding="utf-8")

    doc, errors = Document.load_lenient(path)

    assert doc.size() == (1, 0)
    assert len(errors) == 1


def test_load_missing_file(tmp_path: Path) -> None:
    """Test that a missing file is an I/O error."""
    with pytest.raises(FileNotFoundError):
        Document.load(tmp_path / "missing.org")


def test_load_rejects_invalid_utf8(tmp_path: Path) -> None:
    """Test that undecodable content is a format error."""
    path = tmp_path / "refile.org"
    path.write_bytes(b"## Tasks\n\xff\xfe broken\n")

    with pytest.raises(FormatError):
        Document.load(path)


def test_save_then_load(document_file: Path, tmp_path: Path) -> None:
    """Test that appended entries survive a save and reload."""
    doc = Document.load(document_file)
    doc.append_task(Task.parse("(B) Book flights +holiday"))
    doc.append_note(Note.create("Packing", ["- passport"]))

    target = tmp_path / "saved.org"
    doc.save(target)
    reloaded = Document.load(target)

    assert reloaded.size() == (3, 4)
    assert reloaded == doc
    assert target.read_text(encoding="utf-8") == doc.render()


def test_save_rejects_note_without_content(tmp_path: Path) -> None:
    """Test that a note that would not load back is not written."""
    doc = Document()
    doc.append_note(Note.create("Empty"))
    target = tmp_path / "refile.org"

    with pytest.raises(InvariantViolation):
        doc.save(target)
    assert not target.exists()


def test_validate_rejects_note_content_read_as_heading() -> None:
    """Test that a note line that would split the note on reload is refused."""
    doc = Document()
    doc.append_note(Note(title="Plan", content=["### step one", "details"]))

    with pytest.raises(InvariantViolation):
        doc.validate()


def test_validate_rejects_note_content_ending_notes_section() -> None:
    """Test that a note line that would start the post block is refused."""
    doc = Document()
    doc.append_note(Note(title="Plan", content=["details", "## Archive"]))

    with pytest.raises(InvariantViolation):
        doc.validate()


def test_validate_rejects_between_block_without_heading() -> None:
    """Test that between lines that would read back as tasks are refused."""
    doc = Document(between=["Learn the cello"])

    with pytest.raises(InvariantViolation):
        doc.validate()


def test_validate_accepts_loaded_documents(document_text: str, document_with_post_text: str) -> None:
    """Test that documents read from text always pass validation."""
    for text in (document_text, document_with_post_text):
        Document.parse(text).validate()
