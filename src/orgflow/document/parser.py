"""Section-tracking state machine for the document parser.

The parser consumes non-blank lines one at a time. Each step is a pure
function ``transition(state, line) -> (state, effects)``; effects say which
document section receives the line, and are applied by the caller.

    BeforeTasks --"## Tasks"--> InTasks --"## Notes"--> InNotes --"## x"--> AfterNotes
                                   |                      ^
                                "## x"                    |
                                   v                      |
                          BetweenTasksAndNotes --"## Notes"
"""

from dataclasses import dataclass
from typing import NamedTuple

TASKS_MARKER = "## Tasks"
NOTES_MARKER = "## Notes"
SECTION_PREFIX = "## "
NOTE_PREFIX = "### "


class Line(NamedTuple):
    """A source line with its 1-based line number."""

    number: int
    text: str


# States


@dataclass(frozen=True)
class BeforeTasks:
    pass


@dataclass(frozen=True)
class InTasks:
    pass


@dataclass(frozen=True)
class BetweenTasksAndNotes:
    pass


@dataclass(frozen=True)
class InNotes:
    """Inside the notes section, accumulating the current note block."""

    block: tuple[Line, ...] = ()


@dataclass(frozen=True)
class AfterNotes:
    pass


ParserState = BeforeTasks | InTasks | BetweenTasksAndNotes | InNotes | AfterNotes


# Effects


@dataclass(frozen=True)
class PreambleLine:
    line: Line


@dataclass(frozen=True)
class TaskLine:
    line: Line


@dataclass(frozen=True)
class BetweenLine:
    line: Line


@dataclass(frozen=True)
class NoteBlock:
    lines: tuple[Line, ...]


@dataclass(frozen=True)
class PostLine:
    line: Line


Effect = PreambleLine | TaskLine | BetweenLine | NoteBlock | PostLine


def _flush(block: tuple[Line, ...]) -> list[Effect]:
    return [NoteBlock(block)] if block else []


def transition(state: ParserState, line: Line) -> tuple[ParserState, list[Effect]]:
    """Advance the parser by one non-blank line.

    Args:
        state: Current parser state
        line: Next non-blank source line

    Returns:
        (next state, effects to apply in order)
    """
    text = line.text
    if isinstance(state, BeforeTasks):
        if text == TASKS_MARKER:
            return InTasks(), []
        return state, [PreambleLine(line)]

    if isinstance(state, InTasks):
        if text == NOTES_MARKER:
            return InNotes(), []
        if text.startswith(SECTION_PREFIX):
            return BetweenTasksAndNotes(), [BetweenLine(line)]
        return state, [TaskLine(line)]

    if isinstance(state, BetweenTasksAndNotes):
        if text == NOTES_MARKER:
            return InNotes(), []
        return state, [BetweenLine(line)]

    if isinstance(state, InNotes):
        if text.startswith(NOTE_PREFIX):
            return InNotes((line,)), _flush(state.block)
        if text.startswith(SECTION_PREFIX):
            return AfterNotes(), [*_flush(state.block), PostLine(line)]
        return InNotes((*state.block, line)), []

    return state, [PostLine(line)]


def finish(state: ParserState) -> list[Effect]:
    """Return the effects still pending at end of input."""
    if isinstance(state, InNotes):
        return _flush(state.block)
    return []
