"""Task line grammar.

A task line reads ``[prefix] description [suffix]``::

    x (A) 2025-11-12 2025-11-01 Call the plumber @phone +house

The prefix holds the completion marker ``x``, a priority and up to two dates
(completion date first, then creation date). The suffix starts at the first
word after the description that parses as a tag; from there on every word is
part of the tag collection.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from orgflow.core.dates import Date
from orgflow.core.priority import Priority
from orgflow.core.tags import TagCollection, is_tag
from orgflow.errors import EmptyInputError, MissingDescriptionError, PrefixError

DONE_MARKER = "x"


@dataclass
class TaskTokens:
    """Words of a task line split into prefix, description and suffix."""

    prefix: list[str] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    suffix: list[str] = field(default_factory=list)


def is_prefix_token(word: str) -> bool:
    """Check whether a word can only be read as a prefix token."""
    return word == DONE_MARKER or Priority.is_priority(word) or Date.is_date(word)


def scan_prefix(words: Sequence[str]) -> tuple[list[str], int]:
    """Collect leading prefix tokens.

    Returns:
        (prefix tokens, index of the first word that is not a prefix token)
    """
    index = 0
    while index < len(words) and is_prefix_token(words[index]):
        index += 1
    return list(words[:index]), index


def scan_description(words: Sequence[str], start: int) -> tuple[list[str], int]:
    """Collect description words up to the first tag-shaped word.

    Returns:
        (description words, index where the suffix starts)
    """
    index = start
    while index < len(words) and not is_tag(words[index]):
        index += 1
    return list(words[start:index]), index


def tokenize(text: str) -> TaskTokens:
    """Split a task line into its three parts.

    The suffix is taken as-is from the first tag-shaped word to the end of the
    line; its words are validated later when parsed as a tag collection.
    """
    words = text.split()
    prefix, index = scan_prefix(words)
    description, index = scan_description(words, index)
    return TaskTokens(prefix=prefix, description=description, suffix=words[index:])


@dataclass
class Prefix:
    """Values resolved from the prefix tokens of a task line."""

    completed: bool = False
    priority: Priority | None = None
    completion_date: Date | None = None
    creation_date: Date | None = None


def process_prefix(tokens: Sequence[str]) -> Prefix:
    """Resolve prefix tokens in order.

    A single date is the creation date. When a second date follows, the first
    one is reinterpreted as the completion date and the second becomes the
    creation date. A later priority replaces an earlier one.

    Raises:
        PrefixError: On a second ``x`` or a third date
    """
    result = Prefix()
    for token in tokens:
        if token == DONE_MARKER and not result.completed:
            result.completed = True
        elif Priority.is_priority(token):
            result.priority = Priority.parse(token)
        elif Date.is_date(token) and result.completion_date is None:
            if result.creation_date is not None:
                result.completion_date = result.creation_date
            result.creation_date = Date.parse(token)
        else:
            raise PrefixError(f"Error parsing prefix '{token}'")
    return result


@dataclass
class Task:
    """A single to-do line."""

    description: str
    completed: bool = False
    priority: Priority | None = None
    completion_date: Date | None = None
    creation_date: Date | None = None
    tags: TagCollection | None = None

    @classmethod
    def parse(cls, text: str) -> "Task":
        """Parse one task line.

        Args:
            text: The line without trailing newline

        Returns:
            Parsed task

        Raises:
            EmptyInputError: If the line is blank
            MissingDescriptionError: If no description word is present
            PrefixError: If the prefix tokens are inconsistent
            TagError: If a word of the suffix is not a tag
        """
        if not text.strip():
            raise EmptyInputError("Task line is empty")
        tokens = tokenize(text)
        if not tokens.description:
            raise MissingDescriptionError(f"There must be a task description: '{text}'")
        prefix = process_prefix(tokens.prefix)
        tags = TagCollection.parse(" ".join(tokens.suffix)) if tokens.suffix else None
        return cls(
            description=" ".join(tokens.description),
            completed=prefix.completed,
            priority=prefix.priority,
            completion_date=prefix.completion_date,
            creation_date=prefix.creation_date,
            tags=tags,
        )

    @classmethod
    def with_task(cls, description: str) -> "Task":
        """Create an open, undated task with a plain description."""
        if not description.strip():
            raise MissingDescriptionError("There must be a task description")
        return cls(description=description.strip())

    @classmethod
    def with_today(cls, text: str) -> "Task":
        """Parse quick-entry text and stamp it as created today."""
        task = cls.parse(text)
        task.creation_date = Date.now()
        return task

    def toggle_completion(self) -> None:
        """Flip the completion marker.

        Completing a dated task records today as completion date; reopening
        clears it. Undated tasks get no completion date, since a lone date
        would be read back as creation date.
        """
        self.completed = not self.completed
        if self.completed and self.creation_date is not None:
            self.completion_date = Date.now()
        else:
            self.completion_date = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.completed:
            parts.append(DONE_MARKER)
        if self.priority is not None:
            parts.append(str(self.priority))
        if self.completion_date is not None:
            parts.append(str(self.completion_date))
        if self.creation_date is not None:
            parts.append(str(self.creation_date))
        parts.append(self.description)
        if self.tags:
            parts.append(str(self.tags))
        return " ".join(parts)
