"""Typed tags and tag collections.

A tag is a single whitespace-free token attached to a task or note. The
variant is chosen by the token prefix, tried in a fixed order where the first
matching prefix wins:

    s:      Status            s:todo, s:wait(customer)
    est:    Estimate          est:30min
    rec:+   StrictRecurrence  rec:+2w
    rec:    LooseRecurrence   rec:1y
    t:      Threshold         t:2025-01-31
    n:      NoteRef           n:<guid>
    p:      Person            p:alice
    !       OneOff            !dentist
    @       Context           @phone
    +       Project           +website
    k:v     Custom            any other token containing ':'

A matched prefix with a malformed payload is an error; parsing never falls
through to a later variant.
"""

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar

from orgflow.core.dates import Date
from orgflow.core.guid import Guid
from orgflow.errors import EmptyInputError, FormatError, TagError

_COUNT_RE = re.compile(r"[0-9]+")

CONTEXT = "context"
PROJECT = "project"
PERSON = "person"
CUSTOM = "custom"
ONEOFF = "oneoff"
CATEGORIES = (CONTEXT, PROJECT, PERSON, CUSTOM, ONEOFF)


def _parse_count(text: str, unit: str) -> int:
    """Parse ``<digits><unit>`` into the integer count."""
    if not text.endswith(unit):
        raise FormatError(f"Expected unit '{unit}', found '{text}'")
    number = text[: len(text) - len(unit)]
    if not _COUNT_RE.fullmatch(number):
        raise FormatError(f"Parsing number error: '{number}'")
    return int(number)


@dataclass(frozen=True)
class TaskState:
    """Workflow state of a task; hold, wait and cancelled carry a comment."""

    PLAIN: ClassVar[tuple[str, ...]] = ("todo", "next", "done")
    COMMENTED: ClassVar[tuple[str, ...]] = ("hold", "wait", "cancelled")

    kind: str
    comment: str | None = None

    @classmethod
    def parse(cls, text: str) -> "TaskState":
        for kind in cls.COMMENTED:
            opener = f"{kind}("
            if text.startswith(opener) and text.endswith(")"):
                return cls(kind, text[len(opener) : -1])
        if text in cls.PLAIN:
            return cls(text)
        raise FormatError(f"Can not understand state '{text}'")

    def __str__(self) -> str:
        if self.comment is None:
            return self.kind
        return f"{self.kind}({self.comment})"


@dataclass(frozen=True)
class TaskEstimate:
    """Estimated effort in whole minutes."""

    minutes: int

    @classmethod
    def parse(cls, text: str) -> "TaskEstimate":
        return cls(_parse_count(text, "min"))

    def __str__(self) -> str:
        return f"{self.minutes}min"


@dataclass(frozen=True)
class TaskRecurrence:
    """Recurrence interval with the unit it was written in.

    Years are stored as 52-week blocks, so only whole multiples of 52 weeks
    format back to the year count they were parsed from.
    """

    period: timedelta
    unit: str

    @classmethod
    def with_days(cls, days: int) -> "TaskRecurrence":
        return cls(timedelta(days=days), "d")

    @classmethod
    def with_weeks(cls, weeks: int) -> "TaskRecurrence":
        return cls(timedelta(weeks=weeks), "w")

    @classmethod
    def with_years(cls, years: int) -> "TaskRecurrence":
        return cls(timedelta(weeks=years * 52), "y")

    @classmethod
    def parse(cls, text: str) -> "TaskRecurrence":
        builders = {"d": cls.with_days, "w": cls.with_weeks, "y": cls.with_years}
        build = builders.get(text[-1:])
        if build is None:
            raise FormatError(
                "Only [y]ears, [w]eeks and [d]ays are allowed for recurring tasks"
            )
        count = _parse_count(text, text[-1])
        try:
            return build(count)
        except OverflowError as e:
            raise FormatError(f"Recurrence '{text}' is out of range") from e

    def __str__(self) -> str:
        weeks = self.period.days // 7
        if self.unit == "y":
            return f"{weeks // 52}y"
        if self.unit == "w":
            return f"{weeks}w"
        return f"{self.period.days}d"


@dataclass(frozen=True)
class Tag:
    """Base of all tag variants."""

    prefix: ClassVar[str] = ""
    category: ClassVar[str | None] = None

    @staticmethod
    def parse(text: str) -> "Tag":
        """Parse a single token into its tag variant."""
        return parse_tag(text)

    def payload(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return f"{self.prefix}{self.payload()}"


@dataclass(frozen=True)
class Status(Tag):
    prefix: ClassVar[str] = "s:"

    state: TaskState

    def payload(self) -> str:
        return str(self.state)


@dataclass(frozen=True)
class Estimate(Tag):
    prefix: ClassVar[str] = "est:"

    estimate: TaskEstimate

    def payload(self) -> str:
        return str(self.estimate)


@dataclass(frozen=True)
class StrictRecurrence(Tag):
    """Recurs relative to the due date (``rec:+``)."""

    prefix: ClassVar[str] = "rec:+"

    recurrence: TaskRecurrence

    def payload(self) -> str:
        return str(self.recurrence)


@dataclass(frozen=True)
class LooseRecurrence(Tag):
    """Recurs relative to the completion date (``rec:``)."""

    prefix: ClassVar[str] = "rec:"

    recurrence: TaskRecurrence

    def payload(self) -> str:
        return str(self.recurrence)


@dataclass(frozen=True)
class Threshold(Tag):
    prefix: ClassVar[str] = "t:"

    date: Date

    def payload(self) -> str:
        return str(self.date)


@dataclass(frozen=True)
class NoteRef(Tag):
    """Reference to a note by its guid."""

    prefix: ClassVar[str] = "n:"

    guid: Guid

    def payload(self) -> str:
        return str(self.guid)


@dataclass(frozen=True)
class Person(Tag):
    prefix: ClassVar[str] = "p:"
    category: ClassVar[str | None] = PERSON

    name: str

    def payload(self) -> str:
        return self.name


@dataclass(frozen=True)
class OneOff(Tag):
    prefix: ClassVar[str] = "!"
    category: ClassVar[str | None] = ONEOFF

    name: str

    def payload(self) -> str:
        return self.name


@dataclass(frozen=True)
class Context(Tag):
    prefix: ClassVar[str] = "@"
    category: ClassVar[str | None] = CONTEXT

    name: str

    def payload(self) -> str:
        return self.name


@dataclass(frozen=True)
class Project(Tag):
    prefix: ClassVar[str] = "+"
    category: ClassVar[str | None] = PROJECT

    name: str

    def payload(self) -> str:
        return self.name


@dataclass(frozen=True)
class Custom(Tag):
    """Free ``key:value`` pair; both parts are lower-cased when parsed."""

    category: ClassVar[str | None] = CUSTOM

    key: str
    value: str

    def payload(self) -> str:
        return f"{self.key}:{self.value}"


# Order matters: "rec:+" must be tried before "rec:".
_DISPATCH: tuple[tuple[str, Callable[[str], Tag]], ...] = (
    (Status.prefix, lambda rest: Status(TaskState.parse(rest))),
    (Estimate.prefix, lambda rest: Estimate(TaskEstimate.parse(rest))),
    (StrictRecurrence.prefix, lambda rest: StrictRecurrence(TaskRecurrence.parse(rest))),
    (LooseRecurrence.prefix, lambda rest: LooseRecurrence(TaskRecurrence.parse(rest))),
    (Threshold.prefix, lambda rest: Threshold(Date.parse(rest))),
    (NoteRef.prefix, lambda rest: NoteRef(Guid.parse(rest))),
    (Person.prefix, Person),
    (OneOff.prefix, OneOff),
    (Context.prefix, Context),
    (Project.prefix, Project),
)


def parse_tag(text: str) -> Tag:
    """Parse one token into a tag.

    Args:
        text: A single token, e.g. ``@phone`` or ``est:30min``

    Returns:
        The tag variant selected by the token prefix

    Raises:
        TagError: If no prefix matches or the payload is malformed
    """
    for prefix, build in _DISPATCH:
        if text.startswith(prefix):
            try:
                return build(text[len(prefix) :])
            except FormatError as e:
                raise TagError(f"Invalid '{prefix}' tag '{text}': {e.message}") from e
    if ":" in text and len(text) > 1:
        key, value = text.split(":", 1)
        return Custom(key.lower(), value.lower())
    raise TagError(f"No tag found in '{text}'")


def is_tag(text: str) -> bool:
    """Check whether a token parses as a tag."""
    try:
        parse_tag(text)
    except TagError:
        return False
    return True


@dataclass(frozen=True, init=False)
class TagCollection:
    """Ordered tags of one task or note.

    An empty collection is a valid value, but parsing an empty string is an
    error: a tag section that is present must contain at least one tag.
    """

    tags: tuple[Tag, ...]

    def __init__(self, tags: Iterable[Tag] = ()) -> None:
        object.__setattr__(self, "tags", tuple(tags))

    @classmethod
    def of(cls, *tags: Tag) -> "TagCollection":
        return cls(tags)

    @classmethod
    def parse(cls, text: str) -> "TagCollection":
        """Parse whitespace-separated tags; any bad token fails the whole string."""
        if not text.strip():
            raise EmptyInputError("Tag section is empty")
        return cls(parse_tag(token) for token in text.split())

    def __iter__(self) -> Iterator[Tag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)

    def __str__(self) -> str:
        return " ".join(str(tag) for tag in self.tags)

    def in_category(self, category: str) -> list[str]:
        """Return formatted tags of one suggestion category, in order."""
        return [str(tag) for tag in self.tags if tag.category == category]

    def project_tags(self) -> list[str]:
        """Return project tags as written, e.g. ``+website``."""
        return self.in_category(PROJECT)


def split_tags(text: str) -> tuple[str, list[Tag]]:
    """Separate tag-shaped words from free text.

    Used for quick note entry, where tags may be typed anywhere in the title
    or content.

    Returns:
        (remaining words joined by single spaces, tags in order of appearance)
    """
    words: list[str] = []
    tags: list[Tag] = []
    for word in text.split():
        try:
            tags.append(parse_tag(word))
        except TagError:
            words.append(word)
    return " ".join(words), tags
