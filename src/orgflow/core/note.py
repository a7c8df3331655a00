"""Note block grammar.

A note is a block of lines::

    ### Title of the note
    > cre:2025-01-03 mod:2025-01-04 guid:a1a2a3a4-b1b2-c1c2-d1d2-d3d4d5d6d7d8 @work
    - free form content
    - more content
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from orgflow.core.dates import Date
from orgflow.core.guid import Guid
from orgflow.core.tags import TagCollection, split_tags
from orgflow.errors import InvariantViolation, MetadataError, NoteTooShortError

METADATA_MARKER = "> "
# Lines starting like this end a note block when a document is read.
RESERVED_PREFIXES = ("## ", "### ")
DEFAULT_LEVEL = 3
UNTITLED = "Untitled Note"


def _field(token: str, key: str) -> str:
    """Strip ``key:`` from a metadata token."""
    label = f"{key}:"
    if not token.startswith(label):
        raise MetadataError(f"Expected '{label}' field, found '{token}'")
    return token[len(label) :]


def parse_heading(line: str) -> tuple[int, str]:
    """Split a heading line into (level, title)."""
    marker, sep, title = line.partition(" ")
    if not sep:
        raise MetadataError(f"Title of only a word is not allowed: '{line}'")
    if not marker or marker != "#" * len(marker):
        raise MetadataError("Title must start with '#' defining the levels in document")
    return len(marker), title.strip()


@dataclass
class Note:
    """A titled block of content lines with dates, id and tags."""

    title: str
    content: list[str] = field(default_factory=list)
    level: int = DEFAULT_LEVEL
    creation_date: Date = field(default_factory=Date.now)
    modification_date: Date = field(default_factory=Date.now)
    guid: Guid = field(default_factory=Guid.new)
    tags: TagCollection = field(default_factory=TagCollection)

    @classmethod
    def create(
        cls,
        title: str,
        content: Iterable[str] = (),
        tags: TagCollection | None = None,
    ) -> "Note":
        """Build a new note dated today with a fresh guid.

        Unlike parsed notes, a created note may have no content lines.

        Raises:
            InvariantViolation: If a content line is blank or reads as a
                section or note heading inside a document
        """
        lines = list(content)
        for line in lines:
            if not line.strip() or "\n" in line or line.startswith(RESERVED_PREFIXES):
                raise InvariantViolation(f"Note content line would not load back: '{line}'")
        return cls(title=title, content=lines, tags=tags or TagCollection())

    @classmethod
    def from_draft(cls, title: str, content: Iterable[str]) -> "Note":
        """Build a note from free text, moving tag-shaped words into the tags.

        Tags are collected from the title first, then from each content line.
        Lines left empty after removing tags are dropped; an empty title
        becomes ``Untitled Note``.
        """
        clean_title, tags = split_tags(title)
        lines: list[str] = []
        for line in content:
            clean_line, line_tags = split_tags(line)
            tags.extend(line_tags)
            if clean_line:
                lines.append(clean_line)
        return cls.create(clean_title or UNTITLED, lines, TagCollection(tags))

    @classmethod
    def parse(cls, lines: Sequence[str]) -> "Note":
        """Parse a note block.

        Args:
            lines: Heading line, metadata line and at least one content line

        Returns:
            Parsed note

        Raises:
            NoteTooShortError: If fewer than three lines are given
            MetadataError: If heading or metadata line is malformed
            FormatError: If a date, guid or tag is malformed
        """
        if len(lines) < 3:
            raise NoteTooShortError(
                f"There should be at least a title, some metadata and content: {list(lines)}"
            )
        level, title = parse_heading(lines[0])

        metadata = lines[1]
        if not metadata.startswith(METADATA_MARKER):
            raise MetadataError(f"Wrong metadata start: '{metadata}'")
        fields = metadata[len(METADATA_MARKER) :].split(maxsplit=3)
        if len(fields) < 3:
            raise MetadataError(f"Metadata needs cre, mod and guid fields: '{metadata}'")
        creation_date = Date.parse(_field(fields[0], "cre"))
        modification_date = Date.parse(_field(fields[1], "mod"))
        guid = Guid.parse(_field(fields[2], "guid"))
        tags = TagCollection.parse(fields[3]) if len(fields) == 4 else TagCollection()

        return cls(
            title=title,
            content=list(lines[2:]),
            level=level,
            creation_date=creation_date,
            modification_date=modification_date,
            guid=guid,
            tags=tags,
        )

    def heading(self) -> str:
        return f"{'#' * self.level} {self.title.strip()}"

    def metadata(self) -> str:
        line = (
            f"{METADATA_MARKER}cre:{self.creation_date} "
            f"mod:{self.modification_date} guid:{self.guid}"
        )
        if self.tags:
            line = f"{line} {self.tags}"
        return line

    def to_lines(self) -> list[str]:
        """Serialize to heading, metadata and content lines."""
        return [self.heading(), self.metadata(), *self.content]

    def __str__(self) -> str:
        return "\n".join(self.to_lines())
