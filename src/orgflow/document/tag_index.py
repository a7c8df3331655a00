"""Deduplicated tag index used for tag suggestions."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orgflow.core.tags import CONTEXT, CUSTOM, ONEOFF, PERSON, PROJECT, TagCollection

if TYPE_CHECKING:
    from orgflow.document.document import Document


@dataclass
class TagIndex:
    """Sorted, deduplicated tags of a document, bucketed by kind.

    Entries keep their prefix (``@work``, ``+website``, ``p:alice``,
    ``key:value``, ``!dentist``). The index is a snapshot; rebuild it after
    the document changes.
    """

    context: list[str] = field(default_factory=list)
    project: list[str] = field(default_factory=list)
    person: list[str] = field(default_factory=list)
    custom: list[str] = field(default_factory=list)
    oneoff: list[str] = field(default_factory=list)

    @classmethod
    def from_collections(cls, collections: Iterable[TagCollection]) -> "TagIndex":
        buckets: dict[str, set[str]] = {
            CONTEXT: set(),
            PROJECT: set(),
            PERSON: set(),
            CUSTOM: set(),
            ONEOFF: set(),
        }
        for collection in collections:
            for tag in collection:
                if tag.category is not None:
                    buckets[tag.category].add(str(tag))
        return cls(
            context=sorted(buckets[CONTEXT]),
            project=sorted(buckets[PROJECT]),
            person=sorted(buckets[PERSON]),
            custom=sorted(buckets[CUSTOM]),
            oneoff=sorted(buckets[ONEOFF]),
        )

    @classmethod
    def from_document(cls, document: "Document") -> "TagIndex":
        """Collect tags from every task and note of a document."""
        collections = [task.tags for task in document.tasks if task.tags is not None]
        collections.extend(note.tags for note in document.notes)
        return cls.from_collections(collections)

    def all(self) -> list[str]:
        """All entries, bucket after bucket."""
        return [*self.context, *self.project, *self.person, *self.custom, *self.oneoff]

    def bucket_for(self, word: str) -> list[str]:
        """Pick the bucket a partially typed tag belongs to."""
        if word.startswith("@"):
            return self.context
        if word.startswith("+"):
            return self.project
        if word.startswith("p") and ":" in word:
            return self.person
        if word.startswith("!"):
            return self.oneoff
        if ":" in word:
            return self.custom
        return self.all()

    def suggestions_for_prefix(self, word: str) -> list[str]:
        """Return entries that complete a partially typed tag."""
        return [entry for entry in self.bucket_for(word) if entry.startswith(word)]
