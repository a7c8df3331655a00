"""Tests for the tag index and tag suggestions."""

import pytest

from orgflow.core.note import Note
from orgflow.core.tags import TagCollection
from orgflow.core.task import Task
from orgflow.document.document import Document
from orgflow.document.tag_index import TagIndex


@pytest.fixture
def tag_index() -> TagIndex:
    """Index with a few entries in every bucket."""
    return TagIndex.from_collections(
        [
            TagCollection.parse("@work @home +project1 +website p:alice"),
            TagCollection.parse("p:bob size:large !dentist @work"),
        ]
    )


def test_project_tags_are_collected_once() -> None:
    """Test that project tags across tasks are deduplicated."""
    doc = Document()
    doc.append_task(Task.with_today("Fix login bug +webdev @work"))
    doc.append_task(Task.with_today("Update docs +website +docs"))
    doc.append_task(Task.with_today("Regular task without project tags"))
    doc.append_task(Task.with_today("Deploy +webdev"))

    index = TagIndex.from_document(doc)

    assert index.project == ["+docs", "+webdev", "+website"]
    assert index.context == ["@work"]


def test_note_tags_are_collected() -> None:
    """Test that note metadata tags are part of the index."""
    doc = Document()
    doc.append_note(Note.create("Call log", ["- called"], TagCollection.parse("p:carol @phone")))

    index = TagIndex.from_document(doc)

    assert index.person == ["p:carol"]
    assert index.context == ["@phone"]


def test_buckets_are_sorted(tag_index: TagIndex) -> None:
    """Test the content of every bucket."""
    assert tag_index.context == ["@home", "@work"]
    assert tag_index.project == ["+project1", "+website"]
    assert tag_index.person == ["p:alice", "p:bob"]
    assert tag_index.custom == ["size:large"]
    assert tag_index.oneoff == ["!dentist"]


def test_status_tags_are_not_indexed() -> None:
    """Test that tags without a suggestion category are left out."""
    index = TagIndex.from_collections([TagCollection.parse("s:todo est:30min rec:+1w")])
    assert index.all() == []


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("@w", ["@work"]),
        ("@", ["@home", "@work"]),
        ("+p", ["+project1"]),
        ("p:a", ["p:alice"]),
        ("!d", ["!dentist"]),
        ("size:", ["size:large"]),
        ("@x", []),
    ],
)
def test_suggestions_for_prefix(tag_index: TagIndex, word: str, expected: list[str]) -> None:
    """Test completion candidates for partially typed tags."""
    assert tag_index.suggestions_for_prefix(word) == expected


def test_plain_word_searches_every_bucket(tag_index: TagIndex) -> None:
    """Test that a word without a tag prefix matches across buckets."""
    assert tag_index.suggestions_for_prefix("s") == ["size:large"]
    assert tag_index.suggestions_for_prefix("") == tag_index.all()
