"""Test fixtures for orgflow."""

from pathlib import Path

import pytest

DOCUMENT = """# Refile
Inbox for everything.

## Tasks
(A) 2025-01-02 Call the plumber @phone +house
x 2025-01-05 2025-01-03 Renew passport p:clerk

## Notes

### Plumbing quotes
> cre:2025-01-02 mod:2025-01-04 guid:a1a2a3a4-b1b2-c1c2-d1d2-d3d4d5d6d7d8 +house
- Quote A: 300
- Quote B: 280

### Reading list
> cre:2025-01-03 mod:2025-01-03 guid:0f8fad5b-d9cb-469f-a165-70867728950e
- Designing Data-Intensive Applications

### Passport
> cre:2025-01-05 mod:2025-01-05 guid:7c9e6679-7425-40de-944b-e07fc1f90ae7 p:clerk @town
- Bring old passport
"""

# No trailing newline: rendering adds exactly one.
DOCUMENT_WITH_POST = """Refile

## Tasks
Water the plants
Buy milk @store

## Someday
Learn the cello

## Notes

### Groceries
> cre:2025-02-01 mod:2025-02-01 guid:a1a2a3a4-b1b2-c1c2-d1d2-d3d4d5d6d7d8
- milk

## Archive
old stuff"""


@pytest.fixture
def document_file(tmp_path: Path) -> Path:
    """Write the sample document with two tasks and three notes."""
    path = tmp_path / "refile.org"
    path.write_text(DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def document_with_post_file(tmp_path: Path) -> Path:
    """Write a sample document with a between block and a post block."""
    path = tmp_path / "with_post.org"
    path.write_text(DOCUMENT_WITH_POST, encoding="utf-8")
    return path


@pytest.fixture
def document_text() -> str:
    """Sample document source text."""
    return DOCUMENT


@pytest.fixture
def document_with_post_text() -> str:
    """Sample document source text with between and post blocks."""
    return DOCUMENT_WITH_POST
