"""Unique identifiers for notes."""

import re
import uuid
from dataclasses import dataclass

from orgflow.errors import FormatError

# Canonical hyphenated form only; uuid.UUID alone would also accept braces,
# URNs and bare hex.
_GUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


@dataclass(frozen=True)
class Guid:
    """A 128-bit identifier in canonical 36-character form."""

    value: uuid.UUID

    @classmethod
    def new(cls) -> "Guid":
        """Generate a fresh random identifier."""
        return cls(uuid.uuid4())

    @classmethod
    def parse(cls, text: str) -> "Guid":
        """Parse the canonical hyphenated form.

        Raises:
            FormatError: If text is not a canonical UUID
        """
        if not _GUID_RE.fullmatch(text):
            raise FormatError(f"Can not parse uuid: '{text}'")
        return cls(uuid.UUID(text))

    def __str__(self) -> str:
        return str(self.value)
