"""Calendar date value used for task and note dates."""

import re
from dataclasses import dataclass
from datetime import date

from orgflow.errors import FormatError

_DATE_RE = re.compile(r"^([0-9]{4})-([0-9]{2})-([0-9]{2})$")


@dataclass(frozen=True, order=True)
class Date:
    """A calendar day without time of day, formatted as ``YYYY-MM-DD``."""

    value: date

    @classmethod
    def now(cls) -> "Date":
        """Return today's local calendar date."""
        return cls(date.today())

    @classmethod
    def parse(cls, text: str) -> "Date":
        """Parse a zero-padded ``YYYY-MM-DD`` string.

        Raises:
            FormatError: If the text has another shape or is not a real day
        """
        match = _DATE_RE.fullmatch(text)
        if not match:
            raise FormatError(f"Only '%Y-%m-%d' format allowed: '{text}'")
        year, month, day = (int(part) for part in match.groups())
        try:
            return cls(date(year, month, day))
        except ValueError as e:
            raise FormatError(f"Not a calendar date '{text}': {e}") from e

    @classmethod
    def is_date(cls, text: str) -> bool:
        """Check whether text parses as a date."""
        try:
            cls.parse(text)
        except FormatError:
            return False
        return True

    def __str__(self) -> str:
        return f"{self.value.year:04d}-{self.value.month:02d}-{self.value.day:02d}"
