"""Error types for the orgflow document model."""


class FormatError(ValueError):
    """Text does not follow the document grammar.

    Raised by every ``parse`` entry point. When raised while loading a
    document, ``line`` holds the 1-based line number of the offending text.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        """Initialize with message and optional source line number."""
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"

    def at_line(self, line: int) -> "FormatError":
        """Return a copy of this error of the same type pinned to a line."""
        return type(self)(self.message, line=line)


class EmptyInputError(FormatError):
    """Input was empty or whitespace only."""


class MissingDescriptionError(FormatError):
    """Task line has no description word."""


class PrefixError(FormatError):
    """Task prefix tokens are in an impossible sequence."""


class TagError(FormatError):
    """A token is not a valid tag."""


class NoteTooShortError(FormatError):
    """Note block lacks heading, metadata or content."""


class MetadataError(FormatError):
    """Note heading or metadata line is malformed."""


class InvariantViolation(RuntimeError):
    """A constructed value can never be parsed back from its serialized form."""


class DocumentUnavailableError(RuntimeError):
    """The document file could not be loaded, so saving would overwrite it."""
