"""Task priority literal."""

from enum import Enum

from orgflow.errors import FormatError


class Priority(Enum):
    """Task priority, written as ``(A)``, ``(B)`` or ``(C)``."""

    A = "(A)"
    B = "(B)"
    C = "(C)"

    @classmethod
    def parse(cls, text: str) -> "Priority":
        """Parse one of the three priority literals."""
        for priority in cls:
            if priority.value == text:
                return priority
        raise FormatError(f"Could not understand priority '{text}'")

    @classmethod
    def is_priority(cls, text: str) -> bool:
        return any(priority.value == text for priority in cls)

    def __str__(self) -> str:
        return self.value
