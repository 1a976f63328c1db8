"""Result type for explicit error handling.

Every step of a release run that can fail on its own returns a Result
instead of raising, so the orchestrator can record the failure and move on
to the next bundle.

Usage:
    def load(path: Path) -> Result[str, str]:
        if not path.exists():
            return Err(f"missing: {path}")
        return Ok(path.read_text())

    match load(Path("info.json")):
        case Ok(text):
            ...
        case Err(message):
            report.errors.append(message)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def unwrap(self) -> None:
        """Raise ValueError, an Err has no value.

        Raises:
            ValueError: Always.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]

