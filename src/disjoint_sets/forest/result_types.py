"""Result types returned by forest operations."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Replacement(Generic[T]):
    """Outcome of replacing the value of a class.

    Attributes:
        replaced: True if the id or key resolved and the value was swapped.
        value: The displaced value when replaced, otherwise the rejected new
            value handed back to the caller untouched.
    """

    replaced: bool
    value: T

    def __bool__(self) -> bool:
        return self.replaced
