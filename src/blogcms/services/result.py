"""Result types for operations that degrade instead of failing."""

from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """The call succeeded."""

    value: T
    degraded: ClassVar[bool] = False


@dataclass(frozen=True)
class Degraded(Generic[T]):
    """The call failed; ``value`` is the fallback and ``cause`` was logged."""

    value: T
    cause: str
    degraded: ClassVar[bool] = True


Outcome = Union[Ok[T], Degraded[T]]
