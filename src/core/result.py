"""Result types for railway-oriented programming.

Every fallible operation in the control plane (login, session validation,
audit append, migration) returns a ``Result`` instead of raising. Callers
branch with structural pattern matching:

    result = await handler.handle(command)
    match result:
        case Success(value=session):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful outcome.

    Attributes:
        value: Payload produced by the operation.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed outcome.

    Attributes:
        error: Error describing why the operation failed.
    """

    error: E


Result: TypeAlias = Success[T] | Failure[E]
