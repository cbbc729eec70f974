"""Result types for error handling without exceptions.

Service operations return ``Ok(value)`` or ``Err(error)``; the API layer
turns the latter into an error envelope instead of catching exceptions.
"""

from enum import Enum
from typing import Generic, NoReturn, TypeVar, Union

from attrs import field, frozen
from beartype import beartype

T = TypeVar("T")
E = TypeVar("E")


@frozen
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    @beartype
    def is_ok(self) -> bool:
        return True

    @beartype
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    @beartype
    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Expected an error, got Ok({self.value!r})")


@frozen
class Err(Generic[E]):
    """Failed outcome carrying ``error``."""

    error: E

    @beartype
    def is_ok(self) -> bool:
        return False

    @beartype
    def is_err(self) -> bool:
        return True

    @beartype
    def unwrap(self) -> NoReturn:
        raise ValueError(f"Expected a value, got Err({self.error!r})")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]


class ErrorKind(str, Enum):
    """Categories of service failures, each mapped to one HTTP status."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    STORE = "STORE"


@frozen
class PolicyError:
    """Failure reported by the policy service.

    ``message`` is the caller-facing summary ("Error updating policy"),
    ``detail`` the underlying cause surfaced in the ``error`` member of the
    response envelope.
    """

    kind: ErrorKind = field()
    message: str = field()
    detail: str | None = field(default=None)

    @classmethod
    def validation(cls, message: str, detail: str | None = None) -> "PolicyError":
        return cls(ErrorKind.VALIDATION, message, detail)

    @classmethod
    def not_found(cls, message: str = "Policy not found") -> "PolicyError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def store(cls, message: str, detail: str) -> "PolicyError":
        return cls(ErrorKind.STORE, message, detail)
