"""Two-armed outcome for operations whose failure is an expected state.

``IdentitySession.login`` returns one of these instead of raising so a
sign-in form can show the message directly::

    match await session.login(credentials):
        case Ok():
            ...
        case Err(error):
            show(error.message)
"""

from __future__ import annotations

import dataclasses
from typing import Callable, Generic, NoReturn, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True, repr=False)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclasses.dataclass(frozen=True, slots=True, repr=False)
class Err(Generic[E]):
    """Carries the failure; :meth:`unwrap` raises it."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[object], object]) -> Err[E]:  # noqa: ARG002
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]

__all__ = ["Err", "Ok", "Result"]
