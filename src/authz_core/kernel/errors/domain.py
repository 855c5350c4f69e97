"""Domain errors – requests the permission model refuses."""
from __future__ import annotations

from typing import Any

from authz_core.kernel.errors.base import BaseError


class DomainError(BaseError):
    default_code = "domain_error"


class ValidationError(DomainError):
    """Rejected input.

    ``errors`` lists the offending cells or fields, one mapping each, e.g.
    ``{"module": "clients", "action": "fly"}``.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        self.errors: list[dict[str, Any]] = list(errors or [])
        super().__init__(message, errors=self.errors or None, **kwargs)


class NotFoundError(DomainError):
    """A role (or other resource) the caller named does not exist."""

    default_code = "not_found"

    def __init__(self, resource: str, identifier: Any = None, **kwargs: Any) -> None:
        if identifier is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message, resource=resource, identifier=identifier, **kwargs)
        self.resource = resource
        self.identifier = identifier


class ConflictError(DomainError):
    """The call does not fit the object's current state.

    *state* names that state, e.g. ``"saving"`` for an editor mid-save.
    """

    default_code = "conflict"

    def __init__(self, message: str, *, state: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, state=state, **kwargs)
        self.state = state


__all__ = ["ConflictError", "DomainError", "NotFoundError", "ValidationError"]
