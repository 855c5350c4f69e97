"""Application errors – sign-in and authorization outcomes."""
from __future__ import annotations

from typing import Any

from authz_core.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    default_code = "application_error"


class AuthenticationError(ApplicationError):
    """Bad credentials, or a session token the directory no longer accepts."""

    default_code = "authentication_failed"


class ForbiddenError(ApplicationError):
    """Signed in, but without the ``module:action`` the operation needs."""

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, permission=permission, **kwargs)
        self.permission = permission


class PolicyViolationError(ApplicationError):
    """A write refused by policy, such as any change to the super-admin role.

    Never retried; the message is shown to the operator unchanged.
    """

    default_code = "policy_violation"

    def __init__(self, message: str, *, role: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, role=role, **kwargs)
        self.role = role


__all__ = ["ApplicationError", "AuthenticationError", "ForbiddenError", "PolicyViolationError"]
