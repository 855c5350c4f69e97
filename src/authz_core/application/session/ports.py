"""Application session – Credentials, UserRecord and the directory/token ports."""
from __future__ import annotations

import abc
import dataclasses

from authz_core.kernel.security import Identity, ModulePermission

MISSING_CREDENTIALS_MESSAGE = "Email and password are required"


@dataclasses.dataclass(frozen=True)
class Credentials:
    email: str
    password: str = dataclasses.field(repr=False)

    @property
    def is_complete(self) -> bool:
        return bool(self.email and self.email.strip()) and bool(self.password)


@dataclasses.dataclass(frozen=True)
class UserRecord:
    """The current user as returned by the identity directory."""

    user_id: str
    role: str
    branch: str | None = None
    permissions: tuple[ModulePermission, ...] = ()

    def to_identity(self) -> Identity:
        return Identity.from_permissions(self.user_id, self.role, self.branch, self.permissions)


class IdentityDirectory(abc.ABC):
    """Port: the authentication service.

    Implementations raise :class:`~authz_core.kernel.errors.AuthenticationError`
    for rejected credentials or tokens and
    :class:`~authz_core.kernel.errors.DirectoryUnavailableError` when the
    service cannot be reached.
    """

    @abc.abstractmethod
    async def authenticate(self, credentials: Credentials) -> str:
        """Exchange *credentials* for a session token."""

    @abc.abstractmethod
    async def fetch_current_user(self, token: str) -> UserRecord: ...

    async def sign_out(self, token: str) -> None:  # noqa: B027
        """Invalidate *token* server-side. Optional; default is a no-op."""


class TokenStore(abc.ABC):
    """Port: the session's durable token slot."""

    @abc.abstractmethod
    def get(self) -> str | None: ...

    @abc.abstractmethod
    def set(self, token: str) -> None: ...

    @abc.abstractmethod
    def clear(self) -> None: ...


class InMemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


__all__ = [
    "Credentials",
    "IdentityDirectory",
    "InMemoryTokenStore",
    "MISSING_CREDENTIALS_MESSAGE",
    "TokenStore",
    "UserRecord",
]
