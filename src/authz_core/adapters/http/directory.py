"""HTTP adapter – HttpIdentityDirectory."""
from __future__ import annotations

from typing import Any, Mapping

from authz_core.adapters.http.client import HttpxHttpClient
from authz_core.application.session import Credentials, IdentityDirectory, UserRecord
from authz_core.kernel.errors import AuthenticationError, SerializationError
from authz_core.kernel.security import parse_permissions


def parse_user(data: Any) -> UserRecord:
    """Build a :class:`UserRecord` from the ``/auth/me`` payload.

    ``role`` is either a role name or a populated ``{name, permissions}``
    object; a top-level ``permissions`` list wins over the role's. Any flat
    permission list the server sends is ignored and recomputed locally.
    """
    if not isinstance(data, Mapping):
        raise SerializationError("User payload must be an object", payload_type="UserRecord")
    user = data.get("user") if isinstance(data.get("user"), Mapping) else data
    user_id = user.get("_id") or user.get("id") or user.get("userId")
    role = user.get("role")
    permissions = user.get("permissions")
    if isinstance(role, Mapping):
        if permissions is None:
            permissions = role.get("permissions")
        role = role.get("name")
    if not user_id or not isinstance(role, str) or not role:
        raise SerializationError(f"Incomplete user payload: {sorted(user)}", payload_type="UserRecord")
    branch = user.get("branch")
    return UserRecord(
        user_id=str(user_id),
        role=role,
        branch=str(branch) if branch else None,
        permissions=parse_permissions(permissions),
    )


class HttpIdentityDirectory(IdentityDirectory):
    """Identity directory backed by ``/auth/login``, ``/auth/me`` and ``/auth/logout``."""

    def __init__(self, client: HttpxHttpClient) -> None:
        self._client = client

    async def authenticate(self, credentials: Credentials) -> str:
        data = await self._client.post(
            "/auth/login",
            json={"email": credentials.email, "password": credentials.password},
        )
        token = data.get("token") if isinstance(data, Mapping) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Sign-in response did not include a session token")
        return token

    async def fetch_current_user(self, token: str) -> UserRecord:
        return parse_user(await self._client.get("/auth/me", token=token))

    async def sign_out(self, token: str) -> None:
        await self._client.post("/auth/logout", token=token)


__all__ = ["HttpIdentityDirectory", "parse_user"]
