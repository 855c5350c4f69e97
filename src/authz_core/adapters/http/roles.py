"""HTTP adapter – HttpRolePermissionRepository."""
from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from authz_core.adapters.http.client import HttpxHttpClient
from authz_core.application.editor import RolePermissionRepository
from authz_core.kernel.errors import SerializationError
from authz_core.kernel.security import ModulePermission, RoleDefinition


def _role_list(data: Any) -> list[Any]:
    if isinstance(data, Mapping):
        data = data.get("roles")
    if not isinstance(data, list):
        raise SerializationError("Expected a list of roles", payload_type="RoleDefinition")
    return data


class HttpRolePermissionRepository(RolePermissionRepository):
    """Role store backed by ``/roles`` and ``/roles/{id}/permissions``.

    The bearer token is either fixed (*token*) or read on every request from
    *token_provider*, typically ``lambda: session.token``.
    """

    def __init__(
        self,
        client: HttpxHttpClient,
        token: str | None = None,
        *,
        token_provider: Callable[[], str | None] | None = None,
    ) -> None:
        self._client = client
        self._token_provider = token_provider or (lambda: token)

    @property
    def _token(self) -> str | None:
        return self._token_provider()

    async def list_roles(self) -> list[RoleDefinition]:
        data = await self._client.get(
            "/roles", token=self._token, params={"include_permissions": "true"}
        )
        return [RoleDefinition.from_dict(item) for item in _role_list(data)]

    async def get_role_permissions(self, role_id: str) -> RoleDefinition:
        data = await self._client.get(f"/roles/{role_id}/permissions", token=self._token)
        return self._parse_role(data, role_id)

    async def put_role_permissions(
        self, role_id: str, permissions: Sequence[ModulePermission]
    ) -> RoleDefinition:
        data = await self._client.put(
            f"/roles/{role_id}/permissions",
            token=self._token,
            json={"permissions": [p.to_dict() for p in permissions]},
        )
        return self._parse_role(data, role_id)

    @staticmethod
    def _parse_role(data: Any, role_id: str) -> RoleDefinition:
        if not isinstance(data, Mapping):
            raise SerializationError("Role payload must be an object", payload_type="RoleDefinition")
        if not any(key in data for key in ("roleId", "_id", "id")):
            data = {**data, "roleId": role_id}
        return RoleDefinition.from_dict(data)


__all__ = ["HttpRolePermissionRepository"]
