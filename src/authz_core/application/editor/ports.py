"""Application editor – RolePermissionRepository port."""
from __future__ import annotations

import abc
from typing import Sequence

from authz_core.kernel.security import ModulePermission, RoleDefinition


class RolePermissionRepository(abc.ABC):
    """Port: read and atomically replace a role's permission list.

    ``put_role_permissions`` returns the list as the server stored it.
    Writes to the super-admin role raise
    :class:`~authz_core.kernel.errors.PolicyViolationError`; rejected
    payloads raise :class:`~authz_core.kernel.errors.ValidationError`.
    """

    @abc.abstractmethod
    async def list_roles(self) -> list[RoleDefinition]: ...

    @abc.abstractmethod
    async def get_role_permissions(self, role_id: str) -> RoleDefinition: ...

    @abc.abstractmethod
    async def put_role_permissions(
        self, role_id: str, permissions: Sequence[ModulePermission]
    ) -> RoleDefinition: ...


__all__ = ["RolePermissionRepository"]
