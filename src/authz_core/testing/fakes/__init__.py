"""Testing fakes – in-memory doubles for the directory, role store and channel."""
from authz_core.testing.fakes.broker import InMemoryPermissionBroker
from authz_core.testing.fakes.directory import InMemoryIdentityDirectory
from authz_core.testing.fakes.roles import InMemoryRolePermissionRepository, seed_roles

__all__ = [
    "InMemoryIdentityDirectory",
    "InMemoryPermissionBroker",
    "InMemoryRolePermissionRepository",
    "seed_roles",
]
