"""Testing support – in-memory fakes and pytest fixtures.

Import the fixtures in your ``conftest.py``::

    pytest_plugins = ["authz_core.testing.fixtures.authz"]
"""

from authz_core.testing.fakes import (
    InMemoryIdentityDirectory,
    InMemoryPermissionBroker,
    InMemoryRolePermissionRepository,
    seed_roles,
)

__all__ = [
    "InMemoryIdentityDirectory",
    "InMemoryPermissionBroker",
    "InMemoryRolePermissionRepository",
    "seed_roles",
]
