"""Testing fixtures – directory, role store and broker doubles."""
from __future__ import annotations

import pytest

from authz_core.testing.fakes import (
    InMemoryIdentityDirectory,
    InMemoryPermissionBroker,
    InMemoryRolePermissionRepository,
)


@pytest.fixture
def permission_broker() -> InMemoryPermissionBroker:
    return InMemoryPermissionBroker()


@pytest.fixture
def role_repository(permission_broker: InMemoryPermissionBroker) -> InMemoryRolePermissionRepository:
    return InMemoryRolePermissionRepository(publisher=permission_broker)


@pytest.fixture
def identity_directory(role_repository: InMemoryRolePermissionRepository) -> InMemoryIdentityDirectory:
    return InMemoryIdentityDirectory(roles=role_repository)


__all__ = ["identity_directory", "permission_broker", "role_repository"]
