"""Testing fixtures – pytest fixtures for the in-memory doubles."""
from authz_core.testing.fixtures.authz import identity_directory, permission_broker, role_repository

__all__ = ["identity_directory", "permission_broker", "role_repository"]
