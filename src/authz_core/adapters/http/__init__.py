"""HTTP adapter – httpx-backed identity directory and role repository."""
from authz_core.adapters.http.client import HttpClient, HttpxHttpClient, map_status_error
from authz_core.adapters.http.directory import HttpIdentityDirectory, parse_user
from authz_core.adapters.http.roles import HttpRolePermissionRepository

__all__ = [
    "HttpClient",
    "HttpIdentityDirectory",
    "HttpRolePermissionRepository",
    "HttpxHttpClient",
    "map_status_error",
    "parse_user",
]
