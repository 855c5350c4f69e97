"""Application query – read-only permission facade."""
from authz_core.application.query.facade import PermissionQuery
from authz_core.application.query.view import PermissionView

__all__ = ["PermissionQuery", "PermissionView"]
