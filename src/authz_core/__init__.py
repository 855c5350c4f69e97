"""
authz_core – role/module/action authorization core.

Import path convention::

    from authz_core.kernel.security import has_permission, Identity
    from authz_core.application.session import IdentitySession, Credentials
    from authz_core.application.query import PermissionQuery
    from authz_core.application.guards import SubtreeGuard, RouteGuard
    from authz_core.application.editor import PermissionMatrixEditor
    from authz_core.adapters.http import HttpIdentityDirectory
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
