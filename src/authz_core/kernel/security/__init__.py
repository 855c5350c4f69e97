"""Kernel security – vocabulary, permission model and predicates."""
from authz_core.kernel.security.vocabulary import (
    BRANCH_ALL,
    DEFAULT_ROLE_PERMISSIONS,
    DEFAULT_VOCABULARY,
    SUPER_ADMIN_ROLE,
    Actions,
    Modules,
    Roles,
    Vocabulary,
)
from authz_core.kernel.security.permissions import (
    Identity,
    ModulePermission,
    RoleDefinition,
    canonicalize,
    count_permissions,
    flatten,
    parse_permission_token,
    parse_permissions,
    permission_token,
)
from authz_core.kernel.security.rbac import (
    AccessDecision,
    evaluate_access,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_same_branch,
    is_super_admin,
)

__all__ = [
    "AccessDecision",
    "Actions",
    "BRANCH_ALL",
    "DEFAULT_ROLE_PERMISSIONS",
    "DEFAULT_VOCABULARY",
    "Identity",
    "ModulePermission",
    "Modules",
    "RoleDefinition",
    "Roles",
    "SUPER_ADMIN_ROLE",
    "Vocabulary",
    "canonicalize",
    "count_permissions",
    "evaluate_access",
    "flatten",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "is_same_branch",
    "is_super_admin",
    "parse_permission_token",
    "parse_permissions",
    "permission_token",
]
