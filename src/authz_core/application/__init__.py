"""Application – session, invalidation channel, query facade, guards and editor."""

from authz_core.application.channel import ChannelState, InvalidationChannel, SubscriptionHandle
from authz_core.application.editor import (
    EditorState,
    PermissionMatrix,
    PermissionMatrixEditor,
    RolePermissionRepository,
)
from authz_core.application.guards import (
    NO_FALLBACK,
    Element,
    FieldGuard,
    RouteGuard,
    RowGuard,
    SubtreeGuard,
)
from authz_core.application.query import PermissionQuery, PermissionView
from authz_core.application.session import (
    Credentials,
    IdentityDirectory,
    IdentitySession,
    InMemoryTokenStore,
    SessionState,
    TokenStore,
    UserRecord,
)

__all__ = [
    "ChannelState",
    "Credentials",
    "EditorState",
    "Element",
    "FieldGuard",
    "IdentityDirectory",
    "IdentitySession",
    "InMemoryTokenStore",
    "InvalidationChannel",
    "NO_FALLBACK",
    "PermissionMatrix",
    "PermissionMatrixEditor",
    "PermissionQuery",
    "PermissionView",
    "RolePermissionRepository",
    "RouteGuard",
    "RowGuard",
    "SessionState",
    "SubscriptionHandle",
    "SubtreeGuard",
    "TokenStore",
    "UserRecord",
]
