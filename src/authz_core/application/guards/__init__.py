"""Application guards – declarative enforcement points."""
from authz_core.application.guards.elements import (
    ACCESS_DENIED,
    DEFAULT_DENIED_MESSAGE,
    LOADING,
    LOCK_INDICATOR,
    REDIRECT,
    Children,
    Element,
    Node,
    access_denied,
    as_children,
    loading,
    lock_indicator,
    redirect,
)
from authz_core.application.guards.guards import (
    DEFAULT_SIGN_IN_PATH,
    NO_FALLBACK,
    FieldGuard,
    Guard,
    RouteGuard,
    RowGuard,
    SubtreeGuard,
)

__all__ = [
    "ACCESS_DENIED",
    "Children",
    "DEFAULT_DENIED_MESSAGE",
    "DEFAULT_SIGN_IN_PATH",
    "Element",
    "FieldGuard",
    "Guard",
    "LOADING",
    "LOCK_INDICATOR",
    "NO_FALLBACK",
    "Node",
    "REDIRECT",
    "RouteGuard",
    "RowGuard",
    "SubtreeGuard",
    "access_denied",
    "as_children",
    "loading",
    "lock_indicator",
    "redirect",
]
