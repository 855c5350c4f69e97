"""Kernel security – permission predicates and the shared access decision.

Every enforcement point (the query facade, the four guards, the editor)
decides through these functions; nothing else knows the ``module:action``
convention. They are total: a missing identity or a malformed token is a
denial, never an exception.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable

from authz_core.kernel.security.permissions import (
    Identity,
    parse_permission_token,
    permission_token,
)
from authz_core.kernel.security.vocabulary import BRANCH_ALL, SUPER_ADMIN_ROLE


def is_super_admin(identity: Identity | None) -> bool:
    return identity is not None and identity.role == SUPER_ADMIN_ROLE


def has_permission(identity: Identity | None, module: str, action: str) -> bool:
    """Return ``True`` if *identity* may perform *action* on *module*.

    The super-admin role is granted everything without a lookup.
    """
    if identity is None:
        return False
    if identity.role == SUPER_ADMIN_ROLE:
        return True
    return permission_token(module, action) in identity.flat_permissions


def has_any_permission(identity: Identity | None, tokens: Iterable[str]) -> bool:
    """Return ``True`` if any ``"module:action"`` token in *tokens* is granted."""
    if identity is None:
        return False
    if identity.role == SUPER_ADMIN_ROLE:
        return True
    for token in tokens:
        parsed = parse_permission_token(token)
        if parsed is not None and has_permission(identity, *parsed):
            return True
    return False


def has_all_permissions(identity: Identity | None, tokens: Iterable[str]) -> bool:
    """Return ``True`` only if every token in *tokens* is granted."""
    if identity is None:
        return False
    if identity.role == SUPER_ADMIN_ROLE:
        return True
    for token in tokens:
        parsed = parse_permission_token(token)
        if parsed is None or not has_permission(identity, *parsed):
            return False
    return True


def is_same_branch(identity: Identity | None, record_branch: str | None) -> bool:
    """Return ``True`` if a record tagged *record_branch* is visible to *identity*.

    Super-admins see every branch and ``"all"`` matches every identity.
    Otherwise the branches must be equal, except that an untagged record
    (``None``) is never same-branch, even for an identity whose own branch
    is ``None``: a missing tag denies rather than matches.
    """
    if identity is None:
        return False
    if identity.role == SUPER_ADMIN_ROLE:
        return True
    if record_branch is None:
        return False
    return identity.branch == record_branch or record_branch == BRANCH_ALL


# ---------------------------------------------------------------------------
# AccessDecision
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class AccessDecision:
    """Outcome of :func:`evaluate_access`.

    ``missing_permission`` is set when the role lacks the token;
    ``branch_denied`` when the permission exists but the record lives in
    another branch.
    """

    allowed: bool
    module: str
    action: str
    missing_permission: str | None = None
    branch_denied: bool = False

    @property
    def token(self) -> str:
        return permission_token(self.module, self.action)

    @property
    def reason(self) -> str | None:
        if self.allowed:
            return None
        if self.missing_permission is not None:
            return f"Access denied. Required permission: {self.missing_permission}"
        if self.branch_denied:
            return f"Access denied. Record belongs to another branch ({self.token})"
        return f"Access denied ({self.token})"

    def __bool__(self) -> bool:
        return self.allowed


def evaluate_access(
    identity: Identity | None,
    module: str,
    action: str,
    *,
    branch_check: bool = True,
    record_branch: str | None = None,
    strict_branch: bool = False,
) -> AccessDecision:
    """Single decision shared by all guards.

    With ``strict_branch=False`` a missing *record_branch* skips the branch
    test (subtree / route semantics). With ``strict_branch=True`` the branch
    test always runs, so an untagged record is denied (row semantics).
    """
    if not has_permission(identity, module, action):
        return AccessDecision(
            allowed=False,
            module=module,
            action=action,
            missing_permission=permission_token(module, action),
        )
    if branch_check and (record_branch or strict_branch):
        if not is_same_branch(identity, record_branch):
            return AccessDecision(
                allowed=False, module=module, action=action, branch_denied=True
            )
    return AccessDecision(allowed=True, module=module, action=action)


__all__ = [
    "AccessDecision",
    "evaluate_access",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "is_same_branch",
    "is_super_admin",
]
