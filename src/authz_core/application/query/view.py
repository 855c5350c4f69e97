"""Application query – PermissionView."""
from __future__ import annotations

from typing import Iterable

from authz_core.kernel.security import (
    AccessDecision,
    Identity,
    ModulePermission,
    evaluate_access,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_same_branch,
    is_super_admin,
)


class PermissionView:
    """Read-only projection of one :class:`Identity` snapshot.

    A view never changes: when the session publishes a new identity the
    facade builds a new view.
    """

    __slots__ = ("_identity",)

    def __init__(self, identity: Identity | None) -> None:
        self._identity = identity

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def is_authenticated(self) -> bool:
        return self._identity is not None

    @property
    def is_super_admin(self) -> bool:
        return is_super_admin(self._identity)

    @property
    def user_role(self) -> str | None:
        return self._identity.role if self._identity is not None else None

    @property
    def user_branch(self) -> str | None:
        return self._identity.branch if self._identity is not None else None

    @property
    def user_permissions(self) -> tuple[ModulePermission, ...]:
        return self._identity.permissions if self._identity is not None else ()

    def has_permission(self, module: str, action: str) -> bool:
        return has_permission(self._identity, module, action)

    def has_any_permission(self, tokens: Iterable[str]) -> bool:
        return has_any_permission(self._identity, tokens)

    def has_all_permissions(self, tokens: Iterable[str]) -> bool:
        return has_all_permissions(self._identity, tokens)

    def is_same_branch(self, record_branch: str | None) -> bool:
        return is_same_branch(self._identity, record_branch)

    def evaluate(
        self,
        module: str,
        action: str,
        *,
        branch_check: bool = True,
        record_branch: str | None = None,
        strict_branch: bool = False,
    ) -> AccessDecision:
        return evaluate_access(
            self._identity,
            module,
            action,
            branch_check=branch_check,
            record_branch=record_branch,
            strict_branch=strict_branch,
        )


__all__ = ["PermissionView"]
