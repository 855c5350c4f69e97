"""Application query – PermissionQuery, the memoized facade over a session."""
from __future__ import annotations

from typing import Iterable

from authz_core.application.query.view import PermissionView
from authz_core.application.session import IdentitySession, SessionState
from authz_core.kernel.errors import ForbiddenError
from authz_core.kernel.security import AccessDecision, Identity, ModulePermission


class PermissionQuery:
    """Everything guards and screens may ask about the current user.

    :attr:`view` returns the same :class:`PermissionView` object for as long
    as the session keeps publishing the same :class:`Identity`; derivation
    happens once per snapshot.
    """

    def __init__(self, session: IdentitySession) -> None:
        self._session = session
        self._view: PermissionView | None = None
        self._remove_listener = session.add_listener(self._on_identity)

    @property
    def session(self) -> IdentitySession:
        return self._session

    @property
    def view(self) -> PermissionView:
        identity = self._session.identity
        view = self._view
        if view is None or view.identity is not identity:
            view = PermissionView(identity)
            self._view = view
        return view

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def loading(self) -> bool:
        """``True`` while resolving with no snapshot to show yet."""
        return self._session.state is SessionState.RESOLVING and self._session.identity is None

    @property
    def identity(self) -> Identity | None:
        return self.view.identity

    @property
    def is_authenticated(self) -> bool:
        return self.view.is_authenticated

    @property
    def is_super_admin(self) -> bool:
        return self.view.is_super_admin

    @property
    def user_role(self) -> str | None:
        return self.view.user_role

    @property
    def user_branch(self) -> str | None:
        return self.view.user_branch

    @property
    def user_permissions(self) -> tuple[ModulePermission, ...]:
        return self.view.user_permissions

    def has_permission(self, module: str, action: str) -> bool:
        return self.view.has_permission(module, action)

    def has_any_permission(self, tokens: Iterable[str]) -> bool:
        return self.view.has_any_permission(tokens)

    def has_all_permissions(self, tokens: Iterable[str]) -> bool:
        return self.view.has_all_permissions(tokens)

    def is_same_branch(self, record_branch: str | None) -> bool:
        return self.view.is_same_branch(record_branch)

    def evaluate(
        self,
        module: str,
        action: str,
        *,
        branch_check: bool = True,
        record_branch: str | None = None,
        strict_branch: bool = False,
    ) -> AccessDecision:
        return self.view.evaluate(
            module,
            action,
            branch_check=branch_check,
            record_branch=record_branch,
            strict_branch=strict_branch,
        )

    def require(
        self,
        module: str,
        action: str,
        *,
        branch_check: bool = True,
        record_branch: str | None = None,
    ) -> None:
        """Raise :class:`ForbiddenError` unless *module*:*action* is allowed here."""
        decision = self.evaluate(
            module, action, branch_check=branch_check, record_branch=record_branch
        )
        if not decision.allowed:
            raise ForbiddenError(decision.reason or "Access denied", permission=decision.token)

    def close(self) -> None:
        """Detach from the session."""
        self._remove_listener()
        self._view = None

    def _on_identity(self, identity: Identity | None) -> None:
        if self._view is not None and self._view.identity is not identity:
            self._view = None


__all__ = ["PermissionQuery"]
