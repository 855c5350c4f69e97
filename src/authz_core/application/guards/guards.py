"""Application guards – Subtree, Field, Row and Route guards.

All four decide through :meth:`PermissionQuery.evaluate` and differ only in
what they render on denial.
"""
from __future__ import annotations

import abc
from typing import Any, Callable, Iterable, Mapping, TypeVar

from authz_core.application.guards.elements import (
    Children,
    Element,
    Node,
    access_denied,
    as_children,
    loading,
    lock_indicator,
    redirect,
)
from authz_core.application.query import PermissionQuery
from authz_core.kernel.security import AccessDecision, Actions
from authz_core.observability.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_SIGN_IN_PATH = "/auth"


class _NoFallback:
    def __repr__(self) -> str:
        return "NO_FALLBACK"


NO_FALLBACK: Any = _NoFallback()
"""Sentinel: no fallback supplied, render the access-denied placeholder."""


class Guard(abc.ABC):
    """Base class: a guard wraps children and decides whether to show them."""

    def __init__(self, query: PermissionQuery) -> None:
        self._query = query

    @property
    def query(self) -> PermissionQuery:
        return self._query

    @property
    @abc.abstractmethod
    def decision(self) -> AccessDecision: ...

    @property
    def allowed(self) -> bool:
        return self.decision.allowed

    @abc.abstractmethod
    def render(self, children: Children) -> tuple[Node, ...]: ...


# ---------------------------------------------------------------------------
# SubtreeGuard
# ---------------------------------------------------------------------------


class SubtreeGuard(Guard):
    """Render children only with ``module:action`` and branch access.

    On denial renders *fallback*. Passing ``fallback=None`` renders nothing;
    omitting it renders the access-denied placeholder.
    """

    def __init__(
        self,
        query: PermissionQuery,
        module: str,
        action: str,
        *,
        branch_check: bool = True,
        record_branch: str | None = None,
        fallback: Children = NO_FALLBACK,
    ) -> None:
        super().__init__(query)
        self.module = module
        self.action = action
        self.branch_check = branch_check
        self.record_branch = record_branch
        self.fallback = fallback

    @property
    def decision(self) -> AccessDecision:
        return self._query.evaluate(
            self.module,
            self.action,
            branch_check=self.branch_check,
            record_branch=self.record_branch,
        )

    def render(self, children: Children) -> tuple[Node, ...]:
        decision = self.decision
        if decision.allowed:
            return as_children(children)
        if self.fallback is NO_FALLBACK:
            return (access_denied(decision),)
        return as_children(self.fallback)


# ---------------------------------------------------------------------------
# FieldGuard
# ---------------------------------------------------------------------------


class FieldGuard(Guard):
    """Keep a form field in place but force it read-only without edit rights.

    A *sensitive* field additionally needs ``edit_sensitive`` on the module.
    """

    def __init__(
        self,
        query: PermissionQuery,
        module: str,
        action: str = Actions.EDIT,
        *,
        sensitive: bool = False,
        show_lock: bool = True,
    ) -> None:
        super().__init__(query)
        self.module = module
        self.action = action
        self.sensitive = sensitive
        self.show_lock = show_lock

    @property
    def decision(self) -> AccessDecision:
        decision = self._query.evaluate(self.module, self.action, branch_check=False)
        if decision.allowed and self.sensitive:
            return self._query.evaluate(self.module, Actions.EDIT_SENSITIVE, branch_check=False)
        return decision

    @property
    def editable(self) -> bool:
        return self.decision.allowed

    def render(self, children: Children) -> tuple[Node, ...]:
        nodes = as_children(children)
        if self.editable:
            return nodes
        locked: list[Node] = [
            node.with_props(read_only=True, disabled=True) if isinstance(node, Element) else node
            for node in nodes
        ]
        if self.show_lock:
            locked.append(lock_indicator())
        return (Element("div", {"read_only": True}, tuple(locked)),)


# ---------------------------------------------------------------------------
# RowGuard
# ---------------------------------------------------------------------------


def _default_branch_of(row: Any) -> str | None:
    if isinstance(row, Mapping):
        return row.get("branch")
    return getattr(row, "branch", None)


class RowGuard(Guard):
    """Render a table row only with ``module:view`` and branch access.

    With ``branch_check`` on, a record without a branch is hidden.
    """

    def __init__(
        self,
        query: PermissionQuery,
        module: str,
        record_branch: str | None = None,
        *,
        branch_check: bool = True,
    ) -> None:
        super().__init__(query)
        self.module = module
        self.record_branch = record_branch
        self.branch_check = branch_check

    @property
    def decision(self) -> AccessDecision:
        return self._decide(self.record_branch)

    def render(self, children: Children) -> tuple[Node, ...]:
        if self.decision.allowed:
            return as_children(children)
        return ()

    def filter(
        self,
        rows: Iterable[T],
        branch_of: Callable[[T], str | None] | None = None,
    ) -> list[T]:
        """Keep the rows this guard would render, reading each row's branch."""
        get_branch = branch_of or _default_branch_of
        return [row for row in rows if self._decide(get_branch(row)).allowed]

    def _decide(self, record_branch: str | None) -> AccessDecision:
        return self._query.evaluate(
            self.module,
            Actions.VIEW,
            branch_check=self.branch_check,
            record_branch=record_branch,
            strict_branch=True,
        )


# ---------------------------------------------------------------------------
# RouteGuard
# ---------------------------------------------------------------------------


class RouteGuard(Guard):
    """Gate a whole screen.

    Renders a loading indicator while the session resolves its first
    snapshot, a redirect to *sign_in_path* when signed out, and on denial
    either a redirect to *redirect_to* or the access-denied placeholder.
    Without *module* and *action* only authentication is required.
    """

    def __init__(
        self,
        query: PermissionQuery,
        module: str | None = None,
        action: str | None = None,
        *,
        branch_check: bool = True,
        record_branch: str | None = None,
        redirect_to: str | None = None,
        sign_in_path: str = DEFAULT_SIGN_IN_PATH,
    ) -> None:
        super().__init__(query)
        self.module = module
        self.action = action
        self.branch_check = branch_check
        self.record_branch = record_branch
        self.redirect_to = redirect_to
        self.sign_in_path = sign_in_path

    @property
    def decision(self) -> AccessDecision:
        module = self.module or ""
        action = self.action or ""
        if not (self.module and self.action):
            allowed = self._query.is_authenticated
            return AccessDecision(allowed=allowed, module=module, action=action)
        try:
            return self._query.evaluate(
                self.module,
                self.action,
                branch_check=self.branch_check,
                record_branch=self.record_branch,
            )
        except Exception:
            logger.exception("guard.predicate_failed", module=module, action=action)
            return AccessDecision(allowed=False, module=module, action=action)

    def render(self, children: Children) -> tuple[Node, ...]:
        if self._query.loading:
            return (loading(),)
        if not self._query.is_authenticated:
            return (redirect(self.sign_in_path),)
        decision = self.decision
        if decision.allowed:
            return as_children(children)
        if self.redirect_to is not None:
            return (redirect(self.redirect_to),)
        return (access_denied(decision),)


__all__ = [
    "DEFAULT_SIGN_IN_PATH",
    "FieldGuard",
    "Guard",
    "NO_FALLBACK",
    "RouteGuard",
    "RowGuard",
    "SubtreeGuard",
]
