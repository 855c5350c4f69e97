"""Kernel security – module/action vocabulary and seeded role matrices.

The vocabulary is configuration, not user data: the matrix editor enumerates
it verbatim to build its grid and rejects cells outside of it.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable

SUPER_ADMIN_ROLE = "super_admin"
"""Role name that bypasses every permission and branch check."""

BRANCH_ALL = "all"
"""Record branch sentinel meaning "visible regardless of branch"."""


class Roles:
    SUPER_ADMIN = SUPER_ADMIN_ROLE
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


class Modules:
    CLIENTS = "clients"
    POLICIES = "policies"
    CLAIMS = "claims"
    LEADS = "leads"
    QUOTATIONS = "quotations"
    OFFERS = "offers"
    INVOICES = "invoices"
    AGENTS = "agents"
    REPORTS = "reports"
    SETTINGS = "settings"
    ACTIVITIES = "activities"


class Actions:
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EXPORT = "export"
    APPROVE = "approve"
    EDIT_SENSITIVE = "edit_sensitive"
    EDIT_STATUS = "edit_status"


@dataclasses.dataclass(frozen=True)
class Vocabulary:
    """Closed, ordered set of modules and actions known to editor and guards."""

    modules: tuple[str, ...]
    actions: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(set(self.modules)) != len(self.modules):
            raise ValueError("Vocabulary modules must be unique")
        if len(set(self.actions)) != len(self.actions):
            raise ValueError("Vocabulary actions must be unique")

    def has_module(self, module: str) -> bool:
        return module in self.modules

    def has_action(self, action: str) -> bool:
        return action in self.actions

    def contains(self, module: str, action: str) -> bool:
        return self.has_module(module) and self.has_action(action)

    def restrict(
        self,
        modules: Iterable[str] | None = None,
        actions: Iterable[str] | None = None,
    ) -> "Vocabulary":
        """Return a sub-vocabulary, keeping this vocabulary's ordering."""
        keep_m = set(modules) if modules is not None else set(self.modules)
        keep_a = set(actions) if actions is not None else set(self.actions)
        return Vocabulary(
            modules=tuple(m for m in self.modules if m in keep_m),
            actions=tuple(a for a in self.actions if a in keep_a),
        )


DEFAULT_VOCABULARY = Vocabulary(
    modules=(
        Modules.CLIENTS,
        Modules.POLICIES,
        Modules.CLAIMS,
        Modules.LEADS,
        Modules.QUOTATIONS,
        Modules.OFFERS,
        Modules.INVOICES,
        Modules.AGENTS,
        Modules.REPORTS,
        Modules.SETTINGS,
        Modules.ACTIVITIES,
    ),
    actions=(
        Actions.VIEW,
        Actions.CREATE,
        Actions.EDIT,
        Actions.DELETE,
        Actions.EXPORT,
        Actions.APPROVE,
        Actions.EDIT_SENSITIVE,
        Actions.EDIT_STATUS,
    ),
)

# Seed matrices for the built-in roles. The super-admin has no entry; it is
# a bypass, never a permission list.
DEFAULT_ROLE_PERMISSIONS: dict[str, dict[str, tuple[str, ...]]] = {
    Roles.AGENT: {
        Modules.CLIENTS: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.LEADS: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.QUOTATIONS: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.POLICIES: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.CLAIMS: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.ACTIVITIES: (Actions.VIEW, Actions.CREATE),
        Modules.REPORTS: (Actions.VIEW,),
        Modules.SETTINGS: (Actions.VIEW,),
    },
    Roles.MANAGER: {
        Modules.CLIENTS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE),
        Modules.LEADS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE),
        Modules.QUOTATIONS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE),
        Modules.POLICIES: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.APPROVE),
        Modules.CLAIMS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.APPROVE),
        Modules.INVOICES: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.AGENTS: (Actions.VIEW, Actions.EDIT),
        Modules.ACTIVITIES: (Actions.VIEW, Actions.CREATE, Actions.EDIT),
        Modules.REPORTS: (Actions.VIEW, Actions.EXPORT),
        Modules.SETTINGS: (Actions.VIEW, Actions.EDIT),
    },
    Roles.ADMIN: {
        Modules.CLIENTS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT, Actions.EDIT_SENSITIVE),
        Modules.POLICIES: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.APPROVE, Actions.EXPORT),
        Modules.CLAIMS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.APPROVE, Actions.EXPORT),
        Modules.LEADS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT),
        Modules.QUOTATIONS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT),
        Modules.OFFERS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT),
        Modules.INVOICES: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT),
        Modules.AGENTS: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE, Actions.EXPORT),
        Modules.REPORTS: (Actions.VIEW, Actions.EXPORT),
        Modules.SETTINGS: (Actions.VIEW, Actions.EDIT),
        Modules.ACTIVITIES: (Actions.VIEW, Actions.CREATE, Actions.EDIT, Actions.DELETE),
    },
}


__all__ = [
    "Actions",
    "BRANCH_ALL",
    "DEFAULT_ROLE_PERMISSIONS",
    "DEFAULT_VOCABULARY",
    "Modules",
    "Roles",
    "SUPER_ADMIN_ROLE",
    "Vocabulary",
]
