"""Kernel security – ModulePermission, RoleDefinition, Identity and flattening.

A role grants ``(module, actions)`` pairs; every consumer checks permissions
through the flattened ``"module:action"`` token set. Both representations are
immutable snapshots: the editor works on its own draft and the session
replaces an :class:`Identity` wholesale.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Mapping

from authz_core.kernel.errors import SerializationError
from authz_core.kernel.security.vocabulary import SUPER_ADMIN_ROLE

TOKEN_SEPARATOR = ":"


def permission_token(module: str, action: str) -> str:
    """Return the flat token for *module* / *action* (``"clients:view"``)."""
    return f"{module}{TOKEN_SEPARATOR}{action}"


def parse_permission_token(token: str) -> tuple[str, str] | None:
    """Split ``"module:action"``; ``None`` when *token* is malformed."""
    if not isinstance(token, str):
        return None
    module, sep, action = token.partition(TOKEN_SEPARATOR)
    if not sep or not module or not action:
        return None
    return module, action


@dataclasses.dataclass(frozen=True)
class ModulePermission:
    """Actions granted on one module. An empty action set means "absent"."""

    module: str
    actions: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.actions, frozenset):
            object.__setattr__(self, "actions", frozenset(self.actions))

    def is_empty(self) -> bool:
        return not self.actions

    def tokens(self) -> frozenset[str]:
        return frozenset(permission_token(self.module, a) for a in self.actions)

    def to_dict(self) -> dict[str, Any]:
        return {"module": self.module, "actions": sorted(self.actions)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModulePermission":
        try:
            module = data["module"]
            actions = data.get("actions") or []
        except (KeyError, TypeError, AttributeError) as exc:
            raise SerializationError(
                f"Invalid module permission payload: {data!r}",
                payload_type="ModulePermission",
                cause=exc,
            ) from exc
        if not isinstance(module, str) or isinstance(actions, (str, bytes)):
            raise SerializationError(
                f"Invalid module permission payload: {data!r}",
                payload_type="ModulePermission",
            )
        return cls(module=module, actions=frozenset(str(a) for a in actions))


def flatten(permissions: Iterable[ModulePermission]) -> frozenset[str]:
    """Expand module permissions into the flat ``module:action`` token set."""
    tokens: set[str] = set()
    for perm in permissions:
        tokens.update(perm.tokens())
    return frozenset(tokens)


def canonicalize(permissions: Iterable[ModulePermission]) -> tuple[ModulePermission, ...]:
    """Merge duplicate modules, drop empty entries and order by module name."""
    merged: dict[str, set[str]] = {}
    for perm in permissions:
        merged.setdefault(perm.module, set()).update(perm.actions)
    return tuple(
        ModulePermission(module, frozenset(actions))
        for module, actions in sorted(merged.items())
        if actions
    )


def count_permissions(permissions: Iterable[ModulePermission]) -> int:
    """Total number of granted ``(module, action)`` cells."""
    return len(flatten(permissions))


def parse_permissions(raw: Any) -> tuple[ModulePermission, ...]:
    """Decode a ``[{module, actions}]`` payload into canonical form."""
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise SerializationError(
            f"Expected a list of module permissions, got {type(raw).__name__}",
            payload_type="ModulePermission",
        )
    return canonicalize(ModulePermission.from_dict(item) for item in raw)


@dataclasses.dataclass(frozen=True)
class RoleDefinition:
    """A role as stored by the role-permission collaborator."""

    role_id: str
    name: str
    display_name: str
    permissions: tuple[ModulePermission, ...] = ()

    @property
    def is_super_admin(self) -> bool:
        return self.name == SUPER_ADMIN_ROLE

    @property
    def permission_count(self) -> int:
        return count_permissions(self.permissions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roleId": self.role_id,
            "name": self.name,
            "displayName": self.display_name,
            "permissions": [p.to_dict() for p in self.permissions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RoleDefinition":
        try:
            role_id = data.get("roleId") or data.get("_id") or data.get("id")
            name = data["name"]
        except (KeyError, AttributeError) as exc:
            raise SerializationError(
                f"Invalid role payload: {data!r}", payload_type="RoleDefinition", cause=exc
            ) from exc
        if role_id is None:
            role_id = name
        return cls(
            role_id=str(role_id),
            name=str(name),
            display_name=str(data.get("displayName") or name),
            permissions=parse_permissions(data.get("permissions")),
        )


@dataclasses.dataclass(frozen=True)
class Identity:
    """Permission snapshot of one authenticated user.

    Build it with :meth:`from_permissions` so ``flat_permissions`` is always
    the exact image of ``permissions``.
    """

    user_id: str
    role: str
    branch: str | None = None
    permissions: tuple[ModulePermission, ...] = ()
    flat_permissions: frozenset[str] = frozenset()

    @classmethod
    def from_permissions(
        cls,
        user_id: str,
        role: str,
        branch: str | None,
        permissions: Iterable[ModulePermission] = (),
    ) -> "Identity":
        perms = canonicalize(permissions)
        return cls(
            user_id=user_id,
            role=role,
            branch=branch,
            permissions=perms,
            flat_permissions=flatten(perms),
        )

    @property
    def is_super_admin(self) -> bool:
        return self.role == SUPER_ADMIN_ROLE


__all__ = [
    "Identity",
    "ModulePermission",
    "RoleDefinition",
    "TOKEN_SEPARATOR",
    "canonicalize",
    "count_permissions",
    "flatten",
    "parse_permission_token",
    "parse_permissions",
    "permission_token",
]
