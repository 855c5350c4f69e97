"""Application editor – PermissionMatrix, the editable draft."""
from __future__ import annotations

from typing import Iterable

from authz_core.kernel.security import ModulePermission, canonicalize


class PermissionMatrix:
    """Mutable ``module -> actions`` draft.

    A module whose last action is removed disappears, so
    :meth:`to_permissions` is always canonical.
    """

    def __init__(self, permissions: Iterable[ModulePermission] = ()) -> None:
        self._cells: dict[str, set[str]] = {}
        for perm in permissions:
            if perm.actions:
                self._cells.setdefault(perm.module, set()).update(perm.actions)

    def is_granted(self, module: str, action: str) -> bool:
        return action in self._cells.get(module, ())

    def actions_for(self, module: str) -> frozenset[str]:
        return frozenset(self._cells.get(module, ()))

    def toggle(self, module: str, action: str) -> bool:
        """Flip one cell and return its new value."""
        actions = self._cells.setdefault(module, set())
        if action in actions:
            actions.discard(action)
            if not actions:
                del self._cells[module]
            return False
        actions.add(action)
        return True

    def to_permissions(self) -> tuple[ModulePermission, ...]:
        return canonicalize(
            ModulePermission(module, frozenset(actions)) for module, actions in self._cells.items()
        )

    def count(self) -> int:
        return sum(len(actions) for actions in self._cells.values())

    def __len__(self) -> int:
        return len(self._cells)

    def __repr__(self) -> str:
        return f"PermissionMatrix({dict(sorted((m, sorted(a)) for m, a in self._cells.items()))!r})"


__all__ = ["PermissionMatrix"]
