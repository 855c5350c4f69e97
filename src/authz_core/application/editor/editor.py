"""Application editor – PermissionMatrixEditor.

States::

    IDLE -> LOADING -> READY -> SAVING -> READY
               |                  |
               +----> ERROR <-----+

Toggles only touch the in-memory draft. :meth:`PermissionMatrixEditor.save`
sends the whole list in one write and adopts what the server confirms.
The super-admin role is never listed, loaded or written.
"""
from __future__ import annotations

from authz_core.application.editor.matrix import PermissionMatrix
from authz_core.application.editor.ports import RolePermissionRepository
from authz_core.application.editor.state import EditorState
from authz_core.application.session import IdentitySession
from authz_core.kernel.errors import (
    BaseError,
    ConflictError,
    PolicyViolationError,
    ValidationError,
)
from authz_core.kernel.security import (
    DEFAULT_VOCABULARY,
    ModulePermission,
    RoleDefinition,
    Vocabulary,
    canonicalize,
)
from authz_core.observability.logging import get_logger

logger = get_logger(__name__)

SUPER_ADMIN_READ_ONLY = "The super-admin role has every permission and cannot be edited."


class PermissionMatrixEditor:
    """Administrative editor for one role's module × action matrix.

    *session*, when given, is refreshed after every successful save so the
    acting administrator sees their own changes at once.
    """

    def __init__(
        self,
        repository: RolePermissionRepository,
        session: IdentitySession | None = None,
        vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    ) -> None:
        self._repository = repository
        self._session = session
        self._vocabulary = vocabulary
        self._state = EditorState.IDLE
        self._roles: tuple[RoleDefinition, ...] = ()
        self._role: RoleDefinition | None = None
        self._draft = PermissionMatrix()
        self._error: BaseError | None = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    @property
    def roles(self) -> tuple[RoleDefinition, ...]:
        return self._roles

    @property
    def role(self) -> RoleDefinition | None:
        return self._role

    @property
    def error(self) -> BaseError | None:
        """Last failure; cleared by the next successful load or save."""
        return self._error

    @property
    def permissions(self) -> tuple[ModulePermission, ...]:
        return self._draft.to_permissions()

    @property
    def permission_count(self) -> int:
        return self._draft.count()

    @property
    def has_unsaved_changes(self) -> bool:
        if self._role is None:
            return False
        return self._draft.to_permissions() != canonicalize(self._role.permissions)

    def is_granted(self, module: str, action: str) -> bool:
        return self._draft.is_granted(module, action)

    def grid(self) -> dict[str, dict[str, bool]]:
        """``module -> action -> granted`` over the whole vocabulary."""
        return {
            module: {action: self._draft.is_granted(module, action) for action in self._vocabulary.actions}
            for module in self._vocabulary.modules
        }

    def summary(self) -> dict[str, tuple[str, ...]]:
        """Granted actions per module, in vocabulary order; empty modules omitted."""
        order = {action: i for i, action in enumerate(self._vocabulary.actions)}
        result: dict[str, tuple[str, ...]] = {}
        for perm in self._draft.to_permissions():
            result[perm.module] = tuple(
                sorted(perm.actions, key=lambda a: (order.get(a, len(order)), a))
            )
        return result

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_roles(self) -> tuple[RoleDefinition, ...]:
        """Fetch the editable roles. The super-admin role is never included."""
        try:
            roles = await self._repository.list_roles()
        except BaseError as exc:
            self._error = exc
            logger.warning("editor.load_roles_failed", code=exc.code, error=exc.message)
            raise
        self._roles = tuple(role for role in roles if not role.is_super_admin)
        return self._roles

    async def select_role(self, role_id: str) -> RoleDefinition:
        """Load *role_id* into the editor, discarding any local draft.

        If the service is unreachable while a role is already loaded, the
        editor stays ``READY`` on that role with its draft and sets
        :attr:`error`.
        """
        known = next((r for r in self._roles if r.role_id == role_id), None)
        if known is not None and known.is_super_admin:
            raise self._fail(PolicyViolationError(SUPER_ADMIN_READ_ONLY, role=known.name))

        was_ready = self._state is EditorState.READY and self._role is not None
        self._state = EditorState.LOADING
        try:
            role = await self._repository.get_role_permissions(role_id)
        except BaseError as exc:
            logger.warning("editor.load_failed", role_id=role_id, code=exc.code, error=exc.message)
            if exc.retryable and was_ready:
                self._state = EditorState.READY
                self._error = exc
            else:
                self._fail(exc)
            raise
        if role.is_super_admin:
            raise self._fail(PolicyViolationError(SUPER_ADMIN_READ_ONLY, role=role.name))

        self._adopt(role)
        return role

    async def refresh(self) -> RoleDefinition:
        """Drop local toggles and reload the authoritative list."""
        if self._role is None:
            raise ConflictError("No role selected")
        return await self.select_role(self._role.role_id)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def toggle(self, module: str, action: str) -> bool:
        """Flip one cell of the draft. No I/O. Returns the new value."""
        self._require_ready()
        if not self._vocabulary.contains(module, action):
            raise ValidationError(
                f"Unknown permission '{module}:{action}'",
                errors=[{"module": module, "action": action, "reason": "not in vocabulary"}],
            )
        return self._draft.toggle(module, action)

    async def save(self) -> RoleDefinition:
        """Write the whole draft atomically and adopt the confirmed list.

        On a retryable failure (service unreachable) the editor stays
        ``READY`` with the draft intact and :attr:`error` set. Policy and
        validation rejections move to ``ERROR``; :meth:`refresh` recovers.
        """
        role = self._require_ready()
        payload = self._draft.to_permissions()

        self._state = EditorState.SAVING
        try:
            confirmed = await self._repository.put_role_permissions(role.role_id, payload)
        except BaseError as exc:
            if exc.retryable:
                self._state = EditorState.READY
                self._error = exc
                logger.warning("editor.save_failed", role=role.name, code=exc.code, error=exc.message)
            else:
                logger.warning("editor.save_rejected", role=role.name, code=exc.code, error=exc.message)
                self._fail(exc)
            raise

        self._adopt(confirmed)
        logger.info(
            "editor.saved",
            role=confirmed.name,
            permission_count=confirmed.permission_count,
        )
        if self._session is not None:
            await self._session.refresh_permissions()
        return confirmed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_ready(self) -> RoleDefinition:
        if self._state is not EditorState.READY or self._role is None:
            raise ConflictError(f"Editor is {self._state.value}, expected ready", state=self._state.value)
        return self._role

    def _adopt(self, role: RoleDefinition) -> None:
        self._role = role
        self._draft = PermissionMatrix(role.permissions)
        self._error = None
        self._state = EditorState.READY

    def _fail(self, error: BaseError) -> BaseError:
        self._state = EditorState.ERROR
        self._error = error
        return error


__all__ = ["PermissionMatrixEditor", "SUPER_ADMIN_READ_ONLY"]
