"""Application editor – the role permission-matrix editor."""
from authz_core.application.editor.editor import SUPER_ADMIN_READ_ONLY, PermissionMatrixEditor
from authz_core.application.editor.matrix import PermissionMatrix
from authz_core.application.editor.ports import RolePermissionRepository
from authz_core.application.editor.state import EditorState

__all__ = [
    "EditorState",
    "PermissionMatrix",
    "PermissionMatrixEditor",
    "RolePermissionRepository",
    "SUPER_ADMIN_READ_ONLY",
]
