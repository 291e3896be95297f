from collections.abc import Mapping

import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import ForbiddenException, ValidationException
from igreja.models.permission_matrix import PermissionMatrix, sanitize_flags
from igreja.models.role import ROLE_LABELS, TENANT_ROLES, UserRole
from igreja.models.tenant_context import TenantContext
from igreja.repositories.role_permission_repository import RolePermissionRepository

logger = structlog.get_logger(__name__)


class PermissionService:
    """Service layer for the per-church permission matrix"""

    def __init__(self, db: Session):
        self.db = db
        self.permission_repo = RolePermissionRepository(db)

    def get_matrix(self, church_id: int) -> PermissionMatrix:
        rows = self.permission_repo.get_by_church(church_id)
        return PermissionMatrix.from_rows((row.role, row.modules) for row in rows)

    def list_permissions(self, context: TenantContext) -> list[dict]:
        """
        Editable roles of the church with their labels and module flags.

        Args:
            context: Tenant context

        Returns:
            One entry per tenant role, defaults filled in
        """
        rows = {row.role: row for row in self.permission_repo.get_by_church(context.church.id)}
        matrix = PermissionMatrix.from_rows((role, row.modules) for role, row in rows.items())

        result = []
        for role in TENANT_ROLES:
            row = rows.get(role)
            result.append(
                {
                    "role": role,
                    "label": row.label if row else ROLE_LABELS[role],
                    "modules": matrix.flags_for(role),
                }
            )
        return result

    def update_permission(
        self, role: UserRole, flags: Mapping[str, bool], context: TenantContext
    ) -> PermissionMatrix:
        """
        Replace a role's module flags (ADMIN only).

        The admin role always keeps the settings module. Modules missing
        from flags become False; unknown keys are stored and never
        consulted. The new matrix is returned only after the row is saved.

        Args:
            role: Target tenant role
            flags: Full module-key -> allowed mapping
            context: Tenant context

        Returns:
            The church's permission matrix after the change

        Raises:
            ForbiddenException: Caller is not an administrator
            ValidationException: Target role is not a tenant role
        """
        if not context.is_admin():
            raise ForbiddenException("Only administrators can change permissions")

        if role not in TENANT_ROLES:
            raise ValidationException(f"Permissions of role '{role.value}' cannot be edited")

        sanitized = sanitize_flags(role, flags)
        existing = self.permission_repo.get_for_role(context.church.id, role)
        label = existing.label if existing else ROLE_LABELS[role]
        self.permission_repo.upsert(context.church.id, role, label, sanitized)

        logger.info(
            "permissions_updated",
            church_id=context.church.id,
            role=role.value,
            modules=sanitized,
            changed_by=context.principal.id,
        )
        return self.get_matrix(context.church.id)
