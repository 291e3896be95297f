"""Repository for RolePermission model operations."""

from sqlalchemy.orm import Session
from igreja.models.role_permission import RolePermission
from igreja.models.role import UserRole


class RolePermissionRepository:
    """Repository for RolePermission model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_church(self, church_id: int) -> list[RolePermission]:
        """
        Get all stored permission rows of a church.

        Args:
            church_id: Church ID

        Returns:
            List of RolePermission rows (may be empty: defaults apply)
        """
        return (
            self.db.query(RolePermission)
            .filter(RolePermission.church_id == church_id)
            .all()
        )

    def get_for_role(self, church_id: int, role: UserRole) -> RolePermission | None:
        """
        Get the row of one role in one church.

        Args:
            church_id: Church ID
            role: Tenant role

        Returns:
            RolePermission object or None if the role has no stored row
        """
        return (
            self.db.query(RolePermission)
            .filter(
                RolePermission.church_id == church_id,
                RolePermission.role == role,
            )
            .first()
        )

    def add(self, row: RolePermission) -> RolePermission:
        """Stage a row without committing (for atomic registration)"""
        self.db.add(row)
        self.db.flush()
        return row

    def upsert(
        self, church_id: int, role: UserRole, label: str, modules: dict[str, bool]
    ) -> RolePermission:
        """
        Replace the modules of a role, creating the row when missing.

        Commits before returning.

        Args:
            church_id: Church ID
            role: Tenant role
            label: Display label stored with the row
            modules: Full module mapping to store

        Returns:
            The persisted RolePermission row
        """
        row = self.get_for_role(church_id, role)
        if row is None:
            row = RolePermission(church_id=church_id, role=role, label=label, modules=modules)
            self.db.add(row)
        else:
            row.modules = dict(modules)
        self.db.commit()
        self.db.refresh(row)
        return row
