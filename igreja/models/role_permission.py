"""Stored permission matrix rows: one per (church, role)."""

from sqlalchemy import String, Integer, ForeignKey, Enum, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from igreja.models.base import Base
from igreja.models.role import UserRole

if TYPE_CHECKING:
    from igreja.models.church import Church


class RolePermission(Base):
    """
    Module flags for one role inside one church.

    modules is a JSON object of module key -> bool. Keys outside the
    Module enum are kept as stored but never consulted.
    """

    __tablename__ = "role_permissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    church_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    modules: Mapped[dict[str, bool]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="role_permissions")

    __table_args__ = (
        UniqueConstraint("church_id", "role", name="uq_role_permission_church_role"),
    )

    def __repr__(self) -> str:
        return f"<RolePermission(church_id={self.church_id}, role={self.role.value})>"
