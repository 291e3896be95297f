"""Church model: the multi-tenant isolation boundary."""

from sqlalchemy import String, Integer, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from igreja.models.base import Base, TimestampMixin
from igreja.models.role import PlanType

if TYPE_CHECKING:
    from igreja.models.profile import Profile
    from igreja.models.room import Room
    from igreja.models.member import Member
    from igreja.models.financial_transaction import FinancialTransaction
    from igreja.models.attendance_session import AttendanceSession
    from igreja.models.visitor import Visitor
    from igreja.models.role_permission import RolePermission

SYSTEM_CHURCH_ID = 0
SYSTEM_CHURCH_SLUG = "superadmin"


class Church(Base, TimestampMixin):
    """
    An independently administered church and all of its data.

    Every tenant-scoped row (profiles, rooms, members, transactions,
    attendance sessions, visitors, permission rows) carries church_id and
    is removed with the church. Churches are deactivated rather than
    deleted in normal operation; deletion is a super admin escape hatch.
    """

    __tablename__ = "churches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    cnpj: Mapped[str | None] = mapped_column(String(18), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    state: Mapped[str | None] = mapped_column(String(2), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    pastor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    admin_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    admin_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    logo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    plan: Mapped[PlanType] = mapped_column(
        Enum(PlanType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=PlanType.FREE,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    profiles: Mapped[list["Profile"]] = relationship(
        "Profile", back_populates="church", cascade="all, delete-orphan"
    )
    rooms: Mapped[list["Room"]] = relationship(
        "Room", back_populates="church", cascade="all, delete-orphan"
    )
    members: Mapped[list["Member"]] = relationship(
        "Member", back_populates="church", cascade="all, delete-orphan"
    )
    transactions: Mapped[list["FinancialTransaction"]] = relationship(
        "FinancialTransaction", back_populates="church", cascade="all, delete-orphan"
    )
    attendance_sessions: Mapped[list["AttendanceSession"]] = relationship(
        "AttendanceSession", back_populates="church", cascade="all, delete-orphan"
    )
    visitors: Mapped[list["Visitor"]] = relationship(
        "Visitor", back_populates="church", cascade="all, delete-orphan"
    )
    role_permissions: Mapped[list["RolePermission"]] = relationship(
        "RolePermission", back_populates="church", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Church(id={self.id}, slug='{self.slug}', active={self.is_active})>"


def system_church(admin_email: str | None = None) -> Church:
    """
    Synthetic church placeholder for the super admin's session.

    Never added to a database session.
    """
    return Church(
        id=SYSTEM_CHURCH_ID,
        name="Sistema Central",
        slug=SYSTEM_CHURCH_SLUG,
        admin_name="Super Admin",
        admin_email=admin_email,
        plan=PlanType.PREMIUM,
        is_active=True,
    )
