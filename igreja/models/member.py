from datetime import date
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Date, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from igreja.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from igreja.models.church import Church
    from igreja.models.room import Room
    from igreja.models.financial_transaction import FinancialTransaction


class MemberStatus(str, PyEnum):
    """Membership status enumeration"""

    ACTIVE = "ativo"
    INACTIVE = "inativo"
    VISITOR = "visitante"
    TRANSFERRED = "transferido"


class Member(Base, TimestampMixin):
    """
    Church member roster entry.

    Only ACTIVE members assigned to a room take part in attendance.
    """

    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    church_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True, index=True
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    photo: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cpf: Mapped[str | None] = mapped_column(String(14), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    baptism_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    join_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    age_group: Mapped[str] = mapped_column(String(50), nullable=False, default="Adulto")
    status: Mapped[MemberStatus] = mapped_column(
        Enum(MemberStatus, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="members")
    room: Mapped[Optional["Room"]] = relationship("Room", back_populates="members")
    transactions: Mapped[list["FinancialTransaction"]] = relationship(
        "FinancialTransaction", back_populates="member"
    )  # Deleting a member keeps its transactions, member_name stays denormalized

    __table_args__ = (Index("ix_members_church_status", "church_id", "status"),)
