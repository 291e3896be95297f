from datetime import date
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, Numeric, ForeignKey, Date, Text, Enum, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING
from igreja.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from igreja.models.church import Church
    from igreja.models.member import Member


class TransactionType(str, PyEnum):
    """Direction of a financial transaction"""

    INCOME = "entrada"
    EXPENSE = "saida"


class FinancialTransaction(Base, TimestampMixin):
    """
    Income (tithes, offerings, donations) or expense of a church.

    Amount is always positive; the direction is given by type.
    member_name is denormalized so history survives member removal.
    """

    __tablename__ = "financial_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    church_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True
    )
    member_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    amount: Mapped[float] = mapped_column(
        Numeric(precision=15, scale=2, asdecimal=False), nullable=False
    )
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="transactions")
    member: Mapped[Optional["Member"]] = relationship("Member", back_populates="transactions")

    # Composite indexes for common queries
    __table_args__ = (
        Index("ix_financial_transactions_church_date", "church_id", "transaction_date"),
        Index("ix_financial_transactions_church_type", "church_id", "type"),
    )
