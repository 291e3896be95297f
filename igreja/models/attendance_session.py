from datetime import date
from sqlalchemy import String, Integer, Boolean, ForeignKey, Date, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from igreja.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from igreja.models.church import Church


class AttendanceSession(Base, TimestampMixin):
    """
    A finalized attendance call ("chamada") for one room on one date.

    Member ids are stored as JSON arrays; room_name is denormalized so
    reports keep working after a room is renamed or removed.
    """

    __tablename__ = "attendance_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    church_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True
    )
    room_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    present_member_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    absent_member_ids: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    total_present: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_absent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    finalized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="attendance_sessions")

    __table_args__ = (
        Index("ix_attendance_sessions_church_date", "church_id", "session_date"),
    )
