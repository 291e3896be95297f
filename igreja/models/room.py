from sqlalchemy import String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from igreja.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from igreja.models.church import Church
    from igreja.models.member import Member


class Room(Base, TimestampMixin):
    """
    A room or ministry that groups members for attendance ("chamada").

    Deleting a room detaches its remaining (inactive) members; the service
    refuses deletion while active members are assigned.
    """

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    church_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    age_group: Mapped[str] = mapped_column(String(50), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    church: Mapped["Church"] = relationship("Church", back_populates="rooms")
    members: Mapped[list["Member"]] = relationship("Member", back_populates="room")
