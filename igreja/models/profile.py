from sqlalchemy import String, Integer, Boolean, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import Optional, TYPE_CHECKING

from igreja.models.base import Base, TimestampMixin
from igreja.models.role import UserRole

if TYPE_CHECKING:
    from igreja.models.church import Church


class Profile(Base, TimestampMixin):
    """
    Principal record linked to an auth credential.

    auth_user_id is the 'sub' claim issued by the auth provider. A credential
    without a profile is an orphan and never yields a session.
    church_id is NULL only for SUPER_ADMIN.
    """

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    auth_user_id: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    church_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("churches.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=UserRole.SECRETARY,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    church: Mapped[Optional["Church"]] = relationship("Church", back_populates="profiles")

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, church_id={self.church_id}, role={self.role.value})>"
