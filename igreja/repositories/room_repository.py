from sqlalchemy.orm import Session
from igreja.models.room import Room
from igreja.models.member import Member, MemberStatus


class RoomRepository:
    """Repository for Room model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_church(self, church_id: int, active_only: bool = False) -> list[Room]:
        """Get all rooms of a church"""
        query = self.db.query(Room).filter(Room.church_id == church_id)
        if active_only:
            query = query.filter(Room.is_active.is_(True))
        return query.order_by(Room.name).all()

    def get_by_id_and_church(self, room_id: int, church_id: int) -> Room | None:
        """
        Get room ensuring it belongs to church (multi-tenant safety).

        Returns None if room doesn't exist or belongs to another church.
        """
        return (
            self.db.query(Room)
            .filter(Room.id == room_id, Room.church_id == church_id)
            .first()
        )

    def count_active_members(self, room_id: int) -> int:
        """Number of ACTIVE members assigned to the room"""
        return (
            self.db.query(Member)
            .filter(Member.room_id == room_id, Member.status == MemberStatus.ACTIVE)
            .count()
        )

    def create(self, room: Room) -> Room:
        """Create new room"""
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return room

    def update(self, room: Room) -> Room:
        """Update existing room"""
        self.db.commit()
        self.db.refresh(room)
        return room

    def delete(self, room: Room) -> None:
        """Delete room (remaining members are detached)"""
        self.db.delete(room)
        self.db.commit()
