import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from igreja.models.room import Room
from igreja.models.tenant_context import TenantContext
from igreja.repositories.room_repository import RoomRepository
from igreja.schemas.room_schemas import RoomCreate, RoomUpdate

logger = structlog.get_logger(__name__)


class RoomService:
    """Service layer for rooms (settings module)"""

    def __init__(self, db: Session):
        self.db = db
        self.room_repo = RoomRepository(db)

    def list_rooms(self, context: TenantContext, active_only: bool = False) -> list[Room]:
        return self.room_repo.get_by_church(context.church.id, active_only)

    def get_room(self, room_id: int, context: TenantContext) -> Room:
        room = self.room_repo.get_by_id_and_church(room_id, context.church.id)
        if not room:
            raise NotFoundException(f"Room {room_id} not found")
        return room

    def create_room(self, room_data: RoomCreate, context: TenantContext) -> Room:
        if not context.is_admin():
            raise ForbiddenException("Only administrators can manage rooms")
        room = Room(
            church_id=context.church.id,
            name=room_data.name.strip(),
            age_group=room_data.age_group,
            is_active=room_data.is_active,
        )
        return self.room_repo.create(room)

    def update_room(self, room_id: int, room_update: RoomUpdate, context: TenantContext) -> Room:
        """
        Rename, regroup or toggle a room.

        Deactivation is persisted before the caller sees the new state, like
        every other write.
        """
        if not context.is_admin():
            raise ForbiddenException("Only administrators can manage rooms")
        room = self.get_room(room_id, context)

        update_data = room_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is not None:
                setattr(room, field, value)

        return self.room_repo.update(room)

    def delete_room(self, room_id: int, context: TenantContext) -> None:
        """
        Delete a room that has no active members.

        Raises:
            ForbiddenException: If principal is not an administrator
            NotFoundException: If room not in this church
            ValidationException: If active members are still assigned
                (message names the count, room is kept)
        """
        if not context.is_admin():
            raise ForbiddenException("Only administrators can manage rooms")
        room = self.get_room(room_id, context)

        active_members = self.room_repo.count_active_members(room.id)
        if active_members > 0:
            logger.info("room_delete_refused", room_id=room.id, active_members=active_members)
            raise ValidationException(
                f"Cannot delete room '{room.name}': {active_members} active member(s) assigned. "
                "Move them to another room first."
            )

        self.room_repo.delete(room)
