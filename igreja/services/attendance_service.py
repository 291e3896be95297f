from datetime import date
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import NotFoundException, ValidationException
from igreja.core.validators import format_phone, is_reasonable_date, normalize_name
from igreja.models.attendance_session import AttendanceSession
from igreja.models.room import Room
from igreja.models.tenant_context import TenantContext
from igreja.models.visitor import Visitor
from igreja.repositories.attendance_repository import AttendanceRepository
from igreja.repositories.member_repository import MemberRepository
from igreja.repositories.room_repository import RoomRepository
from igreja.schemas.attendance_schemas import AttendanceCreate, VisitorCreate

logger = structlog.get_logger(__name__)


class AttendanceService:
    """Service layer for attendance calls ("chamada") and visitors"""

    def __init__(self, db: Session):
        self.db = db
        self.attendance_repo = AttendanceRepository(db)
        self.member_repo = MemberRepository(db)
        self.room_repo = RoomRepository(db)

    def _get_room(self, room_id: int, context: TenantContext) -> Room:
        room = self.room_repo.get_by_id_and_church(room_id, context.church.id)
        if not room:
            raise NotFoundException(f"Room {room_id} not found")
        return room

    def finalize_session(
        self, attendance_data: AttendanceCreate, context: TenantContext
    ) -> AttendanceSession:
        """
        Save a finalized attendance call for one room.

        Args:
            attendance_data: Room, date and present/absent member ids
            context: Tenant context

        Returns:
            Created attendance session with totals

        Raises:
            NotFoundException: Room not in this church
            ValidationException: Inactive room, future date, overlapping
                or foreign member ids, empty call
        """
        room = self._get_room(attendance_data.room_id, context)
        if not room.is_active:
            raise ValidationException(f"Room '{room.name}' is inactive")

        if not is_reasonable_date(attendance_data.session_date):
            raise ValidationException("Invalid session date")

        present = list(dict.fromkeys(attendance_data.present_member_ids))
        absent = list(dict.fromkeys(attendance_data.absent_member_ids))

        if not present and not absent:
            raise ValidationException("Mark at least one member")

        overlap = set(present) & set(absent)
        if overlap:
            raise ValidationException(
                f"Members marked both present and absent: {sorted(overlap)}"
            )

        known = self.member_repo.get_ids_in_church(present + absent, context.church.id)
        unknown = set(present + absent) - known
        if unknown:
            raise ValidationException(f"Unknown members: {sorted(unknown)}")

        session = AttendanceSession(
            church_id=context.church.id,
            room_id=room.id,
            room_name=room.name,
            session_date=attendance_data.session_date,
            present_member_ids=present,
            absent_member_ids=absent,
            total_present=len(present),
            total_absent=len(absent),
            finalized=True,
        )
        session = self.attendance_repo.create_session(session)
        logger.info(
            "attendance_finalized",
            church_id=context.church.id,
            room_id=room.id,
            session_date=session.session_date.isoformat(),
            present=session.total_present,
            absent=session.total_absent,
        )
        return session

    def list_sessions(
        self,
        context: TenantContext,
        room_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceSession]:
        return self.attendance_repo.get_sessions(context.church.id, room_id, start_date, end_date)

    def get_session(self, session_id: int, context: TenantContext) -> AttendanceSession:
        session = self.attendance_repo.get_session(session_id, context.church.id)
        if not session:
            raise NotFoundException(f"Attendance session {session_id} not found")
        return session

    def register_visitor(self, visitor_data: VisitorCreate, context: TenantContext) -> Visitor:
        """
        Log a visitor for a room (or the whole church) on a date.

        Raises:
            NotFoundException: Room not in this church
            ValidationException: Implausible date
        """
        if not is_reasonable_date(visitor_data.session_date):
            raise ValidationException("Invalid session date")

        room_name = None
        if visitor_data.room_id is not None:
            room_name = self._get_room(visitor_data.room_id, context).name

        visitor = Visitor(
            church_id=context.church.id,
            room_id=visitor_data.room_id,
            room_name=room_name,
            session_date=visitor_data.session_date,
            name=normalize_name(visitor_data.name),
            address=visitor_data.address,
            phone=format_phone(visitor_data.phone) if visitor_data.phone else None,
        )
        return self.attendance_repo.create_visitor(visitor)

    def list_visitors(
        self,
        context: TenantContext,
        room_id: Optional[int] = None,
        session_date: Optional[date] = None,
    ) -> list[Visitor]:
        return self.attendance_repo.get_visitors(context.church.id, room_id, session_date)
