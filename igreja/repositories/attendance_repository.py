from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from igreja.models.attendance_session import AttendanceSession
from igreja.models.visitor import Visitor


class AttendanceRepository:
    """Repository for attendance sessions and the visitors logged with them"""

    def __init__(self, db: Session):
        self.db = db

    def create_session(self, session: AttendanceSession) -> AttendanceSession:
        """Create a new attendance session"""
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_session(self, session_id: int, church_id: int) -> Optional[AttendanceSession]:
        """Get attendance session ensuring it belongs to the church"""
        return (
            self.db.query(AttendanceSession)
            .filter(AttendanceSession.id == session_id, AttendanceSession.church_id == church_id)
            .first()
        )

    def get_sessions(
        self,
        church_id: int,
        room_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[AttendanceSession]:
        """
        Get attendance sessions of a church, newest first.

        Args:
            church_id: Church ID for isolation
            room_id: Optional room filter
            start_date: Optional inclusive lower bound on session_date
            end_date: Optional inclusive upper bound on session_date
        """
        query = self.db.query(AttendanceSession).filter(AttendanceSession.church_id == church_id)
        if room_id is not None:
            query = query.filter(AttendanceSession.room_id == room_id)
        if start_date is not None:
            query = query.filter(AttendanceSession.session_date >= start_date)
        if end_date is not None:
            query = query.filter(AttendanceSession.session_date <= end_date)
        return query.order_by(AttendanceSession.session_date.desc(), AttendanceSession.id.desc()).all()

    def get_latest_session(self, church_id: int) -> Optional[AttendanceSession]:
        return (
            self.db.query(AttendanceSession)
            .filter(AttendanceSession.church_id == church_id)
            .order_by(AttendanceSession.session_date.desc(), AttendanceSession.id.desc())
            .first()
        )

    def create_visitor(self, visitor: Visitor) -> Visitor:
        """Create a new visitor"""
        self.db.add(visitor)
        self.db.commit()
        self.db.refresh(visitor)
        return visitor

    def get_visitors(
        self,
        church_id: int,
        room_id: Optional[int] = None,
        session_date: Optional[date] = None,
    ) -> list[Visitor]:
        """Visitors of a church, optionally for one room and/or date"""
        query = self.db.query(Visitor).filter(Visitor.church_id == church_id)
        if room_id is not None:
            query = query.filter(Visitor.room_id == room_id)
        if session_date is not None:
            query = query.filter(Visitor.session_date == session_date)
        return query.order_by(Visitor.session_date.desc(), Visitor.id.desc()).all()
