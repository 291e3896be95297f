from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel
from igreja.schemas.member_schemas import MemberResponse


class ReportPeriod(str, Enum):
    ONE_MONTH = "1m"
    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    TWELVE_MONTHS = "12m"
    ALL = "all"


class MonthlyAttendance(BaseModel):
    month: str
    present: int
    absent: int
    rate: float


class RoomAttendance(BaseModel):
    room_id: Optional[int]
    room_name: str
    sessions: int
    present: int
    absent: int
    rate: float


class MemberFrequency(BaseModel):
    member_id: int
    full_name: str
    present: int
    absent: int
    rate: float


class AttendanceReport(BaseModel):
    """Attendance analytics for a period"""

    period: ReportPeriod
    start_date: Optional[date]
    total_sessions: int
    total_present: int
    total_absent: int
    attendance_rate: float
    monthly: list[MonthlyAttendance]
    by_room: list[RoomAttendance]
    ranking: list[MemberFrequency]


class DashboardStats(BaseModel):
    """Headline numbers for the church dashboard"""

    total_members: int
    active_members: int
    visitors_today: int
    last_session_present: int
    last_session_absent: int
    last_session_date: Optional[date]
    month_income: float
    month_expense: float
    balance: float
    birthdays: list[MemberResponse]
