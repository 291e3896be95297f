import calendar
from collections import defaultdict
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from igreja.models.financial_transaction import TransactionType
from igreja.models.member import MemberStatus
from igreja.models.tenant_context import TenantContext
from igreja.repositories.attendance_repository import AttendanceRepository
from igreja.repositories.member_repository import MemberRepository
from igreja.repositories.transaction_repository import TransactionRepository
from igreja.schemas.report_schemas import ReportPeriod

PERIOD_MONTHS = {
    ReportPeriod.ONE_MONTH: 1,
    ReportPeriod.THREE_MONTHS: 3,
    ReportPeriod.SIX_MONTHS: 6,
    ReportPeriod.TWELVE_MONTHS: 12,
}
RANKING_SIZE = 10


def months_ago(today: date, months: int) -> date:
    """Same day n calendar months earlier, clamped to the month's last day"""
    month_index = today.year * 12 + today.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(today.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def period_start(period: ReportPeriod, today: Optional[date] = None) -> Optional[date]:
    if period == ReportPeriod.ALL:
        return None
    return months_ago(today or date.today(), PERIOD_MONTHS[period])


def _rate(present: int, absent: int) -> float:
    total = present + absent
    return round(present * 100 / total, 1) if total else 0.0


class ReportService:
    """Read-only analytics over attendance, members and finances"""

    def __init__(self, db: Session):
        self.db = db
        self.attendance_repo = AttendanceRepository(db)
        self.member_repo = MemberRepository(db)
        self.transaction_repo = TransactionRepository(db)

    def attendance_report(
        self,
        context: TenantContext,
        period: ReportPeriod = ReportPeriod.SIX_MONTHS,
        room_id: Optional[int] = None,
        today: Optional[date] = None,
    ) -> dict:
        """
        Attendance evolution, room comparison and member ranking.

        Args:
            context: Tenant context
            period: Window ending today ('all' for no lower bound)
            room_id: Optional room filter
            today: Reference date (defaults to date.today())

        Returns:
            Dict matching AttendanceReport
        """
        start = period_start(period, today)
        sessions = self.attendance_repo.get_sessions(context.church.id, room_id, start_date=start)

        monthly: dict[str, list[int]] = defaultdict(lambda: [0, 0])
        by_room: dict[Optional[int], dict] = {}
        per_member: dict[int, list[int]] = defaultdict(lambda: [0, 0])

        for session in sessions:
            month = session.session_date.strftime("%Y-%m")
            monthly[month][0] += session.total_present
            monthly[month][1] += session.total_absent

            room = by_room.setdefault(
                session.room_id,
                {
                    "room_id": session.room_id,
                    "room_name": session.room_name or "Sem sala",
                    "sessions": 0,
                    "present": 0,
                    "absent": 0,
                },
            )
            room["sessions"] += 1
            room["present"] += session.total_present
            room["absent"] += session.total_absent

            for member_id in session.present_member_ids:
                per_member[member_id][0] += 1
            for member_id in session.absent_member_ids:
                per_member[member_id][1] += 1

        names = {member.id: member.full_name for member in self.member_repo.get_by_church(context.church.id)}
        ranking = [
            {
                "member_id": member_id,
                "full_name": names[member_id],
                "present": present,
                "absent": absent,
                "rate": _rate(present, absent),
            }
            for member_id, (present, absent) in per_member.items()
            if member_id in names
        ]
        ranking.sort(key=lambda row: (-row["rate"], -row["present"], row["full_name"]))

        total_present = sum(session.total_present for session in sessions)
        total_absent = sum(session.total_absent for session in sessions)

        for room in by_room.values():
            room["rate"] = _rate(room["present"], room["absent"])

        return {
            "period": period,
            "start_date": start,
            "total_sessions": len(sessions),
            "total_present": total_present,
            "total_absent": total_absent,
            "attendance_rate": _rate(total_present, total_absent),
            "monthly": [
                {"month": month, "present": present, "absent": absent, "rate": _rate(present, absent)}
                for month, (present, absent) in sorted(monthly.items())
            ],
            "by_room": sorted(by_room.values(), key=lambda row: row["room_name"]),
            "ranking": ranking[:RANKING_SIZE],
        }

    def dashboard(self, context: TenantContext, today: Optional[date] = None) -> dict:
        """Headline numbers for the church dashboard"""
        today = today or date.today()
        church_id = context.church.id

        members = self.member_repo.get_by_church(church_id)
        birthdays = sorted(
            (m for m in members if m.birth_date and m.birth_date.month == today.month),
            key=lambda m: m.birth_date.day,
        )

        last_session = self.attendance_repo.get_latest_session(church_id)
        visitors_today = self.attendance_repo.get_visitors(church_id, session_date=today)

        month_start = today.replace(day=1)
        month_totals = self.transaction_repo.sum_by_type(church_id, month_start, today)
        all_totals = self.transaction_repo.sum_by_type(church_id)

        return {
            "total_members": len(members),
            "active_members": sum(1 for m in members if m.status == MemberStatus.ACTIVE),
            "visitors_today": len(visitors_today),
            "last_session_present": last_session.total_present if last_session else 0,
            "last_session_absent": last_session.total_absent if last_session else 0,
            "last_session_date": last_session.session_date if last_session else None,
            "month_income": round(month_totals[TransactionType.INCOME], 2),
            "month_expense": round(month_totals[TransactionType.EXPENSE], 2),
            "balance": round(
                all_totals[TransactionType.INCOME] - all_totals[TransactionType.EXPENSE], 2
            ),
            "birthdays": birthdays,
        }
