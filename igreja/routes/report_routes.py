from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_module
from igreja.models.role import Module
from igreja.models.tenant_context import TenantContext
from igreja.schemas.member_schemas import MemberResponse
from igreja.schemas.report_schemas import AttendanceReport, DashboardStats, ReportPeriod
from igreja.services.report_service import ReportService

router = APIRouter()


@router.get("/relatorios/attendance", response_model=AttendanceReport)
async def attendance_report(
    period: ReportPeriod = ReportPeriod.SIX_MONTHS,
    room_id: Optional[int] = None,
    context: TenantContext = Depends(require_module(Module.REPORTS)),
    db: Session = Depends(get_db),
):
    """
    Attendance analytics.

    - **period**: 1m, 3m, 6m, 12m or all
    - **room_id**: restrict to one room
    """
    return ReportService(db).attendance_report(context, period, room_id)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    context: TenantContext = Depends(require_module(Module.DASHBOARD)),
    db: Session = Depends(get_db),
):
    """Headline numbers: members, last call, visitors today, finances, birthdays"""
    stats = ReportService(db).dashboard(context)
    stats["birthdays"] = [MemberResponse.model_validate(m) for m in stats["birthdays"]]
    return stats
