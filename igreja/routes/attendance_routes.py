from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_module
from igreja.models.role import Module
from igreja.models.tenant_context import TenantContext
from igreja.schemas.attendance_schemas import (
    AttendanceCreate,
    AttendanceResponse,
    VisitorCreate,
    VisitorResponse,
)
from igreja.services.attendance_service import AttendanceService

router = APIRouter()

attendance_context = require_module(Module.ATTENDANCE)


@router.post("/sessions", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
async def finalize_session(
    attendance_data: AttendanceCreate,
    context: TenantContext = Depends(attendance_context),
    db: Session = Depends(get_db),
):
    """
    Finalize an attendance call for a room.

    - Room must be active
    - A member cannot be both present and absent
    - Totals are computed from the id lists
    """
    return AttendanceService(db).finalize_session(attendance_data, context)


@router.get("/sessions", response_model=list[AttendanceResponse])
async def list_sessions(
    room_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    context: TenantContext = Depends(attendance_context),
    db: Session = Depends(get_db),
):
    """Attendance history, newest first"""
    return AttendanceService(db).list_sessions(context, room_id, start_date, end_date)


@router.get("/sessions/{session_id}", response_model=AttendanceResponse)
async def get_session(
    session_id: int,
    context: TenantContext = Depends(attendance_context),
    db: Session = Depends(get_db),
):
    return AttendanceService(db).get_session(session_id, context)


@router.post("/visitors", response_model=VisitorResponse, status_code=status.HTTP_201_CREATED)
async def register_visitor(
    visitor_data: VisitorCreate,
    context: TenantContext = Depends(attendance_context),
    db: Session = Depends(get_db),
):
    return AttendanceService(db).register_visitor(visitor_data, context)


@router.get("/visitors", response_model=list[VisitorResponse])
async def list_visitors(
    room_id: Optional[int] = None,
    session_date: Optional[date] = None,
    context: TenantContext = Depends(attendance_context),
    db: Session = Depends(get_db),
):
    return AttendanceService(db).list_visitors(context, room_id, session_date)
