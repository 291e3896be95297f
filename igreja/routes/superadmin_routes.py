from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_super_admin
from igreja.models.session import AuthSession
from igreja.schemas.church_schemas import (
    ChurchResponse,
    ChurchStatusUpdate,
    ChurchSummary,
    PlatformStats,
)
from igreja.services.church_service import ChurchService

router = APIRouter()


@router.get("/churches", response_model=list[ChurchSummary])
async def list_churches(
    search: Optional[str] = Query(None, max_length=100),
    session: AuthSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """All churches with member counts"""
    return ChurchService(db).list_churches(session, search)


@router.get("/stats", response_model=PlatformStats)
async def platform_stats(
    session: AuthSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    return ChurchService(db).platform_stats(session)


@router.patch("/churches/{church_id}/status", response_model=ChurchResponse)
async def set_church_status(
    church_id: int,
    status_update: ChurchStatusUpdate,
    session: AuthSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    Activate or deactivate a church.

    Users of a deactivated church are shown the inactive interstitial until
    the church is reactivated.
    """
    return ChurchService(db).set_church_status(church_id, status_update.is_active, session)


@router.delete("/churches/{church_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_church(
    church_id: int,
    session: AuthSession = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    Permanently delete a church with all its data and user credentials.

    WARNING: irreversible; prefer deactivation.
    """
    ChurchService(db).delete_church(church_id, session)
