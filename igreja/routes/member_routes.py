from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_module
from igreja.models.member import MemberStatus
from igreja.models.role import Module
from igreja.models.tenant_context import TenantContext
from igreja.schemas.member_schemas import (
    MemberCreate,
    MemberListResponse,
    MemberResponse,
    MemberUpdate,
)
from igreja.services.member_service import MemberService

router = APIRouter()

members_context = require_module(Module.MEMBERS)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def create_member(
    member_data: MemberCreate,
    context: TenantContext = Depends(members_context),
    db: Session = Depends(get_db),
):
    """
    Add a member to the roster.

    - Name is normalized ("JOÃO DA SILVA" -> "João da Silva")
    - CPF check digits are validated
    - Age group is derived from the birth date
    """
    return MemberService(db).create_member(member_data, context)


@router.get("", response_model=MemberListResponse)
async def list_members(
    search: Optional[str] = Query(None, max_length=100),
    status: Optional[MemberStatus] = None,
    room_id: Optional[int] = None,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    context: TenantContext = Depends(members_context),
    db: Session = Depends(get_db),
):
    """List members with optional search, status and room filters"""
    members, total = MemberService(db).list_members(context, search, status, room_id, limit, offset)
    return {"members": members, "total": total}


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(
    member_id: int,
    context: TenantContext = Depends(members_context),
    db: Session = Depends(get_db),
):
    return MemberService(db).get_member(member_id, context)


@router.patch("/{member_id}", response_model=MemberResponse)
async def update_member(
    member_id: int,
    member_update: MemberUpdate,
    context: TenantContext = Depends(members_context),
    db: Session = Depends(get_db),
):
    return MemberService(db).update_member(member_id, member_update, context)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member(
    member_id: int,
    context: TenantContext = Depends(members_context),
    db: Session = Depends(get_db),
):
    """Delete a member; their transactions keep the stored member name"""
    MemberService(db).delete_member(member_id, context)
