from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from igreja.database import get_db
from igreja.dependencies import require_module
from igreja.models.role import Module, UserRole
from igreja.models.tenant_context import TenantContext
from igreja.schemas.auth_schemas import MessageResponse
from igreja.schemas.church_schemas import ChurchResponse, ChurchUpdate
from igreja.schemas.permission_schemas import (
    PermissionMatrixResponse,
    PermissionUpdate,
    RolePermissionResponse,
)
from igreja.schemas.room_schemas import RoomCreate, RoomResponse, RoomUpdate
from igreja.schemas.user_schemas import ProfileResponse, UserCreate, UserUpdate
from igreja.services.church_service import ChurchService
from igreja.services.permission_service import PermissionService
from igreja.services.room_service import RoomService
from igreja.services.user_service import UserService

router = APIRouter()

settings_context = require_module(Module.SETTINGS)


@router.get("/church", response_model=ChurchResponse)
async def get_church(context: TenantContext = Depends(settings_context)):
    """Church details"""
    return context.church


@router.patch("/church", response_model=ChurchResponse)
async def update_church(
    church_update: ChurchUpdate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """
    Update church details.

    - **Requires ADMIN**
    - CNPJ check digits are validated
    """
    return ChurchService(db).update_church(church_update, context)


@router.get("/users", response_model=list[ProfileResponse])
async def list_users(
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    return UserService(db).list_users(context)


@router.post("/users", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """
    Create a user with a password, skipping email verification.

    - **Requires ADMIN**
    - super_admin cannot be assigned
    """
    return UserService(db).create_user(user_data, context)


@router.patch("/users/{profile_id}", response_model=ProfileResponse)
async def update_user(
    profile_id: int,
    user_update: UserUpdate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    return UserService(db).update_user(profile_id, user_update, context)


@router.delete("/users/{profile_id}", response_model=MessageResponse)
async def delete_user(
    profile_id: int,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """
    Delete a user and their credential.

    - **Requires ADMIN**
    - Cannot delete yourself
    """
    UserService(db).delete_user(profile_id, context)
    return {"message": f"User {profile_id} deleted"}


@router.get("/rooms", response_model=list[RoomResponse])
async def list_rooms(
    active_only: bool = False,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    return RoomService(db).list_rooms(context, active_only)


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    room_data: RoomCreate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    return RoomService(db).create_room(room_data, context)


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: int,
    room_update: RoomUpdate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """Rename a room, change its age group or toggle it active"""
    return RoomService(db).update_room(room_id, room_update, context)


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_room(
    room_id: int,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """
    Delete a room.

    Fails with 400 while active members are assigned; the message names
    the count and the room is kept.
    """
    RoomService(db).delete_room(room_id, context)


@router.get("/permissions", response_model=PermissionMatrixResponse)
async def list_permissions(
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """Module flags of every editable role"""
    return {"permissions": PermissionService(db).list_permissions(context)}


@router.put("/permissions/{role}", response_model=RolePermissionResponse)
async def update_permission(
    role: UserRole,
    permission_update: PermissionUpdate,
    context: TenantContext = Depends(settings_context),
    db: Session = Depends(get_db),
):
    """
    Replace the module flags of a role.

    - **Requires ADMIN**
    - Omitted modules become false
    - The admin role always keeps 'configuracoes'
    """
    service = PermissionService(db)
    matrix = service.update_permission(role, permission_update.modules, context)
    row = next(p for p in service.list_permissions(context) if p["role"] == role)
    return {"role": role, "label": row["label"], "modules": matrix.flags_for(role)}
