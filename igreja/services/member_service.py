from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from igreja.core.exceptions import NotFoundException, ValidationException
from igreja.core.validators import (
    calculate_age_group,
    format_cpf,
    format_phone,
    is_reasonable_date,
    is_valid_cpf,
    normalize_name,
)
from igreja.models.member import Member, MemberStatus
from igreja.models.tenant_context import TenantContext
from igreja.repositories.member_repository import MemberRepository
from igreja.repositories.room_repository import RoomRepository
from igreja.schemas.member_schemas import MemberCreate, MemberUpdate

DEFAULT_AGE_GROUP = "Adulto"
DATE_FIELDS = ("birth_date", "baptism_date", "join_date")


class MemberService:
    """Service layer for the member roster"""

    def __init__(self, db: Session):
        self.db = db
        self.member_repo = MemberRepository(db)
        self.room_repo = RoomRepository(db)

    def _clean(self, data: dict, church_id: int, today: Optional[date] = None) -> dict:
        """
        Validate and normalize member fields in place.

        Raises:
            ValidationException: Bad CPF, implausible dates or foreign room
        """
        if data.get("full_name"):
            data["full_name"] = normalize_name(data["full_name"])

        if data.get("cpf"):
            if not is_valid_cpf(data["cpf"]):
                raise ValidationException("Invalid CPF")
            data["cpf"] = format_cpf(data["cpf"])

        if data.get("phone"):
            data["phone"] = format_phone(data["phone"])

        if data.get("email"):
            data["email"] = data["email"].strip().lower()

        for field in DATE_FIELDS:
            value = data.get(field)
            if value is not None and not is_reasonable_date(value, today):
                raise ValidationException(f"Invalid {field.replace('_', ' ')}")

        if data.get("birth_date"):
            data["age_group"] = calculate_age_group(data["birth_date"], today)

        if data.get("room_id") is not None:
            if not self.room_repo.get_by_id_and_church(data["room_id"], church_id):
                raise NotFoundException(f"Room {data['room_id']} not found")

        return data

    def create_member(self, member_data: MemberCreate, context: TenantContext) -> Member:
        """
        Add a member to the church roster.

        Args:
            member_data: Member form
            context: Tenant context

        Returns:
            Created member

        Raises:
            ValidationException: Invalid CPF or dates
            NotFoundException: Room not in this church
        """
        data = self._clean(member_data.model_dump(), context.church.id)
        data.setdefault("age_group", DEFAULT_AGE_GROUP)
        member = Member(church_id=context.church.id, **data)
        return self.member_repo.create(member)

    def get_member(self, member_id: int, context: TenantContext) -> Member:
        member = self.member_repo.get_by_id_and_church(member_id, context.church.id)
        if not member:
            raise NotFoundException(f"Member {member_id} not found")
        return member

    def list_members(
        self,
        context: TenantContext,
        search: Optional[str] = None,
        status: Optional[MemberStatus] = None,
        room_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Member], int]:
        return self.member_repo.get_with_filters(
            context.church.id, search, status, room_id, limit, offset
        )

    def update_member(
        self, member_id: int, member_update: MemberUpdate, context: TenantContext
    ) -> Member:
        """
        Update a member; only fields present in the request change.

        Raises:
            NotFoundException: Member or room not in this church
            ValidationException: Invalid CPF or dates
        """
        member = self.get_member(member_id, context)
        data = self._clean(member_update.model_dump(exclude_unset=True), context.church.id)

        for field, value in data.items():
            if field in ("full_name", "status") and value is None:
                continue
            setattr(member, field, value)

        return self.member_repo.update(member)

    def delete_member(self, member_id: int, context: TenantContext) -> None:
        member = self.get_member(member_id, context)
        self.member_repo.delete(member)
