from typing import Optional
from sqlalchemy.orm import Session
from igreja.models.member import Member, MemberStatus


class MemberRepository:
    """Repository for Member model operations with multi-tenant support"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_church(self, church_id: int) -> list[Member]:
        """Get all members of a church"""
        return (
            self.db.query(Member)
            .filter(Member.church_id == church_id)
            .order_by(Member.full_name)
            .all()
        )

    def get_by_id_and_church(self, member_id: int, church_id: int) -> Member | None:
        """
        Get member ensuring it belongs to church (multi-tenant safety).

        Returns None if member doesn't exist or belongs to another church.
        """
        return (
            self.db.query(Member)
            .filter(Member.id == member_id, Member.church_id == church_id)
            .first()
        )

    def get_ids_in_church(self, member_ids: list[int], church_id: int) -> set[int]:
        """Subset of member_ids that belong to the church"""
        if not member_ids:
            return set()
        rows = (
            self.db.query(Member.id)
            .filter(Member.church_id == church_id, Member.id.in_(member_ids))
            .all()
        )
        return {row[0] for row in rows}

    def get_with_filters(
        self,
        church_id: int,
        search: Optional[str] = None,
        status: Optional[MemberStatus] = None,
        room_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Member], int]:
        """
        Get members with filters, ensuring multi-tenant isolation.

        Args:
            church_id: Church ID for isolation
            search: Optional case-insensitive partial match on name, email or CPF
            status: Optional status filter
            room_id: Optional room filter
            limit: Maximum number of results
            offset: Pagination offset

        Returns:
            Tuple of (members list, total count)
        """
        query = self.db.query(Member).filter(Member.church_id == church_id)

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                Member.full_name.ilike(pattern)
                | Member.email.ilike(pattern)
                | Member.cpf.ilike(pattern)
            )

        if status is not None:
            query = query.filter(Member.status == status)

        if room_id is not None:
            query = query.filter(Member.room_id == room_id)

        total = query.count()
        members = query.order_by(Member.full_name).limit(limit).offset(offset).all()
        return members, total

    def create(self, member: Member) -> Member:
        """Create new member"""
        self.db.add(member)
        self.db.commit()
        self.db.refresh(member)
        return member

    def update(self, member: Member) -> Member:
        """Update existing member"""
        self.db.commit()
        self.db.refresh(member)
        return member

    def delete(self, member: Member) -> None:
        """Delete member (transactions keep member_name)"""
        self.db.delete(member)
        self.db.commit()
