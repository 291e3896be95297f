"""Repository for Church model operations."""

from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from igreja.models.church import Church
from igreja.models.member import Member


class ChurchRepository:
    """Repository for Church model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, church_id: int) -> Church | None:
        """
        Get church by ID.

        Args:
            church_id: Church ID

        Returns:
            Church object or None if not found
        """
        return self.db.query(Church).filter(Church.id == church_id).first()

    def get_by_slug(self, slug: str) -> Church | None:
        """Get church by its URL slug"""
        return self.db.query(Church).filter(Church.slug == slug).first()

    def slug_exists(self, slug: str) -> bool:
        return self.db.query(Church.id).filter(Church.slug == slug).first() is not None

    def get_all(self, search: str | None = None) -> list[Church]:
        """
        Get all churches ordered by name.

        Args:
            search: Optional case-insensitive match on name, slug, admin name or email

        Returns:
            List of Church objects
        """
        query = self.db.query(Church)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Church.name.ilike(pattern),
                    Church.slug.ilike(pattern),
                    Church.admin_name.ilike(pattern),
                    Church.admin_email.ilike(pattern),
                )
            )
        return query.order_by(Church.name).all()

    def member_counts(self) -> dict[int, int]:
        """Number of member rows per church id"""
        rows = (
            self.db.query(Member.church_id, func.count(Member.id))
            .group_by(Member.church_id)
            .all()
        )
        return {church_id: count for church_id, count in rows}

    def add(self, church: Church) -> Church:
        """Stage a new church without committing (for atomic registration)"""
        self.db.add(church)
        self.db.flush()
        return church

    def update(self, church: Church) -> Church:
        """
        Update an existing church.

        Args:
            church: Church object with updated fields

        Returns:
            Updated Church object
        """
        self.db.commit()
        self.db.refresh(church)
        return church

    def delete(self, church: Church) -> None:
        """
        Delete a church.

        WARNING: This will cascade delete all profiles, rooms, members,
        transactions, attendance sessions, visitors and permission rows
        associated with this church.

        Args:
            church: Church object to delete
        """
        self.db.delete(church)
        self.db.commit()
