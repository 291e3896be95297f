from sqlalchemy.orm import Session
from igreja.models.profile import Profile


class ProfileRepository:
    """Repository for Profile model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_auth_id(self, auth_user_id: str) -> Profile | None:
        """Get profile by auth_user_id (the token's 'sub' claim)"""
        return self.db.query(Profile).filter(Profile.auth_user_id == auth_user_id).first()

    def get_by_id(self, profile_id: int) -> Profile | None:
        """Get profile by internal ID"""
        return self.db.query(Profile).filter(Profile.id == profile_id).first()

    def get_by_id_and_church(self, profile_id: int, church_id: int) -> Profile | None:
        """
        Get profile ensuring it belongs to the church (multi-tenant safety).

        Returns None if profile doesn't exist or belongs to another church.
        """
        return (
            self.db.query(Profile)
            .filter(Profile.id == profile_id, Profile.church_id == church_id)
            .first()
        )

    def get_by_church(self, church_id: int) -> list[Profile]:
        """Get all profiles of a church"""
        return (
            self.db.query(Profile)
            .filter(Profile.church_id == church_id)
            .order_by(Profile.name)
            .all()
        )

    def add(self, profile: Profile) -> Profile:
        """Stage a profile without committing (for atomic operations)"""
        self.db.add(profile)
        self.db.flush()
        return profile

    def update(self, profile: Profile) -> Profile:
        """Update existing profile"""
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def delete(self, profile: Profile) -> None:
        """Stage profile deletion; caller commits"""
        self.db.delete(profile)
        self.db.flush()
