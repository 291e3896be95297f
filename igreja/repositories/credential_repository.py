from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session
from igreja.models.auth_credential import AuthCredential, RevokedToken


class CredentialRepository:
    """Repository for the auth provider's credentials and revoked tokens"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> AuthCredential | None:
        """Case-insensitive lookup by login email"""
        return (
            self.db.query(AuthCredential)
            .filter(func.lower(AuthCredential.email) == email.strip().lower())
            .first()
        )

    def get_by_auth_id(self, auth_user_id: str) -> AuthCredential | None:
        return (
            self.db.query(AuthCredential)
            .filter(AuthCredential.auth_user_id == auth_user_id)
            .first()
        )

    def get_by_auth_ids(self, auth_user_ids: list[str]) -> list[AuthCredential]:
        if not auth_user_ids:
            return []
        return (
            self.db.query(AuthCredential)
            .filter(AuthCredential.auth_user_id.in_(auth_user_ids))
            .all()
        )

    def add(self, credential: AuthCredential) -> AuthCredential:
        """Stage a credential without committing (for atomic operations)"""
        self.db.add(credential)
        self.db.flush()
        return credential

    def delete(self, credential: AuthCredential) -> None:
        """Stage credential deletion; caller commits"""
        self.db.delete(credential)
        self.db.flush()

    def is_revoked(self, jti: str) -> bool:
        return self.db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first() is not None

    def revoke(self, jti: str, auth_user_id: str, expires_at: datetime) -> RevokedToken:
        """Record a token id as signed out and commit immediately"""
        revoked = RevokedToken(jti=jti, auth_user_id=auth_user_id, expires_at=expires_at)
        self.db.add(revoked)
        self.db.commit()
        return revoked

    def purge_expired(self, now: datetime) -> int:
        """Drop revocation entries whose tokens have expired anyway"""
        deleted = (
            self.db.query(RevokedToken)
            .filter(RevokedToken.expires_at < now)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
