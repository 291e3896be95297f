"""Email/password authentication provider.

Owns credentials and token issuance; knows nothing about churches or
profiles. The application maps the issued auth_user_id to a Profile.
"""

import uuid
from datetime import datetime, UTC

import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import (
    InvalidCredentialsException,
    UnauthorizedException,
    ValidationException,
)
from igreja.core.security import (
    IssuedToken,
    create_access_token,
    decode_jwt,
    hash_password,
    verify_password,
)
from igreja.models.auth_credential import AuthCredential
from igreja.repositories.credential_repository import CredentialRepository

logger = structlog.get_logger(__name__)

MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _naive_utc(value: datetime) -> datetime:
    return value.astimezone(UTC).replace(tzinfo=None)


def check_password_strength(password: str) -> None:
    """
    Reject passwords bcrypt cannot hash faithfully.

    Raises:
        ValidationException: Too short, or longer than 72 bytes once encoded
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must have at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationException(f"Password must have at most {MAX_PASSWORD_BYTES} bytes")


class AuthProvider:
    """Credential store plus signed, revocable access tokens"""

    def __init__(self, db: Session):
        self.db = db
        self.credential_repo = CredentialRepository(db)

    def sign_up(self, email: str, password: str) -> AuthCredential:
        """
        Stage a new credential (flushed, not committed).

        Raises:
            ValidationException: If the email is taken or the password too short
                or too long
        """
        check_password_strength(password)
        if self.credential_repo.get_by_email(email):
            raise ValidationException(f"Email {email} is already registered")

        credential = AuthCredential(
            auth_user_id=str(uuid.uuid4()),
            email=email.strip().lower(),
            password_hash=hash_password(password),
        )
        return self.credential_repo.add(credential)

    def sign_in(self, email: str, password: str) -> IssuedToken:
        """
        Verify email/password and issue an access token.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password
        """
        credential = self.credential_repo.get_by_email(email)
        if credential is None or not verify_password(password, credential.password_hash):
            logger.info("sign_in_failed", email=email)
            raise InvalidCredentialsException("Invalid email or password")
        return create_access_token(credential.auth_user_id)

    def verify(self, token: str) -> dict:
        """
        Decode a bearer token and reject it if it was signed out.

        Returns:
            Token claims ('sub', 'exp', 'jti')

        Raises:
            UnauthorizedException: Invalid, expired or revoked token
        """
        payload = decode_jwt(token)
        jti = payload.get("jti")
        if jti is None:
            raise UnauthorizedException("Token missing identifier")
        if self.credential_repo.is_revoked(jti):
            raise UnauthorizedException("Token has been revoked")
        return payload

    def revoke(self, jti: str, auth_user_id: str, expires_at: datetime) -> None:
        """Sign a token out; later verify() calls fail"""
        if self.credential_repo.is_revoked(jti):
            return
        self.credential_repo.revoke(jti, auth_user_id, _naive_utc(expires_at))
        logger.info("token_revoked", auth_user_id=auth_user_id, jti=jti)

    def revoke_issued(self, issued: IssuedToken) -> None:
        self.revoke(issued.jti, issued.auth_user_id, issued.expires_at)

    def revoke_claims(self, claims: dict) -> None:
        expires_at = datetime.fromtimestamp(claims["exp"], UTC)
        self.revoke(claims["jti"], claims["sub"], expires_at)

    def change_password(self, auth_user_id: str, current_password: str, new_password: str) -> None:
        """
        Replace a credential's password after checking the current one.

        Raises:
            InvalidCredentialsException: Current password does not match
            ValidationException: New password too short or too long
        """
        credential = self.credential_repo.get_by_auth_id(auth_user_id)
        if credential is None or not verify_password(current_password, credential.password_hash):
            raise InvalidCredentialsException("Current password is incorrect")
        check_password_strength(new_password)
        credential.password_hash = hash_password(new_password)
        self.db.commit()
        logger.info("password_changed", auth_user_id=auth_user_id)

    def purge_revocations(self) -> int:
        return self.credential_repo.purge_expired(_naive_utc(datetime.now(UTC)))
