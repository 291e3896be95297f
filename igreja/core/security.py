import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC

import bcrypt
from jose import JWTError, jwt
from igreja.config import settings
from igreja.core.exceptions import UnauthorizedException

ALGORITHM = "HS256"


@dataclass(frozen=True)
class IssuedToken:
    """Signed access token plus the claims needed to revoke it later"""

    access_token: str
    auth_user_id: str
    jti: str
    expires_at: datetime


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (salt generated per call)"""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash"""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash
        return False


def create_access_token(auth_user_id: str, expires_minutes: int | None = None) -> IssuedToken:
    """
    Sign a new access token for an authenticated credential.

    Args:
        auth_user_id: Credential identifier, stored in the 'sub' claim
        expires_minutes: Lifetime override (defaults to settings)

    Returns:
        IssuedToken with the encoded JWT and its 'jti'
    """
    now = datetime.now(UTC)
    lifetime = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expires_at = now + timedelta(minutes=lifetime)
    jti = uuid.uuid4().hex
    payload = {"sub": auth_user_id, "exp": expires_at, "iat": now, "jti": jti}
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)
    return IssuedToken(access_token=token, auth_user_id=auth_user_id, jti=jti, expires_at=expires_at)


def decode_jwt(token: str) -> dict:
    """
    Decode and validate JWT token using SECRET_KEY.

    Args:
        token: JWT access token from Authorization header

    Returns:
        Decoded token payload with 'sub' (auth_user_id), 'exp', 'jti'

    Raises:
        UnauthorizedException: If token invalid, expired, or malformed
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise UnauthorizedException(f"Invalid token: {str(e)}")

    # jose checks expiration automatically, but only when the claim exists
    if payload.get("exp") is None:
        raise UnauthorizedException("Token missing expiration")

    if payload.get("sub") is None:
        raise UnauthorizedException("Token missing user identifier")

    return payload
