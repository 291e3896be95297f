import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-igreja")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import uuid  # noqa: E402
from datetime import datetime, timedelta, UTC  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from jose import jwt  # noqa: E402

from igreja.database import get_db  # noqa: E402
from igreja.models.base import Base  # noqa: E402
from igreja.config import settings  # noqa: E402
from igreja.core.security import hash_password  # noqa: E402
# Import all model classes to ensure they're registered with SQLAlchemy
from igreja.models.attendance_session import AttendanceSession  # noqa: E402,F401
from igreja.models.auth_credential import AuthCredential, RevokedToken  # noqa: E402,F401
from igreja.models.church import Church  # noqa: E402
from igreja.models.financial_transaction import FinancialTransaction  # noqa: E402,F401
from igreja.models.member import Member  # noqa: E402,F401
from igreja.models.profile import Profile  # noqa: E402
from igreja.models.role import UserRole  # noqa: E402
from igreja.models.role_permission import RolePermission  # noqa: E402,F401
from igreja.models.room import Room  # noqa: E402,F401
from igreja.models.visitor import Visitor  # noqa: E402,F401
# Import FastAPI app AFTER model imports
from igreja.main import app  # noqa: E402

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "senha123"
# Hashed once; bcrypt is deliberately slow
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_church(db, slug: str = "acme", name: str | None = None, is_active: bool = True) -> Church:
    """Persist a church (no stored permission rows: defaults apply)"""
    church = Church(
        name=name or f"Igreja {slug.title()}",
        slug=slug,
        admin_name="Admin",
        admin_email=f"admin@{slug}.org",
        is_active=is_active,
    )
    db.add(church)
    db.commit()
    db.refresh(church)
    return church


def make_principal(
    db,
    church: Church | None,
    role: UserRole = UserRole.ADMIN,
    email: str | None = None,
    name: str | None = None,
    is_active: bool = True,
    with_profile: bool = True,
) -> Profile | AuthCredential:
    """
    Persist a credential (password TEST_PASSWORD) and its profile.

    With with_profile=False only the credential is created (orphan) and
    returned.
    """
    auth_user_id = str(uuid.uuid4())
    slug = church.slug if church else "platform"
    email = email or f"{role.value}@{slug}.org"
    credential = AuthCredential(auth_user_id=auth_user_id, email=email, password_hash=TEST_PASSWORD_HASH)
    db.add(credential)
    if not with_profile:
        db.commit()
        return credential

    profile = Profile(
        auth_user_id=auth_user_id,
        church_id=church.id if church else None,
        name=name or f"{role.value.title()} {slug}",
        email=email,
        role=role,
        is_active=is_active,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def create_test_token(auth_user_id: str = "test-user-123", expired: bool = False) -> str:
    """
    Generate valid JWT token for testing.

    Args:
        auth_user_id: Credential ID to embed in 'sub' claim
        expired: If True, create expired token

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {"sub": auth_user_id, "exp": exp, "iat": datetime.now(UTC), "jti": uuid.uuid4().hex}

    token = jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")
    return token


def headers_for(profile: Profile) -> dict:
    """Authorization headers for requests made by profile"""
    return {"Authorization": f"Bearer {create_test_token(profile.auth_user_id)}"}


@pytest.fixture
def church(db_session):
    """Church 'acme'"""
    return make_church(db_session, "acme")


@pytest.fixture
def other_church(db_session):
    """Church 'beta'"""
    return make_church(db_session, "beta")


@pytest.fixture
def admin(db_session, church):
    return make_principal(db_session, church, UserRole.ADMIN)


@pytest.fixture
def pastor(db_session, church):
    return make_principal(db_session, church, UserRole.PASTOR)


@pytest.fixture
def secretary(db_session, church):
    return make_principal(db_session, church, UserRole.SECRETARY)


@pytest.fixture
def treasurer(db_session, church):
    return make_principal(db_session, church, UserRole.TREASURER)


@pytest.fixture
def other_admin(db_session, other_church):
    """Administrator of church 'beta'"""
    return make_principal(db_session, other_church, UserRole.ADMIN)


@pytest.fixture
def super_admin(db_session):
    return make_principal(db_session, None, UserRole.SUPER_ADMIN, email="root@platform.org")


@pytest.fixture
def admin_headers(admin):
    return headers_for(admin)


@pytest.fixture
def pastor_headers(pastor):
    return headers_for(pastor)


@pytest.fixture
def secretary_headers(secretary):
    return headers_for(secretary)


@pytest.fixture
def treasurer_headers(treasurer):
    return headers_for(treasurer)


@pytest.fixture
def other_admin_headers(other_admin):
    return headers_for(other_admin)


@pytest.fixture
def super_admin_headers(super_admin):
    return headers_for(super_admin)
