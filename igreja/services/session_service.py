import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import (
    CrossTenantAccessException,
    ForbiddenException,
    IgrejaException,
    ProfileNotFoundException,
    TenantInactiveException,
    TenantNotFoundException,
)
from igreja.core.security import IssuedToken
from igreja.models.church import SYSTEM_CHURCH_SLUG, system_church
from igreja.models.permission_matrix import PermissionMatrix
from igreja.models.role import UserRole
from igreja.models.session import AuthSession, TenantWorkspace
from igreja.repositories.attendance_repository import AttendanceRepository
from igreja.repositories.church_repository import ChurchRepository
from igreja.repositories.member_repository import MemberRepository
from igreja.repositories.profile_repository import ProfileRepository
from igreja.repositories.role_permission_repository import RolePermissionRepository
from igreja.repositories.room_repository import RoomRepository
from igreja.repositories.transaction_repository import TransactionRepository
from igreja.services.auth_provider import AuthProvider

logger = structlog.get_logger(__name__)


class SessionService:
    """Turns authentication events into AuthSession snapshots, or fails closed"""

    def __init__(self, db: Session):
        self.db = db
        self.auth = AuthProvider(db)
        self.profile_repo = ProfileRepository(db)
        self.church_repo = ChurchRepository(db)
        self.permission_repo = RolePermissionRepository(db)

    def load_permissions(self, church_id: int) -> PermissionMatrix:
        """Stored matrix of a church; roles without a row keep the defaults"""
        rows = self.permission_repo.get_by_church(church_id)
        return PermissionMatrix.from_rows((row.role, row.modules) for row in rows)

    def resolve_session(self, auth_user_id: str) -> AuthSession:
        """
        Build the session of an authenticated credential.

        Args:
            auth_user_id: Identifier issued by the auth provider

        Returns:
            AuthSession snapshot

        Raises:
            ProfileNotFoundException: Credential has no profile (caller signs out)
            ForbiddenException: Profile deactivated
            TenantNotFoundException: Profile's church no longer exists
            TenantInactiveException: Profile's church is deactivated
        """
        profile = self.profile_repo.get_by_auth_id(auth_user_id)
        if profile is None:
            raise ProfileNotFoundException("User profile not found")

        if not profile.is_active:
            raise ForbiddenException("This user account is deactivated")

        if profile.role == UserRole.SUPER_ADMIN:
            return AuthSession(
                principal=profile,
                church=system_church(profile.email),
                permissions=PermissionMatrix.default(),
                churches=tuple(self.church_repo.get_all()),
            )

        church = self.church_repo.get_by_id(profile.church_id) if profile.church_id else None
        if church is None:
            raise TenantNotFoundException("Church not found")
        if not church.is_active:
            raise TenantInactiveException(
                "This church is inactive. Contact support.",
                redirect_to=f"/{church.slug}/login",
            )

        return AuthSession(
            principal=profile,
            church=church,
            permissions=self.load_permissions(church.id),
        )

    def load_workspace(self, session: AuthSession) -> TenantWorkspace | None:
        """
        Load every tenant-scoped collection of the session's church.

        Returns None for SUPER_ADMIN, whose session carries the church list
        instead.
        """
        if session.is_super_admin:
            return None

        church_id = session.church.id
        attendance_repo = AttendanceRepository(self.db)
        return TenantWorkspace(
            church=session.church,
            permissions=session.permissions,
            profiles=tuple(self.profile_repo.get_by_church(church_id)),
            rooms=tuple(RoomRepository(self.db).get_by_church(church_id)),
            members=tuple(MemberRepository(self.db).get_by_church(church_id)),
            transactions=tuple(TransactionRepository(self.db).get_by_church(church_id)),
            attendance_sessions=tuple(attendance_repo.get_sessions(church_id)),
            visitors=tuple(attendance_repo.get_visitors(church_id)),
        )

    def login(
        self, email: str, password: str, slug: str | None = None
    ) -> tuple[IssuedToken, AuthSession]:
        """
        Authenticate and cross-check the principal against the login page's church.

        With slug 'superadmin' only SUPER_ADMIN may sign in; with a church
        slug the principal must belong to that church. Every rejection
        after the provider issued a token revokes that token.

        Raises:
            InvalidCredentialsException: Wrong email or password
            ProfileNotFoundException: Credential has no profile
            TenantNotFoundException: Unknown slug
            TenantInactiveException: Church deactivated
            CrossTenantAccessException: Principal belongs to another church
        """
        issued = self.auth.sign_in(email, password)
        try:
            self._check_login_target(issued.auth_user_id, (slug or "").strip().lower())
            session = self.resolve_session(issued.auth_user_id)
        except IgrejaException as e:
            self.auth.revoke_issued(issued)
            logger.warning(
                "login_rejected",
                auth_user_id=issued.auth_user_id,
                slug=slug,
                code=e.code,
            )
            raise

        logger.info(
            "login_succeeded",
            profile_id=session.principal.id,
            church=session.church.slug,
            role=session.role.value,
        )
        return issued, session

    def _check_login_target(self, auth_user_id: str, slug: str) -> None:
        profile = self.profile_repo.get_by_auth_id(auth_user_id)
        if profile is None:
            raise ProfileNotFoundException("User profile not found")

        if not slug:
            return

        if slug == SYSTEM_CHURCH_SLUG:
            if profile.role != UserRole.SUPER_ADMIN:
                raise CrossTenantAccessException("Access restricted to platform administrators")
            return

        church = self.church_repo.get_by_slug(slug)
        if church is None:
            raise TenantNotFoundException(f"Church '{slug}' not found")
        if not church.is_active:
            raise TenantInactiveException("This church is inactive. Contact support.")
        if profile.church_id != church.id:
            raise CrossTenantAccessException("This user does not belong to this church")

    def logout(self, claims: dict) -> None:
        """Revoke the presented token and drop expired revocation entries"""
        self.auth.revoke_claims(claims)
        self.auth.purge_revocations()
        logger.info("logout", auth_user_id=claims.get("sub"))

    def session_from_token(self, token: str) -> tuple[dict, AuthSession]:
        """
        Verify a bearer token and resolve its session.

        An orphaned credential (no profile) gets its token revoked.
        """
        claims = self.auth.verify(token)
        try:
            session = self.resolve_session(claims["sub"])
        except ProfileNotFoundException:
            self.auth.revoke_claims(claims)
            raise
        return claims, session
