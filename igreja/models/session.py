"""Resolved authentication session."""

from dataclasses import dataclass, field

from igreja.models.attendance_session import AttendanceSession
from igreja.models.church import Church
from igreja.models.financial_transaction import FinancialTransaction
from igreja.models.member import Member
from igreja.models.permission_matrix import PermissionMatrix
from igreja.models.profile import Profile
from igreja.models.role import Module, UserRole
from igreja.models.room import Room
from igreja.models.visitor import Visitor


@dataclass(frozen=True)
class AuthSession:
    """
    Snapshot of an authenticated principal and its resolved church.

    Built by SessionService.resolve_session for every request and never
    mutated afterwards; any change to the underlying rows is picked up by
    resolving again.

    Attributes:
        principal: The Profile behind the token
        church: The principal's church, or the synthetic system church
            for SUPER_ADMIN
        permissions: The church's permission matrix
        churches: Every church (SUPER_ADMIN only, empty otherwise)
    """

    principal: Profile
    church: Church
    permissions: PermissionMatrix
    churches: tuple[Church, ...] = field(default_factory=tuple)

    @property
    def role(self) -> UserRole:
        return self.principal.role

    @property
    def is_super_admin(self) -> bool:
        return self.principal.role == UserRole.SUPER_ADMIN

    def can_access(self, module: Module | None) -> bool:
        return self.permissions.allows(self.principal.role, module)

    def dashboard_path(self) -> str:
        if self.is_super_admin:
            return "/superadmin"
        return f"/{self.church.slug}/dashboard"

    def __repr__(self) -> str:
        return f"<AuthSession(profile_id={self.principal.id}, church={self.church.slug}, role={self.role.value})>"


@dataclass(frozen=True)
class TenantWorkspace:
    """Every tenant-scoped collection of one church, loaded in one pass"""

    church: Church
    permissions: PermissionMatrix
    profiles: tuple[Profile, ...] = ()
    rooms: tuple[Room, ...] = ()
    members: tuple[Member, ...] = ()
    transactions: tuple[FinancialTransaction, ...] = ()
    attendance_sessions: tuple[AttendanceSession, ...] = ()
    visitors: tuple[Visitor, ...] = ()
