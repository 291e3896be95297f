"""Tenant context for request authorization."""

from dataclasses import dataclass
from igreja.models.church import Church
from igreja.models.profile import Profile
from igreja.models.role import Module, UserRole
from igreja.models.session import AuthSession


@dataclass(frozen=True)
class TenantContext:
    """
    Church in scope for a tenant-scoped request.

    For regular principals the church is the session's own church (the
    route guard has already rejected any other slug). For SUPER_ADMIN it is
    the church named by the URL slug.

    Attributes:
        session: The resolved AuthSession
        church: The church whose rows the request may read and write
        module: The module the route belongs to
    """

    session: AuthSession
    church: Church
    module: Module

    @property
    def principal(self) -> Profile:
        return self.session.principal

    @property
    def role(self) -> UserRole:
        return self.session.role

    def is_admin(self) -> bool:
        """Check if principal administers the church (SUPER_ADMIN included)."""
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    def __repr__(self) -> str:
        return f"<TenantContext(profile_id={self.principal.id}, church_id={self.church.id}, role={self.role.value})>"
