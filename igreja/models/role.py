"""Role and module enums for role-based access control."""

from enum import Enum as PyEnum


class UserRole(str, PyEnum):
    """
    Principal roles.

    SUPER_ADMIN is the tenant-less platform operator; it sees every church
    and is never stored in a church's permission matrix. The other roles
    belong to exactly one church and are gated module by module.
    """

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    PASTOR = "pastor"
    SECRETARY = "secretary"
    TREASURER = "treasurer"


# Roles that live inside a church and appear in its permission matrix
TENANT_ROLES: tuple[UserRole, ...] = (
    UserRole.ADMIN,
    UserRole.PASTOR,
    UserRole.SECRETARY,
    UserRole.TREASURER,
)

ROLE_LABELS: dict[UserRole, str] = {
    UserRole.SUPER_ADMIN: "Super Admin",
    UserRole.ADMIN: "Administrador",
    UserRole.PASTOR: "Pastor",
    UserRole.SECRETARY: "Secretário(a)",
    UserRole.TREASURER: "Tesoureiro(a)",
}


class Module(str, PyEnum):
    """Functional areas of a church workspace, addressed as /<slug>/<module>"""

    DASHBOARD = "dashboard"
    MEMBERS = "membros"
    ATTENDANCE = "chamada"
    REPORTS = "relatorios"
    FINANCIAL = "financeiro"
    SETTINGS = "configuracoes"

    @classmethod
    def from_key(cls, key: str | None) -> "Module | None":
        """Return the module for a URL segment, or None when unknown"""
        try:
            return cls(key)
        except ValueError:
            return None


class PlanType(str, PyEnum):
    FREE = "free"
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"
