"""Per-church (role, module) -> allowed table."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from igreja.models.role import Module, TENANT_ROLES, UserRole

DEFAULT_MODULE_FLAGS: dict[UserRole, dict[Module, bool]] = {
    UserRole.ADMIN: {module: True for module in Module},
    UserRole.PASTOR: {
        Module.DASHBOARD: True,
        Module.MEMBERS: True,
        Module.ATTENDANCE: True,
        Module.REPORTS: True,
        Module.FINANCIAL: False,
        Module.SETTINGS: False,
    },
    UserRole.SECRETARY: {
        Module.DASHBOARD: True,
        Module.MEMBERS: True,
        Module.ATTENDANCE: True,
        Module.REPORTS: True,
        Module.FINANCIAL: False,
        Module.SETTINGS: False,
    },
    UserRole.TREASURER: {
        Module.DASHBOARD: True,
        Module.MEMBERS: False,
        Module.ATTENDANCE: False,
        Module.REPORTS: True,
        Module.FINANCIAL: True,
        Module.SETTINGS: False,
    },
}


def sanitize_flags(role: UserRole, flags: Mapping[str, bool]) -> dict[str, bool]:
    """
    Apply the lockout rule to a raw module mapping.

    The admin role always keeps the settings module, whatever the caller
    asked for. Other keys pass through untouched, unknown ones included.
    """
    sanitized = {str(key): bool(value) for key, value in flags.items()}
    if role == UserRole.ADMIN:
        sanitized[Module.SETTINGS.value] = True
    return sanitized


def _parse_flags(role: UserRole, flags: Mapping[str, bool]) -> dict[Module, bool]:
    raw = sanitize_flags(role, flags)
    return {module: raw.get(module.value, False) is True for module in Module}


@dataclass(frozen=True)
class PermissionMatrix:
    """
    Immutable table of module flags for every tenant role.

    Each of the tenant roles has an entry for every Module; a missing flag
    is False. SUPER_ADMIN is not part of the table and is allowed
    everywhere.
    """

    table: Mapping[UserRole, Mapping[Module, bool]] = field(default_factory=dict)

    def __post_init__(self):
        full = {}
        for role in TENANT_ROLES:
            source = self.table.get(role, DEFAULT_MODULE_FLAGS[role])
            flags = {module: bool(source.get(module, False)) for module in Module}
            if role == UserRole.ADMIN:
                flags[Module.SETTINGS] = True
            full[role] = MappingProxyType(flags)
        object.__setattr__(self, "table", MappingProxyType(full))

    @classmethod
    def default(cls) -> "PermissionMatrix":
        return cls({})

    @classmethod
    def from_rows(cls, rows: Iterable[tuple[UserRole, Mapping[str, bool]]]) -> "PermissionMatrix":
        """
        Build the matrix from stored (role, modules) pairs.

        Roles without a stored row keep the default flags. Rows for roles
        outside the tenant roles are ignored.
        """
        table = {}
        for role, modules in rows:
            if role in TENANT_ROLES:
                table[role] = _parse_flags(role, modules or {})
        return cls(table)

    def allows(self, role: UserRole, module: Module | None) -> bool:
        if role == UserRole.SUPER_ADMIN:
            return True
        if module is None or role not in self.table:
            return False
        return self.table[role][module]

    def flags_for(self, role: UserRole) -> dict[str, bool]:
        """Module flags for a role keyed by module value (JSON friendly)"""
        if role == UserRole.SUPER_ADMIN:
            return {module.value: True for module in Module}
        return {module.value: allowed for module, allowed in self.table[role].items()}

    def allowed_modules(self, role: UserRole) -> list[Module]:
        return [module for module in Module if self.allows(role, module)]

    def with_role_flags(self, role: UserRole, flags: Mapping[str, bool]) -> "PermissionMatrix":
        """Return a copy with one role's flags fully replaced"""
        table = dict(self.table)
        table[role] = _parse_flags(role, flags)
        return PermissionMatrix(table)


DEFAULT_PERMISSION_MATRIX = PermissionMatrix.default()
