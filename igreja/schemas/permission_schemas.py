from pydantic import BaseModel, Field
from igreja.models.role import UserRole


class RolePermissionResponse(BaseModel):
    """Module flags of one role"""

    role: UserRole
    label: str
    modules: dict[str, bool]


class PermissionUpdate(BaseModel):
    """Full replacement of a role's module flags"""

    modules: dict[str, bool] = Field(
        ..., description="Module key -> allowed; omitted modules become false"
    )


class PermissionMatrixResponse(BaseModel):
    """Every editable role of the church"""

    permissions: list[RolePermissionResponse]
