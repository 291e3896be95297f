import structlog
from sqlalchemy.orm import Session

from igreja.core.exceptions import ForbiddenException, TenantNotFoundException, ValidationException
from igreja.core.validators import format_cnpj, format_phone, is_valid_cnpj
from igreja.models.church import Church
from igreja.models.session import AuthSession
from igreja.models.tenant_context import TenantContext
from igreja.repositories.church_repository import ChurchRepository
from igreja.repositories.credential_repository import CredentialRepository
from igreja.repositories.profile_repository import ProfileRepository
from igreja.schemas.church_schemas import ChurchUpdate

logger = structlog.get_logger(__name__)


class ChurchService:
    """Church details (settings module) and the super admin control plane"""

    def __init__(self, db: Session):
        self.db = db
        self.church_repo = ChurchRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.credential_repo = CredentialRepository(db)

    def update_church(self, church_update: ChurchUpdate, context: TenantContext) -> Church:
        """
        Update church details (ADMIN only).

        Args:
            church_update: Fields to change
            context: Tenant context

        Returns:
            Updated church

        Raises:
            ForbiddenException: If principal is not an administrator
            ValidationException: If the CNPJ check digits are wrong
        """
        if not context.is_admin():
            raise ForbiddenException("Only administrators can update church details")

        church = context.church
        update_data = church_update.model_dump(exclude_unset=True)

        if update_data.get("cnpj"):
            if not is_valid_cnpj(update_data["cnpj"]):
                raise ValidationException("Invalid CNPJ")
            update_data["cnpj"] = format_cnpj(update_data["cnpj"])
        if update_data.get("phone"):
            update_data["phone"] = format_phone(update_data["phone"])
        if update_data.get("state"):
            update_data["state"] = update_data["state"].upper()

        for field, value in update_data.items():
            setattr(church, field, value)

        return self.church_repo.update(church)

    # Super admin control plane

    def _require_super_admin(self, session: AuthSession) -> None:
        if not session.is_super_admin:
            raise ForbiddenException("Access restricted to platform administrators")

    def _get_church(self, church_id: int) -> Church:
        church = self.church_repo.get_by_id(church_id)
        if church is None:
            raise TenantNotFoundException(f"Church {church_id} not found")
        return church

    def list_churches(self, session: AuthSession, search: str | None = None) -> list[dict]:
        """
        All churches with their member counts.

        Args:
            session: Super admin session
            search: Optional match on name, slug or admin contact
        """
        self._require_super_admin(session)
        counts = self.church_repo.member_counts()
        result = []
        for church in self.church_repo.get_all(search):
            row = {column.name: getattr(church, column.name) for column in Church.__table__.columns}
            row["members_count"] = counts.get(church.id, 0)
            result.append(row)
        return result

    def platform_stats(self, session: AuthSession) -> dict:
        self._require_super_admin(session)
        churches = self.church_repo.get_all()
        active = sum(1 for church in churches if church.is_active)
        return {
            "total_churches": len(churches),
            "active_churches": active,
            "inactive_churches": len(churches) - active,
            "total_members": sum(self.church_repo.member_counts().values()),
        }

    def set_church_status(self, church_id: int, is_active: bool, session: AuthSession) -> Church:
        """
        Activate or deactivate a church (SUPER_ADMIN only).

        Principals of a deactivated church keep their credentials but every
        session resolution fails with TenantInactive until reactivation.
        """
        self._require_super_admin(session)
        church = self._get_church(church_id)
        church.is_active = is_active
        church = self.church_repo.update(church)
        logger.info(
            "church_status_changed",
            church_id=church.id,
            slug=church.slug,
            is_active=is_active,
            changed_by=session.principal.id,
        )
        return church

    def delete_church(self, church_id: int, session: AuthSession) -> None:
        """
        Cascade-delete a church, its rows and its users' credentials.

        Administrative escape hatch; deactivation is the normal path.
        """
        self._require_super_admin(session)
        church = self._get_church(church_id)

        auth_ids = [profile.auth_user_id for profile in self.profile_repo.get_by_church(church.id)]
        for credential in self.credential_repo.get_by_auth_ids(auth_ids):
            self.credential_repo.delete(credential)

        slug = church.slug
        self.church_repo.delete(church)
        logger.warning(
            "church_deleted",
            church_id=church_id,
            slug=slug,
            deleted_by=session.principal.id,
            credentials_removed=len(auth_ids),
        )
