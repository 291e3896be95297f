import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from igreja.core.exceptions import ForbiddenException, NotFoundException, ValidationException
from igreja.models.profile import Profile
from igreja.models.role import UserRole
from igreja.models.tenant_context import TenantContext
from igreja.repositories.credential_repository import CredentialRepository
from igreja.repositories.profile_repository import ProfileRepository
from igreja.schemas.user_schemas import UserCreate, UserUpdate
from igreja.services.auth_provider import AuthProvider

logger = structlog.get_logger(__name__)


class UserService:
    """Privileged management of a church's users (ADMIN only)"""

    def __init__(self, db: Session):
        self.db = db
        self.auth = AuthProvider(db)
        self.profile_repo = ProfileRepository(db)
        self.credential_repo = CredentialRepository(db)

    def list_users(self, context: TenantContext) -> list[Profile]:
        return self.profile_repo.get_by_church(context.church.id)

    def _require_admin(self, context: TenantContext) -> None:
        if not context.is_admin():
            raise ForbiddenException("Only administrators can manage users")

    def _check_role(self, role: UserRole) -> None:
        if role == UserRole.SUPER_ADMIN:
            raise ValidationException("The super_admin role cannot be assigned to church users")

    def create_user(self, user_data: UserCreate, context: TenantContext) -> Profile:
        """
        Create credential and profile in the church, without email verification.

        Args:
            user_data: Name, email, password and role
            context: Tenant context

        Returns:
            Created profile

        Raises:
            ForbiddenException: If principal is not an administrator
            ValidationException: If email is taken or role is super_admin
        """
        self._require_admin(context)
        self._check_role(user_data.role)

        email = user_data.email.strip().lower()
        try:
            credential = self.auth.sign_up(email, user_data.password)
            profile = self.profile_repo.add(
                Profile(
                    auth_user_id=credential.auth_user_id,
                    church_id=context.church.id,
                    name=user_data.name.strip(),
                    email=email,
                    role=user_data.role,
                    is_active=True,
                )
            )
            self.db.commit()
        except ValidationException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise ValidationException(f"Email {email} is already registered")

        self.db.refresh(profile)
        logger.info(
            "user_created",
            church_id=context.church.id,
            profile_id=profile.id,
            role=profile.role.value,
            created_by=context.principal.id,
        )
        return profile

    def update_user(self, profile_id: int, user_update: UserUpdate, context: TenantContext) -> Profile:
        """
        Update name, role, active flag or avatar of a church user.

        Raises:
            ForbiddenException: If principal is not an administrator, or
                tries to demote or deactivate themselves
            NotFoundException: If the user is not in this church
            ValidationException: If role is super_admin
        """
        self._require_admin(context)
        profile = self.profile_repo.get_by_id_and_church(profile_id, context.church.id)
        if not profile:
            raise NotFoundException(f"User {profile_id} not found")

        update_data = user_update.model_dump(exclude_unset=True)
        if update_data.get("role") is not None:
            self._check_role(update_data["role"])

        if profile.id == context.principal.id:
            if update_data.get("is_active") is False:
                raise ForbiddenException("Cannot deactivate your own account")
            if update_data.get("role") not in (None, profile.role):
                raise ForbiddenException("Cannot change your own role")

        for field, value in update_data.items():
            if value is not None or field == "avatar":
                setattr(profile, field, value)

        return self.profile_repo.update(profile)

    def delete_user(self, profile_id: int, context: TenantContext) -> None:
        """
        Remove a church user and their credential.

        Raises:
            ForbiddenException: If principal is not an administrator or targets themselves
            NotFoundException: If the user is not in this church
        """
        self._require_admin(context)
        profile = self.profile_repo.get_by_id_and_church(profile_id, context.church.id)
        if not profile:
            raise NotFoundException(f"User {profile_id} not found")

        # Check self first for better error message
        if profile.id == context.principal.id:
            raise ForbiddenException("Cannot delete your own account")

        credential = self.credential_repo.get_by_auth_id(profile.auth_user_id)
        if credential:
            self.credential_repo.delete(credential)
        self.profile_repo.delete(profile)
        self.db.commit()
        logger.info(
            "user_deleted",
            church_id=context.church.id,
            profile_id=profile_id,
            deleted_by=context.principal.id,
        )
