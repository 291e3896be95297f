import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from igreja.core.exceptions import ValidationException
from igreja.core.validators import format_cnpj, generate_slug, is_valid_cnpj, is_valid_slug
from igreja.models.church import Church
from igreja.models.permission_matrix import DEFAULT_MODULE_FLAGS
from igreja.models.profile import Profile
from igreja.models.role import PlanType, ROLE_LABELS, UserRole
from igreja.models.role_permission import RolePermission
from igreja.repositories.church_repository import ChurchRepository
from igreja.repositories.profile_repository import ProfileRepository
from igreja.repositories.role_permission_repository import RolePermissionRepository
from igreja.schemas.church_schemas import RegistrationRequest
from igreja.services.auth_provider import AuthProvider

logger = structlog.get_logger(__name__)

RESERVED_SLUGS = {"superadmin", "register", "api", "login"}


class RegistrationService:
    """Atomic self-service registration of a church and its administrator"""

    def __init__(self, db: Session):
        self.db = db
        self.auth = AuthProvider(db)
        self.church_repo = ChurchRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.permission_repo = RolePermissionRepository(db)

    def resolve_slug(self, data: RegistrationRequest) -> str:
        """
        Slug to register under: the requested one, or derived from the name.

        Raises:
            ValidationException: Malformed or reserved slug
        """
        slug = (data.slug or "").strip().lower() or generate_slug(data.church_name)
        if not is_valid_slug(slug):
            raise ValidationException(
                "Slug must contain only lowercase letters, numbers and single hyphens"
            )
        if slug in RESERVED_SLUGS:
            raise ValidationException(f"Slug '{slug}' is reserved")
        return slug

    def register(self, data: RegistrationRequest) -> tuple[Church, Profile]:
        """
        Create church, admin credential, admin profile and default permissions.

        All rows are written in a single commit: on any failure nothing is
        persisted.

        Args:
            data: Registration form

        Returns:
            Tuple of (church, admin profile)

        Raises:
            ValidationException: Invalid CNPJ or slug, slug or email already taken
        """
        slug = self.resolve_slug(data)

        cnpj = None
        if data.cnpj:
            if not is_valid_cnpj(data.cnpj):
                raise ValidationException("Invalid CNPJ")
            cnpj = format_cnpj(data.cnpj)

        if self.church_repo.slug_exists(slug):
            raise ValidationException(f"Slug '{slug}' is already in use")

        admin_email = data.admin_email.strip().lower()
        try:
            church = self.church_repo.add(
                Church(
                    name=data.church_name.strip(),
                    slug=slug,
                    cnpj=cnpj,
                    city=data.city,
                    state=data.state.upper() if data.state else None,
                    address=data.address,
                    phone=data.phone,
                    pastor=data.pastor,
                    admin_name=data.admin_name.strip(),
                    admin_email=admin_email,
                    plan=PlanType.FREE,
                    is_active=True,
                )
            )
            credential = self.auth.sign_up(admin_email, data.password)
            profile = self.profile_repo.add(
                Profile(
                    auth_user_id=credential.auth_user_id,
                    church_id=church.id,
                    name=data.admin_name.strip(),
                    email=admin_email,
                    role=UserRole.ADMIN,
                    is_active=True,
                )
            )
            for role, flags in DEFAULT_MODULE_FLAGS.items():
                self.permission_repo.add(
                    RolePermission(
                        church_id=church.id,
                        role=role,
                        label=ROLE_LABELS[role],
                        modules={module.value: allowed for module, allowed in flags.items()},
                    )
                )
            self.db.commit()
        except ValidationException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("registration_conflict", slug=slug, error=str(e.orig))
            raise ValidationException("Slug or email already registered")

        self.db.refresh(church)
        self.db.refresh(profile)
        logger.info("church_registered", church_id=church.id, slug=slug, admin_profile_id=profile.id)
        return church, profile
