class IgrejaException(Exception):
    """Base exception for the church administration service"""

    code = "error"

    def __init__(self, message: str = "", redirect_to: str | None = None):
        super().__init__(message)
        self.redirect_to = redirect_to


class UnauthorizedException(IgrejaException):
    """Raised when token validation fails or no session exists"""

    code = "unauthorized"


class InvalidCredentialsException(UnauthorizedException):
    """Raised when email/password do not match a credential"""

    code = "invalid_credentials"


class ProfileNotFoundException(UnauthorizedException):
    """Raised when an authenticated credential has no profile row"""

    code = "profile_not_found"


class NotFoundException(IgrejaException):
    """Raised when resource not found"""

    code = "not_found"


class TenantNotFoundException(NotFoundException):
    """Raised when a church slug or id does not resolve"""

    code = "tenant_not_found"


class ForbiddenException(IgrejaException):
    """Raised when the principal may not perform the operation"""

    code = "forbidden"


class TenantInactiveException(ForbiddenException):
    """Raised when the principal's church is deactivated"""

    code = "tenant_inactive"


class CrossTenantAccessException(ForbiddenException):
    """Raised when a principal reaches into another church's data"""

    code = "cross_tenant_access"


class ValidationException(IgrejaException):
    """Raised for business logic validation errors"""

    code = "validation_failure"


class NetworkFailureException(IgrejaException):
    """Raised when the storage backend cannot be reached"""

    code = "network_failure"
