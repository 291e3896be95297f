import time
import uuid

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from igreja.config import settings
from igreja.core.exceptions import (
    IgrejaException,
    UnauthorizedException,
    NotFoundException,
    ForbiddenException,
    ValidationException,
    NetworkFailureException,
)
from igreja.core.logging import configure_logging
from igreja.routes import (
    attendance_routes,
    auth_routes,
    finance_routes,
    member_routes,
    report_routes,
    settings_routes,
    superadmin_routes,
)

configure_logging()
logger = structlog.get_logger(__name__)

NETWORK_FAILURE_MESSAGE = "Could not reach the database. Check your connection and try again."

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Disable in production
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
cors_origins = settings.cors_origins_list
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Bind a request id to the log context and log every request"""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    response.headers["X-Request-ID"] = request_id
    return response


def error_response(status_code: int, exc: IgrejaException, headers: dict | None = None) -> JSONResponse:
    content = {"detail": str(exc), "code": exc.code}
    if exc.redirect_to:
        content["redirect_to"] = exc.redirect_to
    return JSONResponse(status_code=status_code, content=content, headers=headers)


# Exception handlers
@app.exception_handler(UnauthorizedException)
async def unauthorized_exception_handler(request: Request, exc: UnauthorizedException):
    return error_response(
        status.HTTP_401_UNAUTHORIZED, exc, headers={"WWW-Authenticate": "Bearer"}
    )


@app.exception_handler(NotFoundException)
async def not_found_exception_handler(request: Request, exc: NotFoundException):
    return error_response(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(ForbiddenException)
async def forbidden_exception_handler(request: Request, exc: ForbiddenException):
    return error_response(status.HTTP_403_FORBIDDEN, exc)


@app.exception_handler(ValidationException)
async def validation_exception_handler(request: Request, exc: ValidationException):
    return error_response(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(NetworkFailureException)
async def network_failure_exception_handler(request: Request, exc: NetworkFailureException):
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError):
    logger.error("database_unreachable", path=request.url.path, error=str(exc.orig))
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, NetworkFailureException(NETWORK_FAILURE_MESSAGE)
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": settings.APP_VERSION}


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "Igreja Admin API",
        "version": settings.APP_VERSION,
        "docs": "/docs" if settings.DEBUG else "Documentation disabled in production",
    }


# Include routers
app.include_router(auth_routes.router, prefix="/api", tags=["Auth"])
app.include_router(superadmin_routes.router, prefix="/api/superadmin", tags=["Super Admin"])
app.include_router(settings_routes.router, prefix="/api/{slug}/configuracoes", tags=["Settings"])
app.include_router(member_routes.router, prefix="/api/{slug}/membros", tags=["Members"])
app.include_router(attendance_routes.router, prefix="/api/{slug}/chamada", tags=["Attendance"])
app.include_router(finance_routes.router, prefix="/api/{slug}/financeiro", tags=["Financial"])
app.include_router(report_routes.router, prefix="/api/{slug}", tags=["Reports"])
