from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

load_dotenv()

from waitlist.config import settings
from waitlist.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientCapacityException,
    InvalidCapacityException,
    RepositoryException,
    SeatClaimConflictException,
)
from waitlist.core.security import limiter
from waitlist.logging_config import configure_logging
from waitlist.models.application import ErrorResponse

# IMPORT ROUTERS
from waitlist.routers.admin import router as admin_router
from waitlist.routers.beta import router as beta_router
from waitlist.routers.health import router as health_router
from waitlist.routers.waitlist import router as waitlist_router
from waitlist.routers.waitlist import validation_exception_handler

logger = structlog.get_logger(__name__)


# SWAGGER UI tag display order
_OPENAPI_TAGS = [
    {"name": "Root"},
    {"name": "Health"},
    {"name": "Waitlist"},
    {"name": "Beta"},
    {"name": "Admin"},
]

# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=_OPENAPI_TAGS,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
app.state.limiter = limiter



#  Exception Handlers


def error_response(status_code: int, error_code: str, message: str, details: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error_code=error_code, message=message, details=details).model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict) and "error_code" in exc.detail:
        content = ErrorResponse(**exc.detail).model_dump(mode="json")
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error_code="HTTP_ERROR", message=str(exc.detail)).model_dump(mode="json"),
        headers=exc.headers,
    )


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "RATE_LIMITED",
        f"Too many requests: {exc.detail}",
    )


async def duplicate_handler(request: Request, exc: DuplicateEntityException):
    return error_response(status.HTTP_409_CONFLICT, "DUPLICATE_APPLICATION", exc.message)


async def not_found_handler(request: Request, exc: EntityNotFoundException):
    return error_response(status.HTTP_404_NOT_FOUND, "NOT_FOUND", str(exc))


async def seat_claim_conflict_handler(request: Request, exc: SeatClaimConflictException):
    logger.warning("seat_claim_exhausted", attempts=exc.attempts, path=request.url.path)
    return error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "SEAT_CLAIM_CONFLICT",
        "The waitlist is busy, please retry",
        {"attempts": exc.attempts},
    )


async def database_unavailable_handler(request: Request, exc: DatabaseConnectionException):
    logger.error("database_unavailable", error=exc.message, path=request.url.path)
    return error_response(status.HTTP_503_SERVICE_UNAVAILABLE, "DATABASE_UNAVAILABLE", "Database is unavailable")


async def repository_error_handler(request: Request, exc: RepositoryException):
    logger.error("repository_error", error=str(exc), path=request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "DATABASE_ERROR", "A database error occurred")


async def insufficient_capacity_handler(request: Request, exc: InsufficientCapacityException):
    return error_response(
        status.HTTP_409_CONFLICT,
        "INSUFFICIENT_CAPACITY",
        str(exc),
        {"remaining": exc.remaining, "requested": exc.requested},
    )


async def invalid_capacity_handler(request: Request, exc: InvalidCapacityException):
    return error_response(
        status.HTTP_409_CONFLICT,
        "INVALID_CAPACITY",
        str(exc),
        {"beta_cap": exc.beta_cap, "approved_count": exc.approved_count},
    )


# REGISTER EXCEPTION HANDLERS
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_exception_handler(DuplicateEntityException, duplicate_handler)
app.add_exception_handler(EntityNotFoundException, not_found_handler)
app.add_exception_handler(SeatClaimConflictException, seat_claim_conflict_handler)
app.add_exception_handler(DatabaseConnectionException, database_unavailable_handler)
app.add_exception_handler(RepositoryException, repository_error_handler)
app.add_exception_handler(InsufficientCapacityException, insufficient_capacity_handler)
app.add_exception_handler(InvalidCapacityException, invalid_capacity_handler)

# REGISTER ROUTERS (order matches _OPENAPI_TAGS / Swagger UI display order)
app.include_router(health_router)    # Health
app.include_router(waitlist_router)  # Waitlist
app.include_router(beta_router)      # Beta
app.include_router(admin_router)     # Admin


# ROOT ENDPOINT
@app.get("/", tags=["Root"], summary="Root endpoint")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": "running"
    }


# STARTUP EVENT
@app.on_event("startup")
async def startup_event():
    configure_logging()
    logger.info(
        "waitlist_api_starting",
        env=settings.APP_ENV,
        version=settings.APP_VERSION,
        rate_limit=settings.SUBMIT_RATE_LIMIT,
    )


# SHUTDOWN EVENT
@app.on_event("shutdown")
async def shutdown_event():
    logger.info("waitlist_api_stopping")


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "waitlist.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
