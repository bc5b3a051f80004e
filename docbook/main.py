from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
import traceback

from .api.v1.appointments import router as appointments_router
from .api.v1.auth import router as auth_router
from .api.v1.health import router as health_router
from .api.v1.users import router as users_router
from .core.config import settings
from .core.database import init_db
from .core.exceptions import ApiError
from .core.logger import setup_logging
from .core.rate_limit import global_rate_limit
from .core.responses import error_response

setup_logging()
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database on startup."""
    logger.info("Starting Doctor Appointment API...")

    db_url = settings.get_database_url
    db_type = "PostgreSQL" if "postgresql" in db_url else "SQLite" if "sqlite" in db_url else "Unknown"
    logger.info(f"Using {db_type} database")

    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize database: {str(e)}")
        raise

    app.state.started_at = time.monotonic()
    logger.info("Application startup complete")
    yield
    logger.info("Shutting down Doctor Appointment API...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Doctor appointment booking with role-based access control",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    dependencies=[Depends(global_rate_limit)],
)

# Middleware setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

if settings.ALLOWED_HOSTS != ["*"]:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)


# Request logging, timing and security headers
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    for header, value in SECURITY_HEADERS.items():
        response.headers[header] = value

    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.4f}s"
    )

    return response


def _stack(exc: Exception):
    if not settings.is_development:
        return None
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND and not isinstance(exc, ApiError):
        # No route matched
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "message": "Not Found",
                "statusCode": status.HTTP_404_NOT_FOUND,
                "success": False,
                "errorMessages": [{"message": "Not Found", "path": str(request.url.path)}],
            },
        )

    message = str(exc.detail)
    return error_response(
        exc.status_code,
        message,
        [{"message": message, "path": ""}],
        stack=_stack(exc),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error_messages = [
        {
            "message": error.get("msg", "Invalid value"),
            "path": str(error["loc"][-1]) if error.get("loc") else "",
        }
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation Error", error_messages)


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
    message = "Something went wrong"
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        message,
        [{"message": message, "path": ""}],
        stack=_stack(exc),
    )


# Include routers
app.include_router(auth_router, prefix=settings.API_V1_PREFIX)
app.include_router(users_router, prefix=settings.API_V1_PREFIX)
app.include_router(appointments_router, prefix=settings.API_V1_PREFIX)
app.include_router(health_router, prefix=settings.API_V1_PREFIX)


def run():
    import uvicorn
    uvicorn.run(
        "docbook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
