from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import init_db, close_db
from app.core.exceptions import PortalError
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from app.core.rate_limiter import limiter, rate_limit_exceeded_handler
from app.api.v1.router import api_router
from slowapi.errors import RateLimitExceeded
import app.models  # noqa: F401  Import models so metadata knows about them


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.SECRET_KEY or settings.SECRET_KEY == "CHANGE_ME":
        errors.append("SECRET_KEY is not set or using default value")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if settings.is_production and not settings.AUTH_COOKIE_SECURE:
        warnings.append("AUTH_COOKIE_SECURE is off - session cookie will be sent over plain HTTP")

    if not settings.RATE_LIMIT_ENABLED:
        warnings.append("RATE_LIMIT_ENABLED is off - login and signup are not throttled")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] Critical configuration validated")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info("=" * 60)

    await validate_critical_config()
    await init_db()
    logger.info("[Startup] Database tables ready")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="University portal: support tickets, announcements, appointments, forum, lost & found and messaging",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False  # Prevent 307 redirects that break CORS
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add middleware (order matters - last added runs first)
# 1. Request logging
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Request size limit
app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE_MB * 1024 * 1024)

# 4. CORS - Origins from CORS_ORIGINS_STR in .env; credentials for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(PortalError)
async def portal_exception_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=request.url.path)
    else:
        logger.info(f"[API] {request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


HTTP_ERROR_CODES = {
    401: "NOT_AUTHENTICATED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    503: "SERVICE_UNAVAILABLE",
}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid value for {field}: {first.get('msg')}" if field else "Invalid request body"
    return JSONResponse(
        status_code=400,
        content={
            "detail": message,
            "code": "VALIDATION_ERROR",
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "code": "INTERNAL_ERROR",
        }
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"/api/{settings.API_VERSION}/health"
    }


# Include API router
app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )
