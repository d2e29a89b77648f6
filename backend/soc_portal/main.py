from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from soc_portal.core.config import settings
from soc_portal.core.database import init_db, close_db
from soc_portal.core.exceptions import SocPortalError, error_response
from soc_portal.core.logging_config import logger
from soc_portal.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from soc_portal.core.rate_limiter import limiter, rate_limit_exceeded_handler
from soc_portal.api.v1.router import api_router
from soc_portal.services.alert_service import alert_service
from slowapi.errors import RateLimitExceeded

import soc_portal.models  # Import models so metadata knows about them


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")
    logger.info(f"Session timeout: {settings.SESSION_TIMEOUT_MINUTES} minutes")
    logger.info("=" * 60)

    await init_db()
    logger.info("[Startup] Database tables ready")

    if not alert_service.enabled:
        logger.warning("[Startup] TELEGRAM_BOT_TOKEN/TELEGRAM_CHAT_ID not set - alerts disabled")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await alert_service.drain()
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="SOC Portal session lifecycle, auth gate and feature API",
    version=settings.APP_VERSION,
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

# 3. CORS - session cookies need credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(SocPortalError)
async def portal_error_handler(request: Request, exc: SocPortalError):
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or None
    message = f"Invalid {field}" if field else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "error": "VALIDATION_ERROR"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": str(exc) if settings.DEBUG else "Internal server error",
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


# Include API router
app.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "soc_portal.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG,
    )
