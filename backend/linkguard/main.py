"""
LinkGuard API Application

Main FastAPI application entry point.
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from linkguard.api.routes import get_api_router
from linkguard.config.settings import get_settings
from linkguard.services.link_checker import get_link_checker
from linkguard.utils.constants import APP_DESCRIPTION

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting LinkGuard API...")

    checker = get_link_checker()
    status = checker.aggregator.get_status()

    # Log provider configuration
    logger.info("=== Security Providers ===")
    for provider in status["providers"]:
        if not provider["enabled"]:
            mark = "off"
        elif provider["configured"]:
            mark = "✓"
        else:
            mark = "✗ (simulated)"
        logger.info(f"  {provider['name']}: {mark} weight={provider['weight']}")
    logger.info(f"  Screenshots: {'✓' if checker.screenshot_service.is_configured else '✗ (simulated)'}")
    logger.info(
        f"Timeouts: provider={status['provider_timeout']}s global={status['global_timeout']}s"
    )

    logger.info("LinkGuard API started successfully")

    yield

    # Shutdown
    logger.info("LinkGuard API shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="LinkGuard API",
    description=APP_DESCRIPTION,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - origins from CORS_ORIGINS (comma separated) or localhost defaults
cors_origins = settings.get_cors_origins()
logger.info(f"CORS allowed origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include API routes
app.include_router(get_api_router())


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": "LinkGuard API",
        "description": APP_DESCRIPTION,
        "version": settings.app_version,
        "docs": "/docs",
    }


# Root-level health check (for Docker/K8s)
@app.get("/health")
async def health():
    """Basic health check."""
    return {
        "status": "healthy",
        "service": "linkguard-api",
        "version": settings.app_version,
    }


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "linkguard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
