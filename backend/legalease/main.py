import sys

from .core.config import (
    AI_PROVIDER,
    ANALYSIS_WAIT_SECONDS,
    CORS_ORIGINS,
    DATABASE_TYPE,
    ENVIRONMENT,
    MAX_UPLOAD_BYTES,
    MODEL_TIMEOUT_SECONDS,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_PER_MINUTE,
    S3_BUCKET_NAME,
    STORAGE_TYPE,
    UPLOAD_DIR,
)
from .core.logging_config import get_logger, setup_logging
from .gateway import APIGateway
from .routers import ai, documents
from .routers.dependencies import initialize_database, initialize_services, shutdown_services

# Initialize logging
setup_logging()
logger = get_logger(__name__)

# Initialize API Gateway
gateway = APIGateway(
    title="LegalEase API",
    description="Upload legal documents and analyze them with a language model",
    version="1.0.0"
)

# Setup middleware (CORS, rate limiting, logging, error handling)
gateway.setup_middleware()

gateway.register_router(documents.router, prefix="/api", tags=["Documents"])
gateway.register_router(ai.router, prefix="/api", tags=["AI"])

gateway.register_health_endpoints()

app = gateway.get_app()


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup."""
    logger.info("=" * 60)
    logger.info("Starting LegalEase Backend...")
    logger.info("=" * 60)

    try:
        import fastapi
        import uvicorn
        logger.info(f"  → FastAPI {fastapi.__version__}, Uvicorn {uvicorn.__version__}, Python {sys.version.split()[0]}")
    except ImportError as e:
        logger.debug(f"Could not get framework versions: {e}")

    logger.info(f"  → Environment: {ENVIRONMENT}")
    logger.info(f"  → Docs URL: {app.docs_url if app.docs_url else 'Disabled (production)'}")
    logger.info(f"  → Rate Limiting: {f'{RATE_LIMIT_PER_MINUTE} requests/minute' if RATE_LIMIT_ENABLED else 'Disabled'}")
    logger.info(f"  → CORS Origins: {', '.join(CORS_ORIGINS)}")
    logger.info(f"  → Max Upload: {MAX_UPLOAD_BYTES // (1024 * 1024)} MiB")
    logger.info(f"  → Analysis wait: {ANALYSIS_WAIT_SECONDS}s, model timeout: {MODEL_TIMEOUT_SECONDS}s")
    logger.info(f"  → Database: {DATABASE_TYPE.upper()}, Storage: {STORAGE_TYPE.upper()}, AI Provider: {AI_PROVIDER}")
    if STORAGE_TYPE.lower() == "s3" and not S3_BUCKET_NAME:
        logger.warning("    → S3 Bucket: Not configured")

    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.debug(f"Upload directory: {UPLOAD_DIR}")

    await initialize_database()
    await initialize_services()

    logger.info(f"  → Routers: {', '.join(gateway.routers)}")
    logger.info("=" * 60)
    logger.info("✅ LegalEase Backend initialized successfully")
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down LegalEase Backend...")
    await shutdown_services()
    logger.info("LegalEase Backend shutdown complete")
