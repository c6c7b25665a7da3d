"""
API Gateway

Main gateway class that orchestrates routing, middleware, and error handling.
Acts as the single entry point for all API requests.
"""
from typing import List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from ..core.config import CORS_ORIGINS, ENVIRONMENT, RATE_LIMIT_ENABLED, RATE_LIMIT_PER_MINUTE
from ..core.logging_config import get_logger
from .middleware import (
    ErrorHandlingMiddleware,
    RequestIDMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from .middleware.rate_limit import create_limiter, rate_limit_exceeded_handler

logger = get_logger(__name__)


class APIGateway:
    """
    API Gateway that manages routing, middleware, and error handling.

    Responsibilities:
    - Initialize FastAPI application
    - Register middleware (CORS, rate limiting, logging, error handling)
    - Register exception handlers so every error has the same JSON body
    - Register routers
    - Provide health check endpoints
    """

    def __init__(
        self,
        title: str = "LegalEase API",
        description: str = "Legal document analysis",
        version: str = "1.0.0",
        enable_docs: Optional[bool] = None
    ):
        """
        Initialize API Gateway.

        Args:
            title: API title
            description: API description
            version: API version
            enable_docs: Enable API docs (auto-detected from ENVIRONMENT if None)
        """
        self.title = title
        self.description = description
        self.version = version
        self.enable_docs = enable_docs if enable_docs is not None else ENVIRONMENT != "production"

        self.app = FastAPI(
            title=self.title,
            description=self.description,
            version=self.version,
            docs_url="/docs" if self.enable_docs else None,
            redoc_url="/redoc" if self.enable_docs else None
        )
        self.routers: List[str] = []

        # Rate limiter; the default limit applies to every route via SlowAPIMiddleware
        self.limiter = create_limiter()
        self.app.state.limiter = self.limiter
        self.app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

        register_exception_handlers(self.app)

        logger.info("API Gateway initialized")

    def setup_middleware(self):
        """Configure all middleware. The last one added runs first."""
        logger.info("Setting up middleware...")

        self.app.add_middleware(ErrorHandlingMiddleware)
        logger.debug("  → Error handling middleware added")

        if RATE_LIMIT_ENABLED:
            self.app.add_middleware(SlowAPIMiddleware)
            logger.debug(f"  → Rate limiting middleware added ({RATE_LIMIT_PER_MINUTE}/minute)")

        self.app.add_middleware(
            RequestLoggingMiddleware,
            skip_paths=["/health", "/ready", "/docs", "/redoc", "/openapi.json"]
        )
        logger.debug("  → Request logging middleware added")

        # Request ID runs before logging and error handling so both can read it
        self.app.add_middleware(RequestIDMiddleware)
        logger.debug("  → Request ID middleware added")

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Analysis-Id", "X-Analysis-Status"],
        )
        logger.debug(f"  → CORS middleware added (origins: {', '.join(CORS_ORIGINS)})")

        logger.info("✅ All middleware configured")

    def register_router(self, router: APIRouter, prefix: str = "", tags: Optional[List[str]] = None):
        """
        Register a router with the gateway.

        Args:
            router: FastAPI router instance
            prefix: URL prefix for the router (e.g., "/api")
            tags: OpenAPI tags for documentation
        """
        self.app.include_router(router, prefix=prefix, tags=tags or [])
        self.routers.append(f"{prefix}{router.prefix}")
        logger.info(f"Registered router at prefix '{prefix}{router.prefix}'")

    def register_health_endpoints(self):
        """Register health check endpoints."""

        @self.app.get("/")
        async def root():
            """Root endpoint - API information."""
            return {
                "message": f"{self.title} is running",
                "version": self.version,
                "status": "healthy",
            }

        @self.app.get("/health")
        async def health_check():
            """
            Liveness probe. Returns 200 if services are initialized, 503 otherwise.
            """
            from ..routers import dependencies

            if dependencies.db_service is None:
                logger.warning("Health check failed: Database not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Database not initialized"},
                )
            if dependencies.document_service is None or dependencies.analysis_engine is None:
                logger.warning("Health check failed: Services not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"status": "unhealthy", "reason": "Services not initialized"},
                )
            return {
                "status": "healthy",
                "database": "connected",
                "services": "initialized",
                "provider": dependencies.analysis_engine.provider.name,
            }

        @self.app.get("/ready")
        async def readiness_check():
            """
            Readiness probe. Verifies the record store answers a query.
            """
            from ..routers import dependencies

            if dependencies.db_service is None:
                logger.warning("Readiness check failed: Database not initialized")
                return JSONResponse(
                    status_code=503,
                    content={"ready": False, "reason": "Database not initialized"},
                )
            try:
                await dependencies.db_service.list_documents("__readiness__", 0, 1)
            except Exception as e:
                logger.error(f"Readiness check failed: {e}", exc_info=True)
                return JSONResponse(status_code=503, content={"ready": False, "reason": str(e)})
            return {"ready": True}

        logger.info("Health check endpoints registered")

    def get_app(self) -> FastAPI:
        """Get the FastAPI application instance."""
        return self.app
