"""
Shared dependencies for routers.
Provides record store and service initialization.

This module manages service lifecycle and dependency injection: services are
module globals created once at startup and handed to routes by the get_*()
functions below.
"""
from pathlib import Path

from ..core.config import AI_PROVIDER, DATABASE_TYPE, DB_DIR, JSON_DB_PATH, STORAGE_TYPE
from ..core.logging_config import get_logger
from ..repositories import AnalysisRepository, ClauseRepository, DocumentRepository
from ..services.analysis_engine import AnalysisEngine
from ..services.analysis_sweeper import AnalysisSweeper
from ..services.database import DatabaseFactory
from ..services.document_service import DocumentService
from ..services.providers import AIProviderFactory
from ..services.storage import FileStorageFactory

logger = get_logger(__name__)

# Global services (initialized on startup)
db_service = None
storage_service = None
document_service = None
analysis_engine = None
analysis_sweeper = None


async def initialize_database():
    """Initialize record store adapter based on configuration."""
    global db_service

    logger.info(f"Initializing database: {DATABASE_TYPE}")

    if DATABASE_TYPE.lower() == "json":
        data_dir = Path(JSON_DB_PATH) if JSON_DB_PATH else DB_DIR / "json_db"
        logger.info("  → Database Type: JSON (file-based)")
        db_service = await DatabaseFactory.create_and_initialize("json", data_dir=data_dir)
    elif DATABASE_TYPE.lower() == "memory":
        logger.info("  → Database Type: Memory (in-memory, non-persistent)")
        db_service = await DatabaseFactory.create_and_initialize("memory")
    else:
        raise ValueError(f"Unsupported DATABASE_TYPE: {DATABASE_TYPE}. Supported types: 'json', 'memory'")


async def initialize_services():
    """
    Initialize all services after the database is ready:
    blob storage, the document registry, the analysis engine and its sweeper.
    """
    global storage_service, document_service, analysis_engine, analysis_sweeper

    if db_service is None:
        await initialize_database()

    logger.info("Initializing services...")

    logger.info(f"  → Storage Type: {STORAGE_TYPE}")
    storage_service = await FileStorageFactory.create_and_initialize()

    document_repo = DocumentRepository(db_service)
    analysis_repo = AnalysisRepository(db_service)
    clause_repo = ClauseRepository(db_service)

    document_service = DocumentService(document_repo, storage_service)

    logger.info(f"  → AI Provider: {AI_PROVIDER}")
    provider = AIProviderFactory.get_provider()
    analysis_engine = AnalysisEngine(document_repo, analysis_repo, clause_repo, provider)

    analysis_sweeper = AnalysisSweeper(document_repo, analysis_repo)
    swept = await analysis_sweeper.recover_abandoned()
    if swept:
        logger.warning(f"  → Recovered {swept} records left in flight by a previous process")
    analysis_sweeper.start()

    logger.info(f"✅ All services initialized (provider: {provider.name})")


async def shutdown_services():
    """Stop background work and flush the record store."""
    global db_service, storage_service, document_service, analysis_engine, analysis_sweeper

    if analysis_sweeper is not None:
        await analysis_sweeper.stop()
    if analysis_engine is not None:
        await analysis_engine.shutdown()
    if storage_service is not None:
        await storage_service.close()
    if db_service is not None:
        await db_service.close()

    db_service = storage_service = document_service = analysis_engine = analysis_sweeper = None
    logger.info("Services shut down")


def get_document_service() -> DocumentService:
    """Get document registry (dependency injection)."""
    if document_service is None:
        raise RuntimeError("Document service not initialized")
    return document_service


def get_analysis_engine() -> AnalysisEngine:
    """Get analysis engine (dependency injection)."""
    if analysis_engine is None:
        raise RuntimeError("Analysis engine not initialized")
    return analysis_engine
