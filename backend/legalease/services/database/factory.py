"""
Database Factory for creating record store adapters.
Implements Factory Pattern for plug-and-play database support.
"""
from pathlib import Path
from typing import Optional

from .base import DatabaseInterface
from .memory_adapter import MemoryAdapter
from .json_adapter import JSONAdapter
from ...core.config import DATABASE_TYPE
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseFactory:
    """
    Factory for creating database adapters.
    Supports JSON (file-based) and Memory (in-memory) backends.
    """

    @staticmethod
    def create(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """
        Create a database adapter instance.

        Args:
            database_type: Type of database ('json', 'memory', or None to read DATABASE_TYPE)
            **kwargs: Additional arguments for specific database adapters

        Returns:
            DatabaseInterface instance

        Examples:
            # JSON (file-based, persistent)
            db = DatabaseFactory.create('json', data_dir=Path('data/json_db'))

            # Memory (in-memory, non-persistent)
            db = DatabaseFactory.create('memory')
        """
        if database_type is None:
            database_type = DATABASE_TYPE

        database_type = database_type.lower()

        if database_type == "json":
            return DatabaseFactory._create_json(**kwargs)
        elif database_type == "memory":
            return MemoryAdapter()
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'json', 'memory'"
            )

    @staticmethod
    def _create_json(**kwargs) -> JSONAdapter:
        data_dir = kwargs.get("data_dir")
        if data_dir:
            data_dir = Path(data_dir) if isinstance(data_dir, str) else data_dir
        return JSONAdapter(data_dir=data_dir)

    @staticmethod
    async def create_and_initialize(database_type: Optional[str] = None, **kwargs) -> DatabaseInterface:
        """Create database adapter and initialize it."""
        db = DatabaseFactory.create(database_type, **kwargs)
        await db.initialize()
        logger.info(f"Record store initialized: {type(db).__name__}")
        return db
