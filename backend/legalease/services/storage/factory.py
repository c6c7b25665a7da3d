"""
File Storage Factory for creating storage adapters.
Implements Factory Pattern for plug-and-play storage support.
"""
from pathlib import Path
from typing import Optional

from .base import FileStorageInterface
from .local_storage import LocalFileStorage
from .s3_storage import S3FileStorage
from ...core import config
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class FileStorageFactory:
    """
    Factory for creating file storage adapters.
    Supports Local and S3 backends.
    """

    @staticmethod
    def create(storage_type: Optional[str] = None, **kwargs) -> FileStorageInterface:
        """
        Create a storage adapter instance.

        Args:
            storage_type: Type of storage ('local', 's3', or None to read STORAGE_TYPE)
            **kwargs: Additional arguments for specific storage adapters

        Examples:
            storage = FileStorageFactory.create('local', base_dir=Path('uploads'))
            storage = FileStorageFactory.create('s3', bucket_name='my-bucket')
        """
        if storage_type is None:
            storage_type = config.STORAGE_TYPE

        storage_type = storage_type.lower()

        if storage_type == "local":
            return FileStorageFactory._create_local(**kwargs)
        elif storage_type == "s3":
            return FileStorageFactory._create_s3(**kwargs)
        else:
            raise ValueError(
                f"Unsupported storage type: {storage_type}. "
                f"Supported types: 'local', 's3'"
            )

    @staticmethod
    def _create_local(**kwargs) -> LocalFileStorage:
        base_dir = kwargs.get("base_dir") or config.LOCAL_STORAGE_DIR or config.UPLOAD_DIR
        if isinstance(base_dir, str):
            base_dir = Path(base_dir)
        return LocalFileStorage(base_dir=base_dir)

    @staticmethod
    def _create_s3(**kwargs) -> S3FileStorage:
        bucket_name = kwargs.get("bucket_name", config.S3_BUCKET_NAME)
        if not bucket_name:
            raise ValueError("S3 bucket_name is required")

        return S3FileStorage(
            bucket_name=bucket_name,
            aws_access_key_id=kwargs.get("aws_access_key_id", config.AWS_ACCESS_KEY_ID),
            aws_secret_access_key=kwargs.get("aws_secret_access_key", config.AWS_SECRET_ACCESS_KEY),
            region_name=kwargs.get("region_name", config.AWS_REGION),
            endpoint_url=kwargs.get("endpoint_url", config.S3_ENDPOINT_URL),
        )

    @staticmethod
    async def create_and_initialize(storage_type: Optional[str] = None, **kwargs) -> FileStorageInterface:
        """Create storage adapter and initialize it."""
        storage = FileStorageFactory.create(storage_type, **kwargs)
        await storage.initialize()
        logger.info(f"Blob storage initialized: {type(storage).__name__}")
        return storage
