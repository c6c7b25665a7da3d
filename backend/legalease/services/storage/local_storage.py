"""
Local filesystem storage adapter implementing FileStorageInterface.
Stores uploaded documents on the local filesystem - for development and demos.
"""
import asyncio
import os
from pathlib import Path
from typing import Optional

from .base import FileStorageInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class LocalFileStorage(FileStorageInterface):
    """Local filesystem storage adapter."""

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Args:
            base_dir: Base directory for file storage (defaults to UPLOAD_DIR)
        """
        if base_dir is None:
            from ...core.config import UPLOAD_DIR
            base_dir = UPLOAD_DIR

        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def initialize(self):
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def close(self):
        pass

    def _get_full_path(self, key: str) -> Path:
        """Resolve a key inside base_dir, rejecting traversal outside it."""
        normalized = Path(key).as_posix().lstrip("/")
        full_path = (self.base_dir / normalized).resolve()
        if self.base_dir not in full_path.parents:
            raise ValueError(f"Invalid storage key: {key}")
        return full_path

    async def save_bytes(self, data: bytes, key: str, content_type: str) -> str:
        full_path = self._get_full_path(key)

        def _save():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = full_path.with_name(full_path.name + ".part")
            tmp_path.write_bytes(data)
            os.replace(tmp_path, full_path)

        # Run in executor to avoid blocking
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _save)
        logger.debug(f"Stored {len(data)} bytes at {key}")
        return key

    async def get_file(self, key: str) -> bytes:
        full_path = self._get_full_path(key)

        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {key}")

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, full_path.read_bytes)

    async def delete_file(self, key: str) -> bool:
        full_path = self._get_full_path(key)

        if not full_path.exists():
            return False

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, full_path.unlink)
        return True

    async def file_exists(self, key: str) -> bool:
        return self._get_full_path(key).exists()
