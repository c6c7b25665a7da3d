"""
JSON file-based adapter implementing DatabaseInterface.
Perfect for local demos - stores all data in JSON files for persistence.
Data persists between restarts, no database setup needed.
"""
import asyncio
import copy
import json
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from .memory_adapter import MemoryAdapter
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class JSONAdapter(MemoryAdapter):
    """
    JSON file-based record store.
    Keeps the working set in memory (same semantics as MemoryAdapter) and
    rewrites the JSON files after every commit.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """
        Initialize JSON adapter.

        Args:
            data_dir: Directory to store JSON files (defaults to backend/data/json_db)
        """
        super().__init__()
        if data_dir is None:
            base_dir = Path(__file__).resolve().parent.parent.parent.parent
            data_dir = base_dir / "data" / "json_db"

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.documents_file = self.data_dir / "documents.json"
        self.analyses_file = self.data_dir / "analyses.json"
        self.clauses_file = self.data_dir / "clauses.json"

        # Serializes file writes; snapshots carry a version so an older one never overwrites a newer one
        self._file_lock = Lock()
        self._version = 0
        self._written_version = 0

    async def initialize(self):
        """Initialize database - load data from JSON files."""
        with self._lock:
            self._documents = self._load_file(self.documents_file)
            self._analyses = self._load_file(self.analyses_file)
            self._clauses = self._load_file(self.clauses_file)
            self._rebuild_indexes()
        logger.info(
            f"Loaded JSON database from {self.data_dir}: {len(self._documents)} documents, "
            f"{len(self._analyses)} analyses, {len(self._clauses)} clauses"
        )

    async def close(self):
        """Close database - save data to JSON files."""
        await self._commit()

    def _load_file(self, path: Path) -> Dict[str, Dict]:
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load {path.name}: {e}")
            return {}

    async def _commit(self):
        """Save a snapshot of memory to JSON files."""
        with self._lock:
            self._version += 1
            version = self._version
            snapshot = {
                self.documents_file: copy.deepcopy(self._documents),
                self.analyses_file: copy.deepcopy(self._analyses),
                self.clauses_file: copy.deepcopy(self._clauses),
            }

        def _save():
            with self._file_lock:
                if version < self._written_version:
                    return
                for path, data in snapshot.items():
                    _write_atomically(path, data)
                self._written_version = version

        # Run in executor to avoid blocking
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _save)


def _write_atomically(path: Path, data: Dict):
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    os.replace(tmp_path, path)
