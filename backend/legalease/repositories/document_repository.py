"""
Document Repository - Concrete implementation of document data access.
Maps between domain entities and database adapters.
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .interfaces import IDocumentRepository
from ..domain.entities import Document, Page, ProcessingStatus
from ..services.database.base import DatabaseInterface
from ..core.logging_config import get_logger

logger = get_logger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def serialize_updates(updates: Dict) -> Dict:
    """Convert enum and datetime values in an update dict to their stored form."""
    serialized = {}
    for key, value in updates.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif hasattr(value, "value") and isinstance(getattr(value, "value"), str):
            value = value.value
        serialized[key] = value
    return serialized


class DocumentRepository(IDocumentRepository):
    """
    Repository for document data access.
    Maps domain entities to database operations.
    """

    def __init__(self, db_service: DatabaseInterface):
        """
        Args:
            db_service: Database adapter (dependency injection)
        """
        self._db = db_service

    def _to_entity(self, data: dict) -> Document:
        return Document(
            id=data["id"],
            owner_id=data["owner_id"],
            file_name=data["file_name"],
            original_name=data["original_name"],
            file_size=data["file_size"],
            content_type=data["content_type"],
            storage_key=data["storage_key"],
            processing_status=ProcessingStatus(data["processing_status"]),
            processing_error=data.get("processing_error"),
            extracted_text=data.get("extracted_text"),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
        )

    def _to_dict(self, document: Document) -> dict:
        return {
            "id": document.id,
            "owner_id": document.owner_id,
            "file_name": document.file_name,
            "original_name": document.original_name,
            "file_size": document.file_size,
            "content_type": document.content_type,
            "storage_key": document.storage_key,
            "processing_status": document.processing_status.value,
            "processing_error": document.processing_error,
            "extracted_text": document.extracted_text,
            "created_at": document.created_at.isoformat(),
            "updated_at": document.updated_at.isoformat(),
        }

    async def create(self, document: Document) -> Document:
        result = await self._db.create_document(self._to_dict(document))
        return self._to_entity(result)

    async def get_by_id(self, doc_id: str) -> Optional[Document]:
        data = await self._db.get_document(doc_id)
        return self._to_entity(data) if data else None

    async def transition(
        self, doc_id: str, expected: Iterable[ProcessingStatus], updates: Dict
    ) -> Optional[Document]:
        result = await self._db.transition_document(
            doc_id, [status.value for status in expected], serialize_updates(updates)
        )
        return self._to_entity(result) if result else None

    async def list_for_owner(self, owner_id: str, page: int, size: int, search: Optional[str] = None) -> Page:
        rows, total = await self._db.list_documents(owner_id, offset=page * size, limit=size, search=search)
        return Page(content=[self._to_entity(row) for row in rows], total_elements=total, number=page, size=size)

    async def delete(self, doc_id: str) -> Optional[Document]:
        data = await self._db.delete_document(doc_id)
        return self._to_entity(data) if data else None

    async def find_stale(self, statuses: Iterable[ProcessingStatus], updated_before: str) -> List[Document]:
        rows = await self._db.find_stale_documents([s.value for s in statuses], updated_before)
        return [self._to_entity(row) for row in rows]
