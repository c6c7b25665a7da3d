"""
Document Service - the document registry.

Validates uploads, stores their bytes, records each document and drives it
through text extraction. Every status change is a compare-and-set on the
record, so a document can never be moved out of a state twice.
"""
import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..api.exceptions import ExtractionError, NotFoundError, ValidationError
from ..core.config import MAX_UPLOAD_BYTES
from ..core.logging_config import get_logger
from ..domain.entities import Document, Page, ProcessingStatus
from ..repositories.interfaces import IDocumentRepository
from .storage.base import FileStorageInterface
from .text_extractors.factory import TextExtractorFactory

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DOC_CONTENT_TYPE = "application/msword"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

ALLOWED_CONTENT_TYPES = {
    PDF_CONTENT_TYPE: ".pdf",
    DOC_CONTENT_TYPE: ".doc",
    DOCX_CONTENT_TYPE: ".docx",
}
_EXTENSION_CONTENT_TYPES = {ext: ct for ct, ext in ALLOWED_CONTENT_TYPES.items()}

# Declared by clients that do not know the real type; resolved from the extension instead
_GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

MAX_PAGE_SIZE = 100


def resolve_content_type(content_type: Optional[str], file_name: Optional[str]) -> Optional[str]:
    """Normalize the declared type, falling back to the extension when it is generic."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared in ALLOWED_CONTENT_TYPES:
        return declared
    if declared in _GENERIC_CONTENT_TYPES and file_name:
        return _EXTENSION_CONTENT_TYPES.get(Path(file_name).suffix.lower())
    return None


class DocumentService:
    """
    Service for document business logic.
    Coordinates the document repository, blob storage and text extraction.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        storage: FileStorageInterface,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ):
        """
        Args:
            document_repo: Document repository (dependency injection)
            storage: Blob storage adapter (dependency injection)
            max_upload_bytes: Upper bound on accepted file size
        """
        self._repo = document_repo
        self._storage = storage
        self._max_upload_bytes = max_upload_bytes

    async def create_document(
        self,
        owner_id: str,
        file_bytes: bytes,
        file_name: Optional[str],
        content_type: Optional[str],
    ) -> Document:
        """
        Accept an upload, store it and extract its text.

        Extraction runs before this returns, so the document comes back
        COMPLETED or FAILED. Extraction failures never raise here.

        Raises:
            ValidationError: unsupported type, empty file or file over the size limit
        """
        original_name = Path(file_name or "").name or "document"
        resolved_type = resolve_content_type(content_type, original_name)
        if resolved_type is None:
            raise ValidationError(
                f"Unsupported file type '{content_type}'. Only PDF, DOC and DOCX documents are accepted"
            )
        if not file_bytes:
            raise ValidationError("Uploaded file is empty")
        if len(file_bytes) > self._max_upload_bytes:
            raise ValidationError(
                f"File size {len(file_bytes)} bytes exceeds the maximum of {self._max_upload_bytes} bytes"
            )

        doc_id = str(uuid.uuid4())
        stored_name = f"{uuid.uuid4()}{ALLOWED_CONTENT_TYPES[resolved_type]}"
        storage_key = f"documents/{owner_id}/{stored_name}"

        await self._storage.save_bytes(file_bytes, storage_key, resolved_type)

        now = datetime.now(timezone.utc)
        document = Document(
            id=doc_id,
            owner_id=owner_id,
            file_name=stored_name,
            original_name=original_name,
            file_size=len(file_bytes),
            content_type=resolved_type,
            storage_key=storage_key,
            processing_status=ProcessingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        try:
            document = await self._repo.create(document)
        except Exception:
            logger.error(f"Failed to record document {doc_id}, removing stored blob {storage_key}")
            await self._storage.delete_file(storage_key)
            raise

        logger.info(f"Document {doc_id} created for owner {owner_id} ({resolved_type}, {len(file_bytes)} bytes)")
        return await self._extract(document, file_bytes)

    async def _extract(self, document: Document, file_bytes: bytes) -> Document:
        processing = await self._repo.transition(
            document.id,
            [ProcessingStatus.PENDING],
            {"processing_status": ProcessingStatus.PROCESSING},
        )
        if processing is None:
            logger.warning(f"Document {document.id} left PENDING before extraction started")
            return await self._repo.get_by_id(document.id) or document

        loop = asyncio.get_event_loop()
        try:
            text = await loop.run_in_executor(
                None,
                TextExtractorFactory.extract_text,
                file_bytes,
                document.content_type,
                document.original_name,
            )
        except ExtractionError as e:
            return await self._finish(document.id, None, str(e))
        except Exception as e:
            logger.error(f"Unexpected extraction failure for document {document.id}: {e}", exc_info=True)
            return await self._finish(document.id, None, f"Text extraction failed: {e}")

        return await self._finish(document.id, text, None)

    async def _finish(self, doc_id: str, text: Optional[str], error: Optional[str]) -> Document:
        if error is None:
            updates = {
                "processing_status": ProcessingStatus.COMPLETED,
                "extracted_text": text,
                "processing_error": None,
            }
        else:
            updates = {
                "processing_status": ProcessingStatus.FAILED,
                "extracted_text": None,
                "processing_error": error,
            }

        finished = await self._repo.transition(doc_id, [ProcessingStatus.PROCESSING], updates)
        if finished is None:
            # Sweeper or a delete got there first
            logger.warning(f"Document {doc_id} was no longer PROCESSING when extraction finished")
            current = await self._repo.get_by_id(doc_id)
            if current is None:
                raise NotFoundError(f"Document not found with id: {doc_id}")
            return current

        if error is None:
            logger.info(f"Document {doc_id} extracted ({len(text)} characters)")
        else:
            logger.warning(f"Document {doc_id} extraction failed: {error}")
        return finished

    async def get_document(self, doc_id: str, owner_id: str) -> Document:
        """
        Raises:
            NotFoundError: if absent or owned by another account
        """
        document = await self._repo.get_by_id(doc_id)
        if document is None or not document.is_owned_by(owner_id):
            raise NotFoundError(f"Document not found with id: {doc_id}")
        return document

    async def list_documents(
        self, owner_id: str, page: int = 0, size: int = 10, search: Optional[str] = None
    ) -> Page:
        if page < 0:
            raise ValidationError("Page index must not be less than zero")
        if size < 1 or size > MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")
        search = search.strip() if search else None
        return await self._repo.list_for_owner(owner_id, page, size, search or None)

    async def delete_document(self, doc_id: str, owner_id: str) -> None:
        """
        Delete the record (with its analyses and clauses), then its blob.

        Raises:
            NotFoundError: if absent or owned by another account
        """
        document = await self.get_document(doc_id, owner_id)
        deleted = await self._repo.delete(document.id)
        if deleted is None:
            raise NotFoundError(f"Document not found with id: {doc_id}")

        try:
            if not await self._storage.delete_file(deleted.storage_key):
                logger.warning(f"Blob {deleted.storage_key} for document {doc_id} was already gone")
        except Exception as e:
            # The record is gone; an orphaned blob is only wasted space
            logger.warning(f"Failed to delete blob {deleted.storage_key} for document {doc_id}: {e}")

        logger.info(f"Document {doc_id} deleted by owner {owner_id}")
