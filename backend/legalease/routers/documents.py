"""
Documents Router - Handles document upload, listing, retrieval and deletion.

Architecture:
- Router handles HTTP request/response only
- Business logic delegated to DocumentService
- Every route is scoped to the authenticated owner

Example Usage:
    POST /api/documents/upload - Upload a PDF/DOC/DOCX and extract its text
    GET /api/documents?page=0&size=10&search=lease - List own documents
    GET /api/documents/{id} - Get one document
    DELETE /api/documents/{id} - Delete a document with its analyses and clauses
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..api.dto import DocumentDTO, DocumentPageDTO, MessageDTO
from ..api.mappers import DocumentMapper
from ..core.config import MAX_UPLOAD_BYTES
from ..core.logging_config import get_logger
from ..core.security import get_current_owner
from ..services.document_service import DocumentService
from .dependencies import get_document_service

logger = get_logger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/upload", response_model=DocumentDTO)
async def upload_document(
    file: UploadFile = File(...),
    owner_id: str = Depends(get_current_owner),
    service: DocumentService = Depends(get_document_service),
):
    """
    Upload a legal document and extract its text.

    Extraction finishes before the response, so the returned document is
    COMPLETED or FAILED (with processingError). Unsupported types, empty
    files and files over 50 MiB are rejected with 400 and nothing is stored.

    Example Response:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "fileName": "0b8f...e1.pdf",
            "originalName": "contract.pdf",
            "fileSize": 2097152,
            "contentType": "application/pdf",
            "processingStatus": "COMPLETED",
            "processingError": null,
            "hasExtractedText": true,
            ...
        }
    """
    try:
        # One byte past the limit is enough to know the upload is too large
        file_bytes = await file.read(MAX_UPLOAD_BYTES + 1)
    finally:
        await file.close()

    document = await service.create_document(owner_id, file_bytes, file.filename, file.content_type)
    return DocumentMapper.to_dto(document)


@router.get("", response_model=DocumentPageDTO)
async def list_documents(
    page: int = Query(0),
    size: int = Query(10),
    search: Optional[str] = Query(None),
    owner_id: str = Depends(get_current_owner),
    service: DocumentService = Depends(get_document_service),
):
    """
    List the caller's documents, newest first.

    Args:
        page: Zero-based page index
        size: Page size (1-100)
        search: Optional case-insensitive substring of the original file name
    """
    result = await service.list_documents(owner_id, page=page, size=size, search=search)
    return DocumentMapper.to_page_dto(result)


@router.get("/{document_id}", response_model=DocumentDTO)
async def get_document(
    document_id: str,
    owner_id: str = Depends(get_current_owner),
    service: DocumentService = Depends(get_document_service),
):
    """Get one document. Another owner's document is reported as not found."""
    document = await service.get_document(document_id, owner_id)
    return DocumentMapper.to_dto(document)


@router.delete("/{document_id}", response_model=MessageDTO)
async def delete_document(
    document_id: str,
    owner_id: str = Depends(get_current_owner),
    service: DocumentService = Depends(get_document_service),
):
    """Delete a document, its analyses, its clauses and its stored file."""
    await service.delete_document(document_id, owner_id)
    return MessageDTO(message="Document deleted successfully")
