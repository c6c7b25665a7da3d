"""
Repository interfaces - Define contracts for data access.
Follows Interface Segregation Principle - specific interfaces for specific needs.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..domain.entities import (
    AnalysisStatus,
    AnalysisType,
    Document,
    DocumentAnalysis,
    ExtractedClause,
    Page,
    ProcessingStatus,
)


class IDocumentRepository(ABC):
    """
    Interface for document data access.
    Business logic depends on this interface, not concrete implementations.
    """

    @abstractmethod
    async def create(self, document: Document) -> Document:
        pass

    @abstractmethod
    async def get_by_id(self, doc_id: str) -> Optional[Document]:
        pass

    @abstractmethod
    async def transition(
        self, doc_id: str, expected: Iterable[ProcessingStatus], updates: Dict
    ) -> Optional[Document]:
        """Compare-and-set on processing_status; None if the document was not in an expected state."""
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: str, page: int, size: int, search: Optional[str] = None) -> Page:
        pass

    @abstractmethod
    async def delete(self, doc_id: str) -> Optional[Document]:
        """Delete with cascade; returns the deleted document."""
        pass

    @abstractmethod
    async def find_stale(self, statuses: Iterable[ProcessingStatus], updated_before: str) -> List[Document]:
        pass


class IAnalysisRepository(ABC):
    """Interface for analysis data access."""

    @abstractmethod
    async def claim(self, analysis: DocumentAnalysis) -> Optional[DocumentAnalysis]:
        """Insert as PENDING unless the (document, type) slot is in flight."""
        pass

    @abstractmethod
    async def get_by_id(self, analysis_id: str) -> Optional[DocumentAnalysis]:
        pass

    @abstractmethod
    async def transition(
        self, analysis_id: str, expected: AnalysisStatus, updates: Dict
    ) -> Optional[DocumentAnalysis]:
        pass

    @abstractmethod
    async def list_for_document(
        self, document_id: str, analysis_type: Optional[AnalysisType] = None
    ) -> List[DocumentAnalysis]:
        pass

    @abstractmethod
    async def find_stale(self, statuses: Iterable[AnalysisStatus], updated_before: str) -> List[DocumentAnalysis]:
        pass


class IClauseRepository(ABC):
    """Interface for clause data access."""

    @abstractmethod
    async def replace_batch(
        self, analysis_id: str, clauses: List[ExtractedClause], updates: Dict
    ) -> Optional[DocumentAnalysis]:
        """Complete the RUNNING extraction and swap in clauses atomically."""
        pass

    @abstractmethod
    async def list_for_document(self, document_id: str) -> List[ExtractedClause]:
        pass
