"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from .value_objects import DocumentId, AnalysisId, OwnerId, StorageKey


class ProcessingStatus(str, Enum):
    """Document processing lifecycle."""
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AnalysisType(str, Enum):
    SUMMARY = "SUMMARY"
    CLAUSE_EXTRACTION = "CLAUSE_EXTRACTION"
    QUESTION_ANSWER = "QUESTION_ANSWER"
    TEMPLATE_GENERATION = "TEMPLATE_GENERATION"


class AnalysisStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @classmethod
    def in_flight(cls) -> tuple:
        return (cls.PENDING, cls.RUNNING)


class ImportanceLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _IMPORTANCE_RANK[self]


_IMPORTANCE_RANK = {
    ImportanceLevel.LOW: 0,
    ImportanceLevel.MEDIUM: 1,
    ImportanceLevel.HIGH: 2,
    ImportanceLevel.CRITICAL: 3,
}


@dataclass
class Document:
    """
    Document entity - an uploaded legal file and its processing state.
    This is a pure domain object, independent of persistence.

    Invariant: extracted_text is not None iff processing_status is COMPLETED.
    """
    id: DocumentId
    owner_id: OwnerId
    file_name: str
    original_name: str
    file_size: int
    content_type: str
    storage_key: StorageKey
    processing_status: ProcessingStatus
    created_at: datetime
    updated_at: datetime
    processing_error: Optional[str] = None
    extracted_text: Optional[str] = None

    @property
    def has_extracted_text(self) -> bool:
        return self.extracted_text is not None and bool(self.extracted_text.strip())

    def is_owned_by(self, owner_id: str) -> bool:
        return str(self.owner_id) == str(owner_id)


@dataclass
class DocumentAnalysis:
    """
    One AI-backed operation against a document, or a standalone template.

    Exactly one of result/error_message is set once the analysis is terminal.
    """
    id: AnalysisId
    document_id: Optional[DocumentId]
    owner_id: OwnerId
    analysis_type: AnalysisType
    status: AnalysisStatus
    created_at: datetime
    updated_at: datetime
    prompt: Optional[str] = None
    template_type: Optional[str] = None
    result: Optional[str] = None
    confidence_score: Optional[float] = None
    error_message: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def is_terminal(self) -> bool:
        return self.status in (AnalysisStatus.COMPLETED, AnalysisStatus.FAILED)


@dataclass
class ExtractedClause:
    """One contractual provision produced by a clause extraction run."""
    id: str
    document_id: DocumentId
    clause_type: str
    clause_text: str
    importance_level: ImportanceLevel
    created_at: datetime
    analysis_id: Optional[AnalysisId] = None
    plain_english_explanation: Optional[str] = None
    confidence_score: Optional[float] = None


@dataclass
class Page:
    """A zero-based page of results."""
    content: list
    total_elements: int
    number: int
    size: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        self.total_pages = (self.total_elements + self.size - 1) // self.size if self.size > 0 else 0
