"""
Repository layer - Abstracts data access.
Follows Repository Pattern for clean separation of data access from business logic.
"""
from .interfaces import IAnalysisRepository, IClauseRepository, IDocumentRepository
from .document_repository import DocumentRepository
from .analysis_repository import AnalysisRepository
from .clause_repository import ClauseRepository

__all__ = [
    "DocumentRepository",
    "IDocumentRepository",
    "AnalysisRepository",
    "IAnalysisRepository",
    "ClauseRepository",
    "IClauseRepository",
]
