"""
Domain layer - Contains business entities and domain logic.
This layer is independent of infrastructure and frameworks.
"""
from .entities import (
    AnalysisStatus,
    AnalysisType,
    Document,
    DocumentAnalysis,
    ExtractedClause,
    ImportanceLevel,
    Page,
    ProcessingStatus,
)
from .value_objects import AnalysisId, DocumentId, OwnerId, StorageKey

__all__ = [
    "AnalysisStatus",
    "AnalysisType",
    "Document",
    "DocumentAnalysis",
    "ExtractedClause",
    "ImportanceLevel",
    "Page",
    "ProcessingStatus",
    "AnalysisId",
    "DocumentId",
    "OwnerId",
    "StorageKey",
]
