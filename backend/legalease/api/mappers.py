"""
Mappers between domain entities and DTOs.
Separates domain layer from API layer.
"""
from typing import List

from ..domain.entities import Document, DocumentAnalysis, ExtractedClause, Page
from .dto import AnalysisDTO, ClauseDTO, DocumentDTO, DocumentPageDTO


class DocumentMapper:
    """Maps between Document entity and DocumentDTO."""

    @staticmethod
    def to_dto(document: Document) -> DocumentDTO:
        return DocumentDTO(
            id=document.id,
            file_name=document.file_name,
            original_name=document.original_name,
            file_size=document.file_size,
            content_type=document.content_type,
            processing_status=document.processing_status.value,
            processing_error=document.processing_error,
            has_extracted_text=document.has_extracted_text,
            created_at=document.created_at,
            updated_at=document.updated_at,
        )

    @staticmethod
    def to_page_dto(page: Page) -> DocumentPageDTO:
        return DocumentPageDTO(
            content=[DocumentMapper.to_dto(doc) for doc in page.content],
            total_pages=page.total_pages,
            total_elements=page.total_elements,
            number=page.number,
            size=page.size,
        )


class AnalysisMapper:
    """Maps between DocumentAnalysis entity and AnalysisDTO."""

    @staticmethod
    def to_dto(analysis: DocumentAnalysis) -> AnalysisDTO:
        return AnalysisDTO(
            id=analysis.id,
            document_id=analysis.document_id,
            analysis_type=analysis.analysis_type.value,
            status=analysis.status.value,
            prompt=analysis.prompt,
            template_type=analysis.template_type,
            result=analysis.result,
            confidence_score=analysis.confidence_score,
            error_message=analysis.error_message,
            created_at=analysis.created_at,
            updated_at=analysis.updated_at,
            started_at=analysis.started_at,
            completed_at=analysis.completed_at,
        )

    @staticmethod
    def to_dto_list(analyses: List[DocumentAnalysis]) -> List[AnalysisDTO]:
        return [AnalysisMapper.to_dto(a) for a in analyses]


class ClauseMapper:
    """Maps between ExtractedClause entity and ClauseDTO."""

    @staticmethod
    def to_dto(clause: ExtractedClause) -> ClauseDTO:
        return ClauseDTO(
            id=clause.id,
            document_id=clause.document_id,
            analysis_id=clause.analysis_id,
            clause_type=clause.clause_type,
            clause_text=clause.clause_text,
            plain_english_explanation=clause.plain_english_explanation,
            importance_level=clause.importance_level.value,
            confidence_score=clause.confidence_score,
            created_at=clause.created_at,
        )

    @staticmethod
    def to_dto_list(clauses: List[ExtractedClause]) -> List[ClauseDTO]:
        return [ClauseMapper.to_dto(c) for c in clauses]
