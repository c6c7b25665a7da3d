"""
Clause Repository - data access for ExtractedClause batches.
"""
from typing import Dict, List, Optional

from .analysis_repository import AnalysisRepository
from .document_repository import parse_timestamp, serialize_updates
from .interfaces import IClauseRepository
from ..domain.entities import DocumentAnalysis, ExtractedClause, ImportanceLevel
from ..services.database.base import DatabaseInterface


class ClauseRepository(IClauseRepository):
    """Maps ExtractedClause entities to record store operations."""

    def __init__(self, db_service: DatabaseInterface):
        self._db = db_service

    def _to_entity(self, data: dict) -> ExtractedClause:
        return ExtractedClause(
            id=data["id"],
            document_id=data["document_id"],
            analysis_id=data.get("analysis_id"),
            clause_type=data["clause_type"],
            clause_text=data["clause_text"],
            plain_english_explanation=data.get("plain_english_explanation"),
            importance_level=ImportanceLevel(data["importance_level"]),
            confidence_score=data.get("confidence_score"),
            created_at=parse_timestamp(data["created_at"]),
        )

    def _to_dict(self, clause: ExtractedClause) -> dict:
        return {
            "id": clause.id,
            "document_id": clause.document_id,
            "analysis_id": clause.analysis_id,
            "clause_type": clause.clause_type,
            "clause_text": clause.clause_text,
            "plain_english_explanation": clause.plain_english_explanation,
            "importance_level": clause.importance_level.value,
            "confidence_score": clause.confidence_score,
            "created_at": clause.created_at.isoformat(),
        }

    async def replace_batch(
        self, analysis_id: str, clauses: List[ExtractedClause], updates: Dict
    ) -> Optional[DocumentAnalysis]:
        data = await self._db.complete_clause_extraction(
            analysis_id, [self._to_dict(c) for c in clauses], serialize_updates(updates)
        )
        return AnalysisRepository.to_entity(data) if data else None

    async def list_for_document(self, document_id: str) -> List[ExtractedClause]:
        rows = await self._db.list_clauses(document_id)
        return [self._to_entity(row) for row in rows]
