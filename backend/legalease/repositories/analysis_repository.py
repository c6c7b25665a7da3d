"""
Analysis Repository - data access for DocumentAnalysis records.
"""
from typing import Dict, Iterable, List, Optional

from .document_repository import parse_timestamp, serialize_updates
from .interfaces import IAnalysisRepository
from ..domain.entities import AnalysisStatus, AnalysisType, DocumentAnalysis
from ..services.database.base import DatabaseInterface


class AnalysisRepository(IAnalysisRepository):
    """Maps DocumentAnalysis entities to record store operations."""

    def __init__(self, db_service: DatabaseInterface):
        self._db = db_service

    @staticmethod
    def to_entity(data: dict) -> DocumentAnalysis:
        return DocumentAnalysis(
            id=data["id"],
            document_id=data.get("document_id"),
            owner_id=data["owner_id"],
            analysis_type=AnalysisType(data["analysis_type"]),
            status=AnalysisStatus(data["status"]),
            prompt=data.get("prompt"),
            template_type=data.get("template_type"),
            result=data.get("result"),
            confidence_score=data.get("confidence_score"),
            error_message=data.get("error_message"),
            created_at=parse_timestamp(data["created_at"]),
            updated_at=parse_timestamp(data["updated_at"]),
            started_at=parse_timestamp(data.get("started_at")),
            completed_at=parse_timestamp(data.get("completed_at")),
        )

    @staticmethod
    def to_dict(analysis: DocumentAnalysis) -> dict:
        return {
            "id": analysis.id,
            "document_id": analysis.document_id,
            "owner_id": analysis.owner_id,
            "analysis_type": analysis.analysis_type.value,
            "status": analysis.status.value,
            "prompt": analysis.prompt,
            "template_type": analysis.template_type,
            "result": analysis.result,
            "confidence_score": analysis.confidence_score,
            "error_message": analysis.error_message,
            "created_at": analysis.created_at.isoformat(),
            "updated_at": analysis.updated_at.isoformat(),
            "started_at": analysis.started_at.isoformat() if analysis.started_at else None,
            "completed_at": analysis.completed_at.isoformat() if analysis.completed_at else None,
        }

    async def claim(self, analysis: DocumentAnalysis) -> Optional[DocumentAnalysis]:
        data = await self._db.claim_analysis(self.to_dict(analysis))
        return self.to_entity(data) if data else None

    async def get_by_id(self, analysis_id: str) -> Optional[DocumentAnalysis]:
        data = await self._db.get_analysis(analysis_id)
        return self.to_entity(data) if data else None

    async def transition(
        self, analysis_id: str, expected: AnalysisStatus, updates: Dict
    ) -> Optional[DocumentAnalysis]:
        data = await self._db.transition_analysis(analysis_id, expected.value, serialize_updates(updates))
        return self.to_entity(data) if data else None

    async def list_for_document(
        self, document_id: str, analysis_type: Optional[AnalysisType] = None
    ) -> List[DocumentAnalysis]:
        rows = await self._db.list_analyses(document_id, analysis_type.value if analysis_type else None)
        return [self.to_entity(row) for row in rows]

    async def find_stale(self, statuses: Iterable[AnalysisStatus], updated_before: str) -> List[DocumentAnalysis]:
        rows = await self._db.find_stale_analyses([s.value for s in statuses], updated_before)
        return [self.to_entity(row) for row in rows]
