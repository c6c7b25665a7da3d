"""
AI Router - Handles AI-backed analyses of documents.

Analyses run as background jobs. Each endpoint waits for its job up to a
bounded time: a finished job is returned with 200, a job still in flight is
returned with 202 and can be polled at GET /api/ai/analyses/{analysisId}.
A job that failed is still a 200 whose body has status FAILED and an
errorMessage.

Example Usage:
    POST /api/ai/documents/{id}/summarize
    POST /api/ai/documents/{id}/extract-clauses
    POST /api/ai/documents/{id}/question  {"question": "..."}
    GET  /api/ai/documents/{id}/analyses?analysisType=SUMMARY
    GET  /api/ai/documents/{id}/clauses
    POST /api/ai/templates/generate  {"templateType": "...", "requirements": "..."}
    GET  /api/ai/analyses/{analysisId}
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ..api.dto import AnalysisDTO, ClauseDTO, QuestionRequestDTO, TemplateRequestDTO
from ..api.exceptions import ValidationError
from ..api.mappers import AnalysisMapper, ClauseMapper
from ..core.logging_config import get_logger
from ..core.security import get_current_owner
from ..domain.entities import AnalysisStatus, AnalysisType, DocumentAnalysis
from ..services.analysis_engine import AnalysisEngine
from .dependencies import get_analysis_engine

logger = get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

ANALYSIS_ID_HEADER = "X-Analysis-Id"
ANALYSIS_STATUS_HEADER = "X-Analysis-Status"


def _analysis_response(analysis: DocumentAnalysis, response: Response) -> AnalysisDTO:
    if not analysis.is_terminal():
        response.status_code = status.HTTP_202_ACCEPTED
    return AnalysisMapper.to_dto(analysis)


def _parse_analysis_type(value: Optional[str]) -> Optional[AnalysisType]:
    if value is None or not value.strip():
        return None
    try:
        return AnalysisType(value.strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in AnalysisType)
        raise ValidationError(f"Unknown analysisType '{value}'. Allowed: {allowed}")


@router.post("/documents/{document_id}/summarize", response_model=AnalysisDTO)
async def summarize_document(
    document_id: str,
    response: Response,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """
    Summarize a document in plain English.

    Returns 409 if the document has no extracted text, or if a summary of
    this document is already in progress.
    """
    analysis = await engine.summarize(document_id, owner_id)
    return _analysis_response(analysis, response)


@router.post("/documents/{document_id}/extract-clauses", response_model=List[ClauseDTO])
async def extract_clauses(
    document_id: str,
    response: Response,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """
    Extract key clauses, replacing the document's previous clause set.

    The body is the new clause set once the run has completed. While the
    run is in flight (202) or if it failed, the body is empty; the run can be
    followed through the X-Analysis-Id and X-Analysis-Status headers.
    """
    outcome = await engine.extract_clauses(document_id, owner_id)
    response.headers[ANALYSIS_ID_HEADER] = outcome.analysis.id
    response.headers[ANALYSIS_STATUS_HEADER] = outcome.analysis.status.value
    if not outcome.analysis.is_terminal():
        response.status_code = status.HTTP_202_ACCEPTED
    elif outcome.analysis.status == AnalysisStatus.FAILED:
        logger.info(f"Clause extraction {outcome.analysis.id} failed: {outcome.analysis.error_message}")
    return ClauseMapper.to_dto_list(outcome.clauses)


@router.post("/documents/{document_id}/question", response_model=AnalysisDTO)
async def ask_question(
    document_id: str,
    request: QuestionRequestDTO,
    response: Response,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Answer a question using only the document's content."""
    analysis = await engine.ask_question(document_id, owner_id, request.question)
    return _analysis_response(analysis, response)


@router.get("/documents/{document_id}/analyses", response_model=List[AnalysisDTO])
async def list_analyses(
    document_id: str,
    analysis_type: Optional[str] = Query(None, alias="analysisType"),
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Analysis history of a document, newest first, optionally filtered by type."""
    analyses = await engine.list_analyses(document_id, owner_id, _parse_analysis_type(analysis_type))
    return AnalysisMapper.to_dto_list(analyses)


@router.get("/documents/{document_id}/clauses", response_model=List[ClauseDTO])
async def list_clauses(
    document_id: str,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Current clause set of a document, most important first."""
    clauses = await engine.list_clauses(document_id, owner_id)
    return ClauseMapper.to_dto_list(clauses)


@router.post("/templates/generate", response_model=AnalysisDTO)
async def generate_template(
    request: TemplateRequestDTO,
    response: Response,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Generate a legal document template with [BRACKETED] placeholders."""
    analysis = await engine.generate_template(owner_id, request.template_type, request.requirements)
    return _analysis_response(analysis, response)


@router.get("/analyses/{analysis_id}", response_model=AnalysisDTO)
async def get_analysis(
    analysis_id: str,
    owner_id: str = Depends(get_current_owner),
    engine: AnalysisEngine = Depends(get_analysis_engine),
):
    """Current state of one analysis job."""
    return AnalysisMapper.to_dto(await engine.get_analysis(analysis_id, owner_id))
