"""
Analysis Job Engine.

Schedules, executes and records AI-backed analyses of documents.

Each request claims its (document, analysis type) slot by inserting a PENDING
row; the claim fails while another analysis of that type is in flight for the
document. A worker task then moves the row PENDING -> RUNNING, calls the model
gateway in a thread under a timeout with bounded retries, and moves the row
RUNNING -> COMPLETED or FAILED. Every move is a compare-and-set, so the row
is the single source of truth for job state and no lock is held across a
gateway call.

The caller waits for the worker up to wait_seconds. A still-running job is
returned as-is and the worker carries on; clients poll get_analysis().
"""
import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Set

from ..api.exceptions import ConflictError, GatewayError, NotFoundError, PreconditionError, ValidationError
from ..core.config import ANALYSIS_WAIT_SECONDS, MODEL_MAX_OUTPUT_TOKENS, MODEL_TIMEOUT_SECONDS
from ..core.logging_config import get_logger
from ..domain.entities import (
    AnalysisStatus,
    AnalysisType,
    Document,
    DocumentAnalysis,
    ExtractedClause,
    ProcessingStatus,
)
from ..repositories.interfaces import IAnalysisRepository, IClauseRepository, IDocumentRepository
from . import prompt_builder
from .ai_retry_handler import AIRetryHandler
from .clause_parser import parse_clauses
from .providers.base import AIProvider

logger = get_logger(__name__)


@dataclass
class ClauseExtractionResult:
    """The extraction run and, once it completed, the clause batch it produced."""
    analysis: DocumentAnalysis
    clauses: List[ExtractedClause]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be blank")
    return value.strip()


class AnalysisEngine:
    """
    Runs summaries, clause extractions, questions and template generation
    against the configured AI provider.
    """

    def __init__(
        self,
        document_repo: IDocumentRepository,
        analysis_repo: IAnalysisRepository,
        clause_repo: IClauseRepository,
        provider: AIProvider,
        retry_handler: Optional[AIRetryHandler] = None,
        wait_seconds: float = ANALYSIS_WAIT_SECONDS,
        timeout_seconds: float = MODEL_TIMEOUT_SECONDS,
        max_output_tokens: int = MODEL_MAX_OUTPUT_TOKENS,
    ):
        self._documents = document_repo
        self._analyses = analysis_repo
        self._clauses = clause_repo
        self._provider = provider
        self._retry_handler = retry_handler or AIRetryHandler()
        self._wait_seconds = wait_seconds
        self._timeout_seconds = timeout_seconds
        self._max_output_tokens = max_output_tokens
        self._tasks: Set[asyncio.Task] = set()

    @property
    def provider(self) -> AIProvider:
        return self._provider

    # Operations
    async def summarize(self, document_id: str, owner_id: str) -> DocumentAnalysis:
        document = await self._require_completed_document(document_id, owner_id)
        prompt = prompt_builder.build_summary_prompt(document.extracted_text)
        return await self._submit(document, AnalysisType.SUMMARY, prompt, self._complete_text)

    async def extract_clauses(self, document_id: str, owner_id: str) -> ClauseExtractionResult:
        """
        Run a clause extraction. Clauses are returned only when the run has
        COMPLETED within the wait bound; otherwise the list is empty and the
        analysis shows why.
        """
        document = await self._require_completed_document(document_id, owner_id)
        prompt = prompt_builder.build_clause_prompt(document.extracted_text)
        analysis = await self._submit(document, AnalysisType.CLAUSE_EXTRACTION, prompt, self._complete_clauses)

        clauses = []
        if analysis.status == AnalysisStatus.COMPLETED:
            clauses = await self.list_clauses(document_id, owner_id)
        return ClauseExtractionResult(analysis=analysis, clauses=clauses)

    async def ask_question(self, document_id: str, owner_id: str, question: Optional[str]) -> DocumentAnalysis:
        question = _require_text(question, "Question")
        document = await self._require_completed_document(document_id, owner_id)
        prompt = prompt_builder.build_question_prompt(document.extracted_text, question)
        return await self._submit(
            document, AnalysisType.QUESTION_ANSWER, prompt, self._complete_text, user_prompt=question
        )

    async def generate_template(
        self, owner_id: str, template_type: Optional[str], requirements: Optional[str]
    ) -> DocumentAnalysis:
        """Templates are standalone: no document, and no per-document concurrency slot."""
        template_type = _require_text(template_type, "Template type")
        requirements = _require_text(requirements, "Requirements")
        prompt = prompt_builder.build_template_prompt(template_type, requirements)
        return await self._submit(
            None,
            AnalysisType.TEMPLATE_GENERATION,
            prompt,
            self._complete_text,
            owner_id=owner_id,
            user_prompt=requirements,
            template_type=template_type,
        )

    # Queries
    async def get_analysis(self, analysis_id: str, owner_id: str) -> DocumentAnalysis:
        analysis = await self._analyses.get_by_id(analysis_id)
        if analysis is None or analysis.owner_id != owner_id:
            raise NotFoundError(f"Analysis not found with id: {analysis_id}")
        return analysis

    async def list_analyses(
        self, document_id: str, owner_id: str, analysis_type: Optional[AnalysisType] = None
    ) -> List[DocumentAnalysis]:
        """
        Analysis history of a document, newest first.

        A deleted (or never created) document has an empty history; a document
        owned by another account is reported as not found.
        """
        document = await self._documents.get_by_id(document_id)
        if document is None:
            return []
        if not document.is_owned_by(owner_id):
            raise NotFoundError(f"Document not found with id: {document_id}")
        return await self._analyses.list_for_document(document_id, analysis_type)

    async def list_clauses(self, document_id: str, owner_id: str) -> List[ExtractedClause]:
        """Current clause batch, most important first; ties keep extraction order."""
        await self._require_owned_document(document_id, owner_id)
        clauses = await self._clauses.list_for_document(document_id)
        return sorted(clauses, key=lambda c: c.importance_level.rank, reverse=True)

    # Scheduling
    async def _require_owned_document(self, document_id: str, owner_id: str) -> Document:
        document = await self._documents.get_by_id(document_id)
        if document is None or not document.is_owned_by(owner_id):
            raise NotFoundError(f"Document not found with id: {document_id}")
        return document

    async def _require_completed_document(self, document_id: str, owner_id: str) -> Document:
        document = await self._require_owned_document(document_id, owner_id)
        if document.processing_status != ProcessingStatus.COMPLETED or not document.has_extracted_text:
            raise PreconditionError(
                f"Document {document_id} has no extracted text (status: {document.processing_status.value})"
            )
        return document

    async def _submit(
        self,
        document: Optional[Document],
        analysis_type: AnalysisType,
        prompt: str,
        completer: Callable[[DocumentAnalysis, str], Awaitable[None]],
        owner_id: Optional[str] = None,
        user_prompt: Optional[str] = None,
        template_type: Optional[str] = None,
    ) -> DocumentAnalysis:
        now = _now()
        pending = DocumentAnalysis(
            id=str(uuid.uuid4()),
            document_id=document.id if document else None,
            owner_id=document.owner_id if document else owner_id,
            analysis_type=analysis_type,
            status=AnalysisStatus.PENDING,
            prompt=user_prompt,
            template_type=template_type,
            created_at=now,
            updated_at=now,
        )

        claimed = await self._analyses.claim(pending)
        if claimed is None:
            raise ConflictError(
                f"A {analysis_type.value} analysis is already in progress for document {pending.document_id}"
            )
        logger.info(f"Analysis {claimed.id} ({analysis_type.value}) queued for document {claimed.document_id}")

        task = asyncio.create_task(self._run(claimed, prompt, completer))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=self._wait_seconds)
        except asyncio.TimeoutError:
            logger.info(f"Analysis {claimed.id} still in flight after {self._wait_seconds}s, returning early")

        current = await self._analyses.get_by_id(claimed.id)
        if current is None:
            # Document deleted while the job ran
            raise NotFoundError(f"Analysis not found with id: {claimed.id}")
        return current

    async def _run(
        self,
        analysis: DocumentAnalysis,
        prompt: str,
        completer: Callable[[DocumentAnalysis, str], Awaitable[None]],
    ):
        running = await self._analyses.transition(
            analysis.id, AnalysisStatus.PENDING, {"status": AnalysisStatus.RUNNING, "started_at": _now()}
        )
        if running is None:
            logger.warning(f"Analysis {analysis.id} left PENDING before its worker started")
            return

        try:
            completion = await self._call_gateway(prompt)
            await completer(running, completion)
        except asyncio.CancelledError:
            await self._fail(analysis.id, "Analysis interrupted by shutdown")
            raise
        except GatewayError as e:
            logger.warning(f"Analysis {analysis.id} failed: {e}")
            await self._fail(analysis.id, str(e))
        except Exception as e:
            logger.error(f"Analysis {analysis.id} failed unexpectedly: {e}", exc_info=True)
            await self._fail(analysis.id, f"Unexpected error: {e}")

    async def _call_gateway(self, prompt: str) -> str:
        loop = asyncio.get_event_loop()
        retry_count = 0
        while True:
            try:
                return await asyncio.wait_for(
                    loop.run_in_executor(None, self._provider.complete, prompt, self._max_output_tokens),
                    timeout=self._timeout_seconds,
                )
            except asyncio.TimeoutError:
                raise GatewayError(
                    GatewayError.TIMEOUT, f"Model did not respond within {self._timeout_seconds:g} seconds"
                )
            except GatewayError as e:
                if not self._retry_handler.should_retry(e, retry_count):
                    raise
                delay = self._retry_handler.calculate_retry_delay(retry_count)
                retry_count += 1
                logger.info(f"Retrying gateway call in {delay:g}s (retry {retry_count}) after {e.kind}")
                await asyncio.sleep(delay)

    async def _complete_text(self, analysis: DocumentAnalysis, completion: str):
        completed = await self._analyses.transition(
            analysis.id,
            AnalysisStatus.RUNNING,
            {
                "status": AnalysisStatus.COMPLETED,
                "result": completion.strip(),
                "error_message": None,
                "completed_at": _now(),
            },
        )
        if completed is None:
            logger.warning(f"Analysis {analysis.id} was no longer RUNNING, result discarded")
        else:
            logger.info(f"Analysis {analysis.id} completed ({len(completion)} characters)")

    async def _complete_clauses(self, analysis: DocumentAnalysis, completion: str):
        parsed = parse_clauses(completion)
        now = _now()
        clauses = [
            ExtractedClause(
                id=str(uuid.uuid4()),
                document_id=analysis.document_id,
                analysis_id=analysis.id,
                clause_type=item.clause_type,
                clause_text=item.clause_text,
                plain_english_explanation=item.explanation,
                importance_level=item.importance,
                confidence_score=item.confidence,
                created_at=now,
            )
            for item in parsed
        ]
        confidence = sum(c.confidence_score for c in clauses) / len(clauses) if clauses else None

        completed = await self._clauses.replace_batch(
            analysis.id,
            clauses,
            {
                "status": AnalysisStatus.COMPLETED,
                "result": f"Extracted {len(clauses)} clauses",
                "confidence_score": confidence,
                "error_message": None,
                "completed_at": now,
            },
        )
        if completed is None:
            logger.warning(f"Clause extraction {analysis.id} was no longer RUNNING, batch discarded")
        else:
            logger.info(f"Clause extraction {analysis.id} completed with {len(clauses)} clauses")

    async def _fail(self, analysis_id: str, message: str):
        failed = await self._analyses.transition(
            analysis_id,
            AnalysisStatus.RUNNING,
            {"status": AnalysisStatus.FAILED, "error_message": message, "result": None, "completed_at": _now()},
        )
        if failed is None:
            logger.warning(f"Analysis {analysis_id} was no longer RUNNING, failure not recorded")

    async def shutdown(self, timeout: float = 5.0):
        """Give in-flight workers a moment to finish, then cancel the rest."""
        if not self._tasks:
            return
        logger.info(f"Waiting for {len(self._tasks)} analysis workers to finish")
        done, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            # Cancelled workers record their failure before exiting
            await asyncio.wait(pending)
            logger.warning(f"Cancelled {len(pending)} analysis workers")
