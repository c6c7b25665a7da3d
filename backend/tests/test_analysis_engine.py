import asyncio
import json
import threading
import uuid
from datetime import datetime, timezone

import pytest

from legalease.api.exceptions import ConflictError, GatewayError, NotFoundError, PreconditionError, ValidationError
from legalease.domain.entities import (
    AnalysisStatus,
    AnalysisType,
    Document,
    ImportanceLevel,
    ProcessingStatus,
)
from legalease.services.ai_retry_handler import AIRetryHandler
from legalease.services.analysis_engine import AnalysisEngine
from legalease.services.providers.base import AIProvider
from legalease.services.providers.mock_provider import MockProvider

CONTRACT_TEXT = "This Lease Agreement is made between Alice (Landlord) and Bob (Tenant)."


class RecordingProvider(AIProvider):
    name = "recording"

    def __init__(self, response="A short summary."):
        self.response = response
        self.prompts = []

    def complete(self, prompt, max_tokens):
        self.prompts.append(prompt)
        return self.response


class FailingProvider(AIProvider):
    name = "failing"

    def __init__(self, kind=GatewayError.PROVIDER_ERROR, failures=None):
        self.kind = kind
        self.failures = failures
        self.calls = 0

    def complete(self, prompt, max_tokens):
        self.calls += 1
        if self.failures is None or self.calls <= self.failures:
            raise GatewayError(self.kind, "upstream said no")
        return "Recovered answer."


class BlockingProvider(AIProvider):
    name = "blocking"

    def __init__(self):
        self.release = threading.Event()

    def complete(self, prompt, max_tokens):
        self.release.wait(timeout=5)
        return "Finally done."


async def _completed_document(document_repo, owner_id="owner-1", status=ProcessingStatus.COMPLETED, text=CONTRACT_TEXT):
    now = datetime.now(timezone.utc)
    doc_id = str(uuid.uuid4())
    return await document_repo.create(Document(
        id=doc_id,
        owner_id=owner_id,
        file_name=f"{doc_id}.pdf",
        original_name="lease.pdf",
        file_size=100,
        content_type="application/pdf",
        storage_key=f"documents/{owner_id}/{doc_id}.pdf",
        processing_status=status,
        extracted_text=text if status == ProcessingStatus.COMPLETED else None,
        created_at=now,
        updated_at=now,
    ))


async def _wait_terminal(engine, analysis_id, owner_id="owner-1"):
    for _ in range(200):
        analysis = await engine.get_analysis(analysis_id, owner_id)
        if analysis.is_terminal():
            return analysis
        await asyncio.sleep(0.02)
    raise AssertionError(f"analysis {analysis_id} never finished")


@pytest.fixture
def make_engine(document_repo, analysis_repo, clause_repo):
    def _make(provider, **kwargs):
        kwargs.setdefault("retry_handler", AIRetryHandler(max_retries=2, base_delay=0))
        return AnalysisEngine(document_repo, analysis_repo, clause_repo, provider, **kwargs)

    return _make


async def test_summary_completes_with_result(make_engine, document_repo):
    provider = RecordingProvider("  The tenant rents from the landlord.  ")
    engine = make_engine(provider)
    document = await _completed_document(document_repo)

    analysis = await engine.summarize(document.id, "owner-1")

    assert analysis.status == AnalysisStatus.COMPLETED
    assert analysis.analysis_type == AnalysisType.SUMMARY
    assert analysis.result == "The tenant rents from the landlord."
    assert analysis.error_message is None
    assert analysis.started_at is not None and analysis.completed_at is not None
    assert CONTRACT_TEXT in provider.prompts[0]


async def test_repeated_summaries_create_new_analyses(make_engine, document_repo):
    engine = make_engine(RecordingProvider())
    document = await _completed_document(document_repo)

    first = await engine.summarize(document.id, "owner-1")
    second = await engine.summarize(document.id, "owner-1")

    assert first.id != second.id
    history = await engine.list_analyses(document.id, "owner-1", AnalysisType.SUMMARY)
    assert {a.id for a in history} == {first.id, second.id}


async def test_gateway_failure_recorded_on_analysis(make_engine, document_repo):
    engine = make_engine(FailingProvider())
    document = await _completed_document(document_repo)

    analysis = await engine.summarize(document.id, "owner-1")

    assert analysis.status == AnalysisStatus.FAILED
    assert analysis.result is None
    assert "provider_error" in analysis.error_message


async def test_transient_failures_are_retried(make_engine, document_repo):
    provider = FailingProvider(kind=GatewayError.RATE_LIMITED, failures=2)
    engine = make_engine(provider)
    document = await _completed_document(document_repo)

    analysis = await engine.summarize(document.id, "owner-1")

    assert analysis.status == AnalysisStatus.COMPLETED
    assert analysis.result == "Recovered answer."
    assert provider.calls == 3


async def test_retries_are_bounded(make_engine, document_repo):
    provider = FailingProvider(kind=GatewayError.UNAVAILABLE)
    engine = make_engine(provider, retry_handler=AIRetryHandler(max_retries=1, base_delay=0))
    document = await _completed_document(document_repo)

    analysis = await engine.summarize(document.id, "owner-1")

    assert analysis.status == AnalysisStatus.FAILED
    assert provider.calls == 2


async def test_non_retryable_failure_is_not_retried(make_engine, document_repo):
    provider = FailingProvider(kind=GatewayError.NOT_CONFIGURED)
    engine = make_engine(provider)
    document = await _completed_document(document_repo)

    await engine.summarize(document.id, "owner-1")
    assert provider.calls == 1


async def test_slow_job_returned_in_flight_then_completes(make_engine, document_repo):
    provider = BlockingProvider()
    engine = make_engine(provider, wait_seconds=0.05)
    document = await _completed_document(document_repo)

    try:
        analysis = await engine.summarize(document.id, "owner-1")
        assert analysis.status in AnalysisStatus.in_flight()

        with pytest.raises(ConflictError):
            await engine.summarize(document.id, "owner-1")
    finally:
        provider.release.set()

    finished = await _wait_terminal(engine, analysis.id)
    assert finished.status == AnalysisStatus.COMPLETED
    assert finished.result == "Finally done."


async def test_gateway_timeout_fails_analysis(make_engine, document_repo):
    provider = BlockingProvider()
    engine = make_engine(provider, timeout_seconds=0.05)
    document = await _completed_document(document_repo)

    try:
        analysis = await engine.summarize(document.id, "owner-1")
    finally:
        provider.release.set()

    assert analysis.status == AnalysisStatus.FAILED
    assert analysis.error_message.startswith("timeout")


async def test_document_without_text_is_rejected(make_engine, document_repo, analysis_repo):
    engine = make_engine(RecordingProvider())
    document = await _completed_document(document_repo, status=ProcessingStatus.FAILED)

    with pytest.raises(PreconditionError):
        await engine.summarize(document.id, "owner-1")
    assert await analysis_repo.list_for_document(document.id) == []


async def test_other_owner_cannot_analyze(make_engine, document_repo):
    engine = make_engine(RecordingProvider())
    document = await _completed_document(document_repo)

    with pytest.raises(NotFoundError):
        await engine.summarize(document.id, "owner-2")
    with pytest.raises(NotFoundError):
        await engine.list_clauses(document.id, "owner-2")


async def test_clause_extraction_stores_sorted_batch(make_engine, document_repo):
    engine = make_engine(MockProvider())
    document = await _completed_document(document_repo)

    outcome = await engine.extract_clauses(document.id, "owner-1")

    assert outcome.analysis.status == AnalysisStatus.COMPLETED
    assert outcome.analysis.result == "Extracted 2 clauses"
    assert outcome.analysis.confidence_score == pytest.approx(0.85)
    assert [c.importance_level for c in outcome.clauses] == [ImportanceLevel.HIGH, ImportanceLevel.MEDIUM]
    assert all(c.analysis_id == outcome.analysis.id for c in outcome.clauses)


async def test_clause_importance_order_is_stable(make_engine, document_repo):
    response = json.dumps([
        {"clauseType": "A", "clauseText": "first low", "importance": "low"},
        {"clauseType": "B", "clauseText": "critical", "importance": "CRITICAL"},
        {"clauseType": "C", "clauseText": "second low", "importance": "LOW"},
        {"clauseType": "D", "clauseText": "default medium"},
    ])
    engine = make_engine(RecordingProvider(response))
    document = await _completed_document(document_repo)

    outcome = await engine.extract_clauses(document.id, "owner-1")

    assert [c.clause_type for c in outcome.clauses] == ["B", "D", "A", "C"]


async def test_malformed_clause_response_keeps_previous_batch(make_engine, document_repo):
    provider = RecordingProvider(json.dumps([{"clauseType": "Payment", "clauseText": "Pay monthly."}]))
    engine = make_engine(provider)
    document = await _completed_document(document_repo)
    await engine.extract_clauses(document.id, "owner-1")

    provider.response = "Sorry, I cannot help with that."
    outcome = await engine.extract_clauses(document.id, "owner-1")

    assert outcome.analysis.status == AnalysisStatus.FAILED
    assert "malformed_response" in outcome.analysis.error_message
    assert outcome.clauses == []
    remaining = await engine.list_clauses(document.id, "owner-1")
    assert [c.clause_type for c in remaining] == ["Payment"]


async def test_question_requires_text(make_engine, document_repo):
    provider = RecordingProvider("The rent is 1000.")
    engine = make_engine(provider)
    document = await _completed_document(document_repo)

    with pytest.raises(ValidationError):
        await engine.ask_question(document.id, "owner-1", "   ")

    analysis = await engine.ask_question(document.id, "owner-1", " What is the rent? ")
    assert analysis.analysis_type == AnalysisType.QUESTION_ANSWER
    assert analysis.prompt == "What is the rent?"
    assert "Question: What is the rent?" in provider.prompts[0]


async def test_template_is_standalone(make_engine):
    engine = make_engine(MockProvider())

    with pytest.raises(ValidationError):
        await engine.generate_template("owner-1", "NDA", None)

    first = await engine.generate_template("owner-1", "NDA", "Mutual, two years")
    second = await engine.generate_template("owner-1", "NDA", "Mutual, two years")

    assert first.document_id is None
    assert first.template_type == "NDA"
    assert first.status == AnalysisStatus.COMPLETED
    assert "[PARTY A NAME]" in first.result
    assert first.id != second.id

    with pytest.raises(NotFoundError):
        await engine.get_analysis(first.id, "owner-2")


async def test_shutdown_cancels_stuck_workers(make_engine, document_repo):
    provider = BlockingProvider()
    engine = make_engine(provider, wait_seconds=0.01)
    document = await _completed_document(document_repo)

    try:
        analysis = await engine.summarize(document.id, "owner-1")
        await engine.shutdown(timeout=0.05)
    finally:
        provider.release.set()

    interrupted = await engine.get_analysis(analysis.id, "owner-1")
    assert interrupted.status == AnalysisStatus.FAILED
    assert interrupted.error_message == "Analysis interrupted by shutdown"

    rerun = await make_engine(RecordingProvider()).summarize(document.id, "owner-1")
    assert rerun.status == AnalysisStatus.COMPLETED
