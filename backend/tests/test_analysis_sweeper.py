import uuid
from datetime import datetime, timezone

from legalease.domain.entities import AnalysisStatus, AnalysisType, Document, DocumentAnalysis, ProcessingStatus
from legalease.repositories import AnalysisRepository, ClauseRepository, DocumentRepository
from legalease.services.analysis_engine import AnalysisEngine
from legalease.services.analysis_sweeper import AnalysisSweeper
from legalease.services.database.json_adapter import JSONAdapter
from legalease.services.providers.mock_provider import MockProvider


async def _claim(analysis_repo, status=AnalysisStatus.PENDING, document_id=None):
    now = datetime.now(timezone.utc)
    analysis = await analysis_repo.claim(DocumentAnalysis(
        id=str(uuid.uuid4()),
        document_id=document_id or str(uuid.uuid4()),
        owner_id="owner-1",
        analysis_type=AnalysisType.SUMMARY,
        status=AnalysisStatus.PENDING,
        created_at=now,
        updated_at=now,
    ))
    if status == AnalysisStatus.RUNNING:
        analysis = await analysis_repo.transition(analysis.id, AnalysisStatus.PENDING, {"status": AnalysisStatus.RUNNING})
    return analysis


async def test_stale_work_is_failed(document_repo, analysis_repo):
    pending = await _claim(analysis_repo)
    running = await _claim(analysis_repo, AnalysisStatus.RUNNING)
    now = datetime.now(timezone.utc)
    document = await document_repo.create(Document(
        id="doc-1",
        owner_id="owner-1",
        file_name="doc-1.pdf",
        original_name="lease.pdf",
        file_size=1,
        content_type="application/pdf",
        storage_key="documents/owner-1/doc-1.pdf",
        processing_status=ProcessingStatus.PROCESSING,
        created_at=now,
        updated_at=now,
    ))

    # Everything updated before "now" is stale with a zero grace period
    sweeper = AnalysisSweeper(document_repo, analysis_repo, stale_after_seconds=0)
    assert await sweeper.sweep_once() == 3

    for analysis in (pending, running):
        swept = await analysis_repo.get_by_id(analysis.id)
        assert swept.status == AnalysisStatus.FAILED
        assert swept.error_message.startswith("Analysis abandoned")
        assert swept.completed_at is not None

    swept_document = await document_repo.get_by_id(document.id)
    assert swept_document.processing_status == ProcessingStatus.FAILED
    assert swept_document.processing_error.startswith("Processing abandoned")

    assert await sweeper.sweep_once() == 0


async def test_fresh_work_is_left_alone(document_repo, analysis_repo):
    analysis = await _claim(analysis_repo)

    sweeper = AnalysisSweeper(document_repo, analysis_repo, stale_after_seconds=600)
    assert await sweeper.sweep_once() == 0
    assert (await analysis_repo.get_by_id(analysis.id)).status == AnalysisStatus.PENDING


async def test_start_and_stop(document_repo, analysis_repo):
    sweeper = AnalysisSweeper(document_repo, analysis_repo, interval_seconds=3600)
    sweeper.start()
    await sweeper.stop()
    await sweeper.stop()


async def test_restart_recovers_recent_in_flight_work(tmp_path):
    db = JSONAdapter(data_dir=tmp_path)
    await db.initialize()
    now = datetime.now(timezone.utc)
    document = await DocumentRepository(db).create(Document(
        id="doc-1",
        owner_id="owner-1",
        file_name="doc-1.pdf",
        original_name="lease.pdf",
        file_size=1,
        content_type="application/pdf",
        storage_key="documents/owner-1/doc-1.pdf",
        processing_status=ProcessingStatus.COMPLETED,
        extracted_text="This Lease Agreement is made between Alice and Bob.",
        created_at=now,
        updated_at=now,
    ))
    # The process dies with this summary RUNNING
    stuck = await _claim(AnalysisRepository(db), AnalysisStatus.RUNNING, document_id=document.id)
    await db.close()

    restarted = JSONAdapter(data_dir=tmp_path)
    await restarted.initialize()
    document_repo = DocumentRepository(restarted)
    analysis_repo = AnalysisRepository(restarted)

    # Well inside the normal grace period, yet nothing can still own the row
    sweeper = AnalysisSweeper(document_repo, analysis_repo, stale_after_seconds=600)
    assert await sweeper.sweep_once() == 0
    assert await sweeper.recover_abandoned() == 1

    recovered = await analysis_repo.get_by_id(stuck.id)
    assert recovered.status == AnalysisStatus.FAILED
    assert recovered.error_message == "Analysis abandoned: interrupted by a restart"

    engine = AnalysisEngine(document_repo, analysis_repo, ClauseRepository(restarted), MockProvider())
    rerun = await engine.summarize(document.id, "owner-1")
    assert rerun.status == AnalysisStatus.COMPLETED
    assert rerun.id != stuck.id
