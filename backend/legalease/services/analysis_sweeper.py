"""
Background sweeper for abandoned work.

Fails analyses stuck in PENDING/RUNNING and documents stuck in
PENDING/PROCESSING for longer than the grace period. Everything left in
flight by a previous process is failed once at startup, then stale work is
swept every interval.
"""
import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..core.config import ANALYSIS_STALE_AFTER_SECONDS, SWEEP_INTERVAL_SECONDS
from ..core.logging_config import get_logger
from ..domain.entities import AnalysisStatus, ProcessingStatus
from ..repositories.interfaces import IAnalysisRepository, IDocumentRepository

logger = get_logger(__name__)


class AnalysisSweeper:
    """Periodically fails stale in-flight analyses and documents."""

    def __init__(
        self,
        document_repo: IDocumentRepository,
        analysis_repo: IAnalysisRepository,
        stale_after_seconds: float = ANALYSIS_STALE_AFTER_SECONDS,
        interval_seconds: float = SWEEP_INTERVAL_SECONDS,
    ):
        self._documents = document_repo
        self._analyses = analysis_repo
        self._stale_after = stale_after_seconds
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    async def sweep_once(self) -> int:
        """Fail everything stale right now. Returns the number of records failed."""
        return await self._sweep(self._stale_after, f"no progress for {self._stale_after:g} seconds")

    async def recover_abandoned(self) -> int:
        """
        Fail every in-flight record, however recent.

        Called once at startup, when no worker can still own a PENDING or
        RUNNING row.
        """
        return await self._sweep(0, "interrupted by a restart")

    async def _sweep(self, stale_after: float, reason: str) -> int:
        now = datetime.now(timezone.utc)
        cutoff = (now - timedelta(seconds=stale_after)).isoformat()
        swept = 0

        for analysis in await self._analyses.find_stale(AnalysisStatus.in_flight(), cutoff):
            failed = await self._analyses.transition(
                analysis.id,
                analysis.status,
                {
                    "status": AnalysisStatus.FAILED,
                    "error_message": f"Analysis abandoned: {reason}",
                    "result": None,
                    "completed_at": now,
                },
            )
            if failed is not None:
                swept += 1
                logger.warning(f"Swept stale analysis {analysis.id} ({analysis.status.value})")

        stale_document_statuses = (ProcessingStatus.PENDING, ProcessingStatus.PROCESSING)
        for document in await self._documents.find_stale(stale_document_statuses, cutoff):
            failed = await self._documents.transition(
                document.id,
                [document.processing_status],
                {
                    "processing_status": ProcessingStatus.FAILED,
                    "processing_error": f"Processing abandoned: {reason}",
                    "extracted_text": None,
                },
            )
            if failed is not None:
                swept += 1
                logger.warning(f"Swept stale document {document.id} ({document.processing_status.value})")

        return swept

    async def _loop(self):
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep_once()
            except Exception as e:
                # Keep sweeping; one failed pass must not stop the loop
                logger.error(f"Sweep failed: {e}", exc_info=True)

    def start(self):
        if self._task is None:
            self._task = asyncio.create_task(self._loop())
            logger.info(f"Analysis sweeper started (interval {self._interval:g}s, grace {self._stale_after:g}s)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Analysis sweeper stopped")
