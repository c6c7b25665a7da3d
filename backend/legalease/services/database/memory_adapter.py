"""
In-memory adapter implementing DatabaseInterface.
Perfect for demos and testing - stores all data in memory using Python dicts.
Data is lost on restart.
"""
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import datetime, timezone
from threading import RLock
import copy

from .base import DatabaseInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)

IN_FLIGHT_STATUSES = ("PENDING", "RUNNING")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryAdapter(DatabaseInterface):
    """
    In-memory record store using Python dictionaries.
    Every public method runs its read-check-write under one lock, which is
    what makes claim and transition methods atomic.
    """

    def __init__(self):
        self._documents: Dict[str, Dict] = {}
        self._analyses: Dict[str, Dict] = {}
        self._clauses: Dict[str, Dict] = {}

        # Indexes for fast lookups
        self._analysis_index: Dict[str, List[str]] = {}  # document_id -> [analysis_ids]
        self._clause_index: Dict[str, List[str]] = {}  # document_id -> [clause_ids]

        self._lock = RLock()

    async def initialize(self):
        """Initialize database (clears any existing data)."""
        with self._lock:
            self._documents.clear()
            self._analyses.clear()
            self._clauses.clear()
            self._analysis_index.clear()
            self._clause_index.clear()

    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass

    async def _commit(self):
        """Hook called after every successful mutation. Persistent subclasses flush here."""
        pass

    def _rebuild_indexes(self):
        self._analysis_index.clear()
        self._clause_index.clear()
        for analysis_id, analysis in self._analyses.items():
            doc_id = analysis.get("document_id")
            if doc_id:
                self._analysis_index.setdefault(doc_id, []).append(analysis_id)
        for clause_id, clause in self._clauses.items():
            self._clause_index.setdefault(clause["document_id"], []).append(clause_id)

    # Document operations
    async def create_document(self, doc_data: Dict) -> Dict:
        doc_id = doc_data.get("id")
        if not doc_id:
            raise ValueError("Document must have an 'id' field")

        with self._lock:
            if doc_id in self._documents:
                raise ValueError(f"Document {doc_id} already exists")
            now = utc_now_iso()
            record = copy.deepcopy(doc_data)
            record.setdefault("created_at", now)
            record.setdefault("updated_at", now)
            self._documents[doc_id] = record
            result = copy.deepcopy(record)

        await self._commit()
        return result

    async def get_document(self, doc_id: str) -> Optional[Dict]:
        with self._lock:
            doc = self._documents.get(doc_id)
            return copy.deepcopy(doc) if doc else None

    async def transition_document(
        self, doc_id: str, expected_statuses: Iterable[str], updates: Dict
    ) -> Optional[Dict]:
        expected = set(expected_statuses)
        with self._lock:
            doc = self._documents.get(doc_id)
            if doc is None or doc.get("processing_status") not in expected:
                return None
            doc.update(copy.deepcopy(updates))
            doc["updated_at"] = utc_now_iso()
            result = copy.deepcopy(doc)

        await self._commit()
        return result

    async def list_documents(
        self, owner_id: str, offset: int, limit: int, search: Optional[str] = None
    ) -> Tuple[List[Dict], int]:
        needle = search.lower() if search else None
        with self._lock:
            matches = [
                doc for doc in self._documents.values()
                if doc.get("owner_id") == owner_id
                and (needle is None or needle in (doc.get("original_name") or "").lower())
            ]
            matches.sort(key=lambda d: d.get("created_at", ""), reverse=True)
            page = [copy.deepcopy(doc) for doc in matches[offset:offset + limit]]
            return page, len(matches)

    async def delete_document(self, doc_id: str) -> Optional[Dict]:
        with self._lock:
            doc = self._documents.pop(doc_id, None)
            if doc is None:
                return None
            for analysis_id in self._analysis_index.pop(doc_id, []):
                self._analyses.pop(analysis_id, None)
            for clause_id in self._clause_index.pop(doc_id, []):
                self._clauses.pop(clause_id, None)

        await self._commit()
        return doc

    async def find_stale_documents(self, statuses: Iterable[str], updated_before: str) -> List[Dict]:
        wanted = set(statuses)
        with self._lock:
            return [
                copy.deepcopy(doc) for doc in self._documents.values()
                if doc.get("processing_status") in wanted and _is_before(doc.get("updated_at"), updated_before)
            ]

    # Analysis operations
    async def claim_analysis(self, analysis_data: Dict) -> Optional[Dict]:
        analysis_id = analysis_data.get("id")
        if not analysis_id:
            raise ValueError("Analysis must have an 'id' field")

        doc_id = analysis_data.get("document_id")
        analysis_type = analysis_data.get("analysis_type")
        with self._lock:
            if doc_id:
                for existing_id in self._analysis_index.get(doc_id, []):
                    existing = self._analyses[existing_id]
                    if existing["analysis_type"] == analysis_type and existing["status"] in IN_FLIGHT_STATUSES:
                        return None

            now = utc_now_iso()
            record = copy.deepcopy(analysis_data)
            record["status"] = "PENDING"
            record.setdefault("created_at", now)
            record.setdefault("updated_at", now)
            self._analyses[analysis_id] = record
            if doc_id:
                self._analysis_index.setdefault(doc_id, []).append(analysis_id)
            result = copy.deepcopy(record)

        await self._commit()
        return result

    async def get_analysis(self, analysis_id: str) -> Optional[Dict]:
        with self._lock:
            analysis = self._analyses.get(analysis_id)
            return copy.deepcopy(analysis) if analysis else None

    async def transition_analysis(self, analysis_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        with self._lock:
            result = self._apply_analysis_transition(analysis_id, expected_status, updates)

        if result is not None:
            await self._commit()
        return result

    def _apply_analysis_transition(self, analysis_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        analysis = self._analyses.get(analysis_id)
        if analysis is None or analysis.get("status") != expected_status:
            return None
        analysis.update(copy.deepcopy(updates))
        analysis["updated_at"] = utc_now_iso()
        return copy.deepcopy(analysis)

    async def list_analyses(self, document_id: str, analysis_type: Optional[str] = None) -> List[Dict]:
        with self._lock:
            analyses = [
                self._analyses[analysis_id]
                for analysis_id in reversed(self._analysis_index.get(document_id, []))
                if analysis_type is None or self._analyses[analysis_id]["analysis_type"] == analysis_type
            ]
            analyses.sort(key=lambda a: a.get("created_at", ""), reverse=True)
            return [copy.deepcopy(a) for a in analyses]

    async def find_stale_analyses(self, statuses: Iterable[str], updated_before: str) -> List[Dict]:
        wanted = set(statuses)
        with self._lock:
            return [
                copy.deepcopy(a) for a in self._analyses.values()
                if a.get("status") in wanted and _is_before(a.get("updated_at"), updated_before)
            ]

    # Clause operations
    async def complete_clause_extraction(
        self, analysis_id: str, clauses: List[Dict], updates: Dict
    ) -> Optional[Dict]:
        with self._lock:
            analysis = self._analyses.get(analysis_id)
            if analysis is None or analysis.get("status") != "RUNNING":
                return None
            doc_id = analysis["document_id"]
            if doc_id not in self._documents:
                return None

            result = self._apply_analysis_transition(analysis_id, "RUNNING", updates)

            for clause_id in self._clause_index.pop(doc_id, []):
                self._clauses.pop(clause_id, None)
            now = utc_now_iso()
            new_ids = []
            for clause in clauses:
                record = copy.deepcopy(clause)
                record["document_id"] = doc_id
                record["analysis_id"] = analysis_id
                record.setdefault("created_at", now)
                self._clauses[record["id"]] = record
                new_ids.append(record["id"])
            self._clause_index[doc_id] = new_ids

        await self._commit()
        return result

    async def list_clauses(self, document_id: str) -> List[Dict]:
        with self._lock:
            return [copy.deepcopy(self._clauses[c]) for c in self._clause_index.get(document_id, [])]


def _is_before(timestamp: Optional[str], cutoff: str) -> bool:
    if not timestamp:
        return True
    return datetime.fromisoformat(timestamp) < datetime.fromisoformat(cutoff)
