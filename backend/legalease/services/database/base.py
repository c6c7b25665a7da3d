"""
Abstract base class for record store adapters.
All record store implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple


class DatabaseInterface(ABC):
    """
    Abstract interface for record store operations.
    All adapters must implement these methods.
    This allows plug-and-play storage backends without changing business logic.

    Records are plain dicts with snake_case keys and ISO-8601 timestamps.
    Every status change goes through a compare-and-set method so that two
    writers can never both move a record out of the same state.
    """

    # Document operations
    @abstractmethod
    async def create_document(self, doc_data: Dict) -> Dict:
        """Insert a new document record."""
        pass

    @abstractmethod
    async def get_document(self, doc_id: str) -> Optional[Dict]:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def transition_document(
        self, doc_id: str, expected_statuses: Iterable[str], updates: Dict
    ) -> Optional[Dict]:
        """
        Apply updates only if the document's processing_status is one of expected_statuses.

        Returns:
            The updated record, or None if the document is missing or in another state
        """
        pass

    @abstractmethod
    async def list_documents(
        self, owner_id: str, offset: int, limit: int, search: Optional[str] = None
    ) -> Tuple[List[Dict], int]:
        """Owner's documents newest first, optionally filtered by original_name substring."""
        pass

    @abstractmethod
    async def delete_document(self, doc_id: str) -> Optional[Dict]:
        """
        Delete a document together with its analyses and clauses in one commit.

        Returns:
            The deleted document record, or None if it did not exist
        """
        pass

    @abstractmethod
    async def find_stale_documents(self, statuses: Iterable[str], updated_before: str) -> List[Dict]:
        """Documents in one of statuses whose updated_at is older than updated_before."""
        pass

    # Analysis operations
    @abstractmethod
    async def claim_analysis(self, analysis_data: Dict) -> Optional[Dict]:
        """
        Insert a PENDING analysis unless one of the same type is already
        PENDING or RUNNING for the same document.

        Returns:
            The inserted record, or None when the slot is taken
        """
        pass

    @abstractmethod
    async def get_analysis(self, analysis_id: str) -> Optional[Dict]:
        """Get an analysis by ID."""
        pass

    @abstractmethod
    async def transition_analysis(self, analysis_id: str, expected_status: str, updates: Dict) -> Optional[Dict]:
        """Apply updates only if the analysis status equals expected_status."""
        pass

    @abstractmethod
    async def list_analyses(self, document_id: str, analysis_type: Optional[str] = None) -> List[Dict]:
        """Analyses of a document, newest first."""
        pass

    @abstractmethod
    async def find_stale_analyses(self, statuses: Iterable[str], updated_before: str) -> List[Dict]:
        """Analyses in one of statuses whose updated_at is older than updated_before."""
        pass

    # Clause operations
    @abstractmethod
    async def complete_clause_extraction(
        self, analysis_id: str, clauses: List[Dict], updates: Dict
    ) -> Optional[Dict]:
        """
        Move a RUNNING clause extraction to its terminal state and replace the
        document's clause batch with clauses, both in one commit.

        Returns:
            The updated analysis, or None if it was no longer RUNNING (nothing is written)
        """
        pass

    @abstractmethod
    async def list_clauses(self, document_id: str) -> List[Dict]:
        """Current clause batch of a document in insertion order."""
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize the store (load files, create collections, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Flush and release resources."""
        pass
