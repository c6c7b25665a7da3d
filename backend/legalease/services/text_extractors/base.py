"""
Base Text Extractor Interface.

All text extractors must inherit from this base class and implement
the extract() method.
"""
from abc import ABC, abstractmethod

from ...api.exceptions import ExtractionError


class BaseTextExtractor(ABC):
    """
    Abstract base class for text extractors.

    Each document format has its own extractor class, registered in
    TextExtractorFactory under its content type and file extension.
    """

    def __init__(self, content_type: str, file_extension: str, format_name: str):
        """
        Args:
            content_type: MIME type handled (e.g., 'application/pdf')
            file_extension: File extension (e.g., '.pdf', '.docx')
            format_name: Human-readable format name (e.g., 'PDF', 'DOCX')
        """
        self.content_type = content_type
        self.file_extension = file_extension.lower()
        self.format_name = format_name
        self._available = self._check_availability()

    @abstractmethod
    def extract(self, file_bytes: bytes) -> str:
        """
        Extract text from file bytes.

        Raises:
            ExtractionError: If extraction fails or yields no text
        """
        pass

    def _check_availability(self) -> bool:
        """Override in subclasses that depend on an optional library."""
        return True

    def is_available(self) -> bool:
        return self._available

    def get_error_message(self) -> str:
        return f"{self.format_name} support not available. Please install required library."

    def validate_content(self, text_content: str) -> str:
        """
        Return the stripped text, rejecting documents with nothing extractable.

        Raises:
            ExtractionError: If content is empty
        """
        if not text_content or not text_content.strip():
            raise ExtractionError(
                f"{self.format_name} file appears to be empty or contains no extractable text"
            )
        return text_content.strip()
