"""
Text Extractor Factory.

Manages registration and retrieval of text extractors for the supported
legal document formats. Extractors are looked up by content type first and
by file extension when the declared content type is missing or generic.
"""
from pathlib import Path
from typing import Dict, Optional

from .base import BaseTextExtractor
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .doc_extractor import DOCExtractor
from ...api.exceptions import ExtractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class TextExtractorFactory:
    """
    Factory for managing text extractors.

    Provides a centralized registry of extractors and easy extension
    for new file formats.
    """

    _by_content_type: Dict[str, BaseTextExtractor] = {}
    _by_extension: Dict[str, BaseTextExtractor] = {}
    _initialized = False

    @classmethod
    def _initialize(cls):
        if cls._initialized:
            return

        cls.register(PDFExtractor(), skip_init=True)
        cls.register(DOCXExtractor(), skip_init=True)
        cls.register(DOCExtractor(), skip_init=True)

        cls._initialized = True
        logger.info(f"TextExtractorFactory initialized with {len(cls._by_content_type)} extractors")

    @classmethod
    def register(cls, extractor: BaseTextExtractor, skip_init: bool = False):
        """
        Register a text extractor.

        Args:
            extractor: Text extractor instance to register
            skip_init: If True, skip initialization check (used internally)
        """
        if not skip_init:
            cls._initialize()

        if extractor.content_type in cls._by_content_type:
            logger.warning(f"Overriding existing extractor for {extractor.content_type}")

        cls._by_content_type[extractor.content_type] = extractor
        cls._by_extension[extractor.file_extension] = extractor
        logger.debug(f"Registered extractor for {extractor.content_type}: {extractor.format_name}")

    @classmethod
    def get_extractor(cls, content_type: Optional[str], file_name: Optional[str] = None) -> Optional[BaseTextExtractor]:
        cls._initialize()
        if content_type:
            extractor = cls._by_content_type.get(content_type.split(";")[0].strip().lower())
            if extractor is not None:
                return extractor
        if file_name:
            return cls._by_extension.get(Path(file_name).suffix.lower())
        return None

    @classmethod
    def extract_text(cls, file_bytes: bytes, content_type: Optional[str], file_name: Optional[str] = None) -> str:
        """
        Extract text using the extractor registered for the document's format.

        Returns:
            Stripped, non-empty text

        Raises:
            ExtractionError: If the format is unsupported, its library is missing,
                or extraction fails
        """
        extractor = cls.get_extractor(content_type, file_name)

        if extractor is None:
            raise ExtractionError(
                f"Format '{content_type}' is not supported for text extraction. "
                f"Supported content types: {', '.join(cls.get_supported_content_types())}"
            )

        if not extractor.is_available():
            logger.warning(f"{extractor.format_name} extraction unavailable for {file_name}")
            raise ExtractionError(extractor.get_error_message())

        logger.debug(f"Extracting text from {file_name} using {extractor.format_name} extractor")
        text_content = extractor.extract(file_bytes)
        logger.info(f"Extracted {len(text_content)} characters from {file_name} ({extractor.format_name})")
        return text_content

    @classmethod
    def get_supported_content_types(cls) -> list:
        cls._initialize()
        return sorted(cls._by_content_type.keys())

    @classmethod
    def is_content_type_supported(cls, content_type: str) -> bool:
        cls._initialize()
        return content_type in cls._by_content_type
