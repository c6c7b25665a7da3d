"""
Text Extractors Module - Modular document format handlers.

To add support for a new format:
1. Create a new extractor class inheriting from BaseTextExtractor
2. Implement the extract() method
3. Register it in TextExtractorFactory
"""
from .base import BaseTextExtractor
from .factory import TextExtractorFactory
from .pdf_extractor import PDFExtractor
from .docx_extractor import DOCXExtractor
from .doc_extractor import DOCExtractor

__all__ = [
    "BaseTextExtractor",
    "TextExtractorFactory",
    "PDFExtractor",
    "DOCXExtractor",
    "DOCExtractor",
]
