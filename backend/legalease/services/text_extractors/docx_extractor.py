"""
DOCX Text Extractor.

Extracts text from DOCX files using python-docx library.
"""
import io

from docx import Document as DocxDocument

from .base import BaseTextExtractor
from ...api.exceptions import ExtractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DOCXExtractor(BaseTextExtractor):
    """Extractor for DOCX files. Paragraphs first, then table rows joined with ' | '."""

    def __init__(self):
        super().__init__(DOCX_CONTENT_TYPE, ".docx", "DOCX")

    def extract(self, file_bytes: bytes) -> str:
        try:
            doc = DocxDocument(io.BytesIO(file_bytes))
            lines = []

            for paragraph in doc.paragraphs:
                if paragraph.text.strip():
                    lines.append(paragraph.text)

            for table in doc.tables:
                for row in table.rows:
                    row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if row_text:
                        lines.append(" | ".join(row_text))

        except Exception as e:
            logger.error(f"Error extracting text from DOCX: {e}", exc_info=True)
            raise ExtractionError(f"Error extracting text from DOCX: {e}")

        return self.validate_content("\n".join(lines))
