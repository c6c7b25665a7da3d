"""
PDF Text Extractor.

Extracts text from PDF files using pypdf library.
"""
import io

from pypdf import PdfReader
from pypdf.errors import FileNotDecryptedError, PdfReadError

from .base import BaseTextExtractor
from ...api.exceptions import ExtractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class PDFExtractor(BaseTextExtractor):
    """Extractor for PDF files."""

    def __init__(self):
        super().__init__("application/pdf", ".pdf", "PDF")

    def extract(self, file_bytes: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(file_bytes))
            if reader.is_encrypted:
                # Blank user password is common for "protected" but openable PDFs
                if not reader.decrypt(""):
                    raise ExtractionError("PDF is password-protected")

            pages = []
            for page in reader.pages:
                page_text = page.extract_text()
                if page_text:
                    pages.append(page_text)
            text_content = "\n".join(pages)

        except ExtractionError:
            raise
        except FileNotDecryptedError:
            raise ExtractionError("PDF is password-protected")
        except PdfReadError as e:
            raise ExtractionError(f"Corrupt or unreadable PDF: {e}")
        except Exception as e:
            logger.error(f"Error extracting text from PDF: {e}", exc_info=True)
            raise ExtractionError(f"Error extracting text from PDF: {e}")

        return self.validate_content(text_content)
