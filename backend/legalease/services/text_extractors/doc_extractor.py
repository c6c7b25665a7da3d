"""
DOC Text Extractor.

Extracts text from DOC (old Word format) files using textract library.
Requires system dependencies: antiword or LibreOffice.
"""
import os
import tempfile

from .base import BaseTextExtractor
from ...api.exceptions import ExtractionError
from ...core.logging_config import get_logger

logger = get_logger(__name__)

# textract is an optional extra (pip install legalease-backend[doc])
try:
    import textract
    DOC_AVAILABLE = True
except ImportError:
    DOC_AVAILABLE = False
    logger.info(
        "DOC file support: textract not installed (optional). "
        "DOC uploads will be stored but marked FAILED until textract and antiword are installed"
    )


class DOCExtractor(BaseTextExtractor):
    """Extractor for DOC (old Word format) files."""

    def __init__(self):
        super().__init__("application/msword", ".doc", "DOC")

    def _check_availability(self) -> bool:
        return DOC_AVAILABLE

    def get_error_message(self) -> str:
        return (
            "DOC (old Word format) extraction requires 'textract' library "
            "(and antiword or LibreOffice on the system). "
            "Alternatively, convert DOC to DOCX before uploading."
        )

    def extract(self, file_bytes: bytes) -> str:
        if not self.is_available():
            raise ExtractionError(self.get_error_message())

        # textract works on paths, not streams
        fd, tmp_path = tempfile.mkstemp(suffix=".doc")
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(file_bytes)
            text_content = textract.process(tmp_path, extension="doc").decode("utf-8", errors="replace")
        except Exception as e:
            logger.error(f"Error extracting text from DOC: {e}", exc_info=True)
            error_msg = str(e)
            if "antiword" in error_msg.lower() or "libreoffice" in error_msg.lower():
                raise ExtractionError(
                    f"DOC extraction failed: {error_msg}. "
                    "Please ensure antiword or LibreOffice is installed on the system."
                )
            raise ExtractionError(f"Error extracting text from DOC: {error_msg}")
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)

        return self.validate_content(text_content)
