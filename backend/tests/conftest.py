import io
import os
import tempfile

# Configuration is read at import time, so the environment is set before legalease is imported
_TEST_ROOT = tempfile.mkdtemp(prefix="legalease-tests-")
os.environ.update({
    "ENVIRONMENT": "test",
    "DATABASE_TYPE": "memory",
    "STORAGE_TYPE": "local",
    "LOCAL_STORAGE_DIR": os.path.join(_TEST_ROOT, "storage"),
    "UPLOAD_DIR": os.path.join(_TEST_ROOT, "uploads"),
    "AI_PROVIDER": "mock",
    "LOG_FILE_ENABLED": "false",
    "RATE_LIMIT_ENABLED": "false",
    "JWT_SECRET": "test-secret-for-legalease-unit-tests-0001",
    "MAX_UPLOAD_BYTES": str(1024 * 1024),
})

import pytest
from docx import Document as DocxDocument
from fastapi.testclient import TestClient

from legalease.core.security import create_access_token
from legalease.repositories import AnalysisRepository, ClauseRepository, DocumentRepository
from legalease.services.database.memory_adapter import MemoryAdapter
from legalease.services.storage.local_storage import LocalFileStorage

PDF_CONTENT_TYPE = "application/pdf"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def build_pdf(text=None) -> bytes:
    """One-page PDF showing text in Helvetica, or a blank page when text is None."""
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


def build_docx(paragraphs, table_rows=None) -> bytes:
    doc = DocxDocument()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    if table_rows:
        table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
        for row, values in zip(table.rows, table_rows):
            for cell, value in zip(row.cells, values):
                cell.text = value
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def auth_headers(owner_id: str = "owner-1") -> dict:
    return {"Authorization": f"Bearer {create_access_token(owner_id)}"}


@pytest.fixture
def client():
    from legalease.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db():
    return MemoryAdapter()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorage(base_dir=tmp_path / "blobs")


@pytest.fixture
def document_repo(db):
    return DocumentRepository(db)


@pytest.fixture
def analysis_repo(db):
    return AnalysisRepository(db)


@pytest.fixture
def clause_repo(db):
    return ClauseRepository(db)
