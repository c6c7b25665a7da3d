from conftest import DOCX_CONTENT_TYPE, PDF_CONTENT_TYPE, auth_headers, build_docx, build_pdf
from legalease.core.security import create_access_token


def _upload(client, data, name="lease.pdf", content_type=PDF_CONTENT_TYPE, owner="owner-1"):
    return client.post(
        "/api/documents/upload",
        files={"file": (name, data, content_type)},
        headers=auth_headers(owner),
    )


def _uploaded(client, text="This Lease Agreement is made between Alice and Bob", owner="owner-1"):
    response = _upload(client, build_pdf(text), owner=owner)
    assert response.status_code == 200
    return response.json()


def test_health_and_readiness(client):
    assert client.get("/").json()["status"] == "healthy"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["provider"] == "mock"

    assert client.get("/ready").json() == {"ready": True}


def test_missing_token_is_unauthorized(client):
    response = client.get("/api/documents")

    assert response.status_code == 401
    body = response.json()
    assert body["message"] == "Full authentication is required to access this resource"
    assert body["error"] == "Unauthorized"
    assert body["status"] == 401
    assert body["path"] == "/api/documents"
    assert body["requestId"] == response.headers["X-Request-ID"]


def test_expired_token_is_unauthorized(client):
    token = create_access_token("owner-1", expires_in_seconds=-10)
    response = client.get("/api/documents", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert "JWT" in response.json()["message"]


def test_upload_extracts_text_and_summaries_are_independent(client):
    document = _uploaded(client)

    assert document["processingStatus"] == "COMPLETED"
    assert document["hasExtractedText"] is True
    assert document["originalName"] == "lease.pdf"
    assert document["contentType"] == PDF_CONTENT_TYPE
    assert "extractedText" not in document

    first = client.post(f"/api/ai/documents/{document['id']}/summarize", headers=auth_headers())
    second = client.post(f"/api/ai/documents/{document['id']}/summarize", headers=auth_headers())

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["status"] == "COMPLETED"
    assert first.json()["analysisType"] == "SUMMARY"
    assert first.json()["result"]
    assert first.json()["id"] != second.json()["id"]

    history = client.get(
        f"/api/ai/documents/{document['id']}/analyses",
        params={"analysisType": "SUMMARY"},
        headers=auth_headers(),
    )
    assert len(history.json()) == 2


def test_docx_upload_with_generic_content_type(client):
    response = _upload(client, build_docx(["Mutual NDA"]), name="nda.docx", content_type="application/octet-stream")

    assert response.status_code == 200
    assert response.json()["contentType"] == DOCX_CONTENT_TYPE
    assert response.json()["processingStatus"] == "COMPLETED"


def test_oversized_upload_rejected_and_nothing_stored(client):
    response = _upload(client, b"%PDF-1.4" + b"\0" * (2 * 1024 * 1024), name="huge.pdf")

    assert response.status_code == 400
    assert "exceeds the maximum" in response.json()["message"]
    assert client.get("/api/documents", headers=auth_headers()).json()["totalElements"] == 0


def test_unsupported_upload_rejected(client):
    response = _upload(client, b"plain text", name="notes.txt", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request"


def test_unreadable_document_cannot_be_analyzed(client):
    document = _upload(client, build_pdf(None), name="scan.pdf").json()

    assert document["processingStatus"] == "FAILED"
    assert document["processingError"]
    assert document["hasExtractedText"] is False

    response = client.post(f"/api/ai/documents/{document['id']}/summarize", headers=auth_headers())
    assert response.status_code == 409

    analyses = client.get(f"/api/ai/documents/{document['id']}/analyses", headers=auth_headers())
    assert analyses.json() == []


def test_other_owner_gets_not_found(client):
    document = _uploaded(client)
    stranger = auth_headers("owner-2")

    assert client.get(f"/api/documents/{document['id']}", headers=stranger).status_code == 404
    assert client.post(f"/api/ai/documents/{document['id']}/summarize", headers=stranger).status_code == 404
    question = client.post(
        f"/api/ai/documents/{document['id']}/question", json={"question": "Who pays rent?"}, headers=stranger
    )
    assert question.status_code == 404
    assert client.get(f"/api/ai/documents/{document['id']}/analyses", headers=stranger).status_code == 404
    assert client.get(f"/api/ai/documents/{document['id']}/clauses", headers=stranger).status_code == 404
    assert client.delete(f"/api/documents/{document['id']}", headers=stranger).status_code == 404
    assert client.get("/api/documents", headers=stranger).json()["totalElements"] == 0

    summary = client.post(f"/api/ai/documents/{document['id']}/summarize", headers=auth_headers()).json()
    assert client.get(f"/api/ai/analyses/{summary['id']}", headers=stranger).status_code == 404
    assert client.get(f"/api/ai/analyses/{summary['id']}", headers=auth_headers()).status_code == 200


def test_clause_extraction_and_listing(client):
    document = _uploaded(client)

    response = client.post(f"/api/ai/documents/{document['id']}/extract-clauses", headers=auth_headers())

    assert response.status_code == 200
    assert response.headers["X-Analysis-Status"] == "COMPLETED"
    clauses = response.json()
    assert [c["importanceLevel"] for c in clauses] == ["HIGH", "MEDIUM"]
    assert all(c["analysisId"] == response.headers["X-Analysis-Id"] for c in clauses)
    assert clauses[0]["plainEnglishExplanation"]

    listed = client.get(f"/api/ai/documents/{document['id']}/clauses", headers=auth_headers()).json()
    assert [c["id"] for c in listed] == [c["id"] for c in clauses]

    run = client.get(f"/api/ai/analyses/{response.headers['X-Analysis-Id']}", headers=auth_headers()).json()
    assert run["analysisType"] == "CLAUSE_EXTRACTION"
    assert run["result"] == "Extracted 2 clauses"


def test_question_and_template(client):
    document = _uploaded(client)

    missing = client.post(f"/api/ai/documents/{document['id']}/question", json={}, headers=auth_headers())
    assert missing.status_code == 400

    answer = client.post(
        f"/api/ai/documents/{document['id']}/question",
        json={"question": "Who is the tenant?"},
        headers=auth_headers(),
    )
    assert answer.status_code == 200
    assert answer.json()["analysisType"] == "QUESTION_ANSWER"
    assert answer.json()["prompt"] == "Who is the tenant?"

    template = client.post(
        "/api/ai/templates/generate",
        json={"templateType": "Residential Lease", "requirements": "One year, two tenants"},
        headers=auth_headers(),
    )
    assert template.status_code == 200
    assert template.json()["documentId"] is None
    assert template.json()["templateType"] == "Residential Lease"
    assert "[PARTY A NAME]" in template.json()["result"]


def test_unknown_analysis_type_filter_rejected(client):
    document = _uploaded(client)
    response = client.get(
        f"/api/ai/documents/{document['id']}/analyses",
        params={"analysisType": "POEM"},
        headers=auth_headers(),
    )
    assert response.status_code == 400


def test_delete_cascades_to_analyses_and_clauses(client):
    document = _uploaded(client)
    summary = client.post(f"/api/ai/documents/{document['id']}/summarize", headers=auth_headers()).json()
    client.post(f"/api/ai/documents/{document['id']}/extract-clauses", headers=auth_headers())

    response = client.delete(f"/api/documents/{document['id']}", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == {"message": "Document deleted successfully"}
    assert client.get(f"/api/documents/{document['id']}", headers=auth_headers()).status_code == 404
    assert client.get(f"/api/ai/analyses/{summary['id']}", headers=auth_headers()).status_code == 404
    assert client.get(f"/api/ai/documents/{document['id']}/clauses", headers=auth_headers()).status_code == 404

    history = client.get(f"/api/ai/documents/{document['id']}/analyses", headers=auth_headers())
    assert history.status_code == 200
    assert history.json() == []


def test_list_documents_pages_and_search(client):
    _upload(client, build_pdf("Office lease"), name="Office Lease.pdf")
    _upload(client, build_pdf("Confidentiality"), name="nda.pdf")

    page = client.get("/api/documents", params={"page": 0, "size": 1}, headers=auth_headers()).json()
    assert page["totalElements"] == 2
    assert page["totalPages"] == 2
    assert len(page["content"]) == 1

    found = client.get("/api/documents", params={"search": "lease"}, headers=auth_headers()).json()
    assert [d["originalName"] for d in found["content"]] == ["Office Lease.pdf"]

    bad = client.get("/api/documents", params={"size": 500}, headers=auth_headers())
    assert bad.status_code == 400


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/nothing-here", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["requestId"] == "req-123"
    assert response.json()["path"] == "/api/nothing-here"
