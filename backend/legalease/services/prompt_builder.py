"""
Prompt construction for each analysis type.

Document text longer than MAX_DOCUMENT_CHARS is cut to its first N
characters and the prompt says so, so the model knows it saw an excerpt.
"""
from typing import Tuple

from ..core.config import MAX_DOCUMENT_CHARS

SUMMARY_INSTRUCTION = (
    "Please provide a comprehensive summary of the following legal document in plain English. "
    "Focus on the main purpose, key parties, important terms, and significant obligations or rights. "
    "Make it accessible to someone without legal training."
)

CLAUSE_INSTRUCTION = (
    "Analyze the following legal document and extract key clauses. "
    "For each clause, provide: 1) Clause type (e.g., 'Payment Terms', 'Termination', 'Liability', etc.), "
    "2) The exact text of the clause, 3) A plain English explanation, "
    "4) Importance level (LOW/MEDIUM/HIGH/CRITICAL), 5) Your confidence between 0 and 1. "
    "Respond with ONLY a JSON array of objects with fields: "
    "clauseType, clauseText, explanation, importance, confidence. "
    "Do not include any explanation or preamble, just the JSON array."
)

QUESTION_INSTRUCTION = (
    "Provide a clear, accurate answer based only on the information in the document. "
    "If the answer is not found in the document, please state that clearly."
)

TEMPLATE_INSTRUCTION = (
    "Please provide a basic template with placeholder fields marked in [BRACKETS]. "
    "Include standard clauses appropriate for this type of document. "
    "Add a disclaimer that this is a basic template and legal review is recommended."
)

TRUNCATION_MARKER = "[Document truncated: only the first {limit} of {total} characters are included]"


def truncate_document(text: str, limit: int = MAX_DOCUMENT_CHARS) -> Tuple[str, bool]:
    """Return (text, truncated) with text cut to its first limit characters."""
    if len(text) <= limit:
        return text, False
    return text[:limit], True


def _document_block(text: str, limit: int) -> str:
    body, truncated = truncate_document(text, limit)
    if truncated:
        marker = TRUNCATION_MARKER.format(limit=limit, total=len(text))
        return f"{marker}\n\nDocument content:\n{body}\n\n{marker}"
    return f"Document content:\n{body}"


def build_summary_prompt(document_text: str, limit: int = MAX_DOCUMENT_CHARS) -> str:
    return f"{SUMMARY_INSTRUCTION}\n\n{_document_block(document_text, limit)}"


def build_clause_prompt(document_text: str, limit: int = MAX_DOCUMENT_CHARS) -> str:
    return f"{CLAUSE_INSTRUCTION}\n\n{_document_block(document_text, limit)}"


def build_question_prompt(document_text: str, question: str, limit: int = MAX_DOCUMENT_CHARS) -> str:
    return (
        "Based on the following legal document, please answer this question.\n"
        f"Question: {question}\n\n"
        f"{QUESTION_INSTRUCTION}\n\n"
        f"{_document_block(document_text, limit)}"
    )


def build_template_prompt(template_type: str, requirements: str) -> str:
    return (
        "Generate a simple legal template.\n"
        f"Template type: {template_type}\n"
        f"Requirements: {requirements}\n\n"
        f"{TEMPLATE_INSTRUCTION}"
    )
