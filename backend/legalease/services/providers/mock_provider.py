"""
Mock AI Provider.

Provides canned completions for development, tests and the fallback case
where no API key is configured. Does not make network calls.
"""
import json
import re

from ...core.logging_config import get_logger
from ..prompt_builder import CLAUSE_INSTRUCTION
from .base import AIProvider

logger = get_logger(__name__)

_QUESTION_RE = re.compile(r"Question:\s*(.+)")
_TEMPLATE_RE = re.compile(r"Template type:\s*(.+)")


class MockProvider(AIProvider):
    """
    Mock AI Provider for testing and fallback scenarios.

    Picks a response shape from the instruction at the head of the prompt, so
    every analysis type gets a plausible, parseable completion. Document text
    and user questions never steer the choice.
    """

    name = "mock"

    def complete(self, prompt: str, max_tokens: int) -> str:
        if prompt.startswith(CLAUSE_INSTRUCTION):
            return json.dumps(self._mock_clauses())

        # The instruction block ends at the first blank line; the document follows
        head = prompt.split("\n\n", 1)[0]
        question = _QUESTION_RE.search(head)
        if question:
            return f"This is a MOCK answer to: {question.group(1).strip()}"

        template = _TEMPLATE_RE.search(head)
        if template:
            template_type = template.group(1).strip()
            return (
                f"{template_type.upper()}\n\n"
                "This agreement is made between [PARTY A NAME] and [PARTY B NAME] "
                "effective as of [EFFECTIVE DATE].\n\n"
                "DISCLAIMER: This MOCK template is not legal advice. Consult a qualified attorney."
            )

        return "This is a MOCK summary. The document sets out the rights and obligations of the parties."

    @staticmethod
    def _mock_clauses() -> list:
        return [
            {
                "clauseType": "Termination",
                "clauseText": "Either party may terminate this agreement with thirty days written notice.",
                "explanation": "Both sides can end the contract if they give a month's notice in writing.",
                "importance": "HIGH",
                "confidence": 0.9,
            },
            {
                "clauseType": "Confidentiality",
                "clauseText": "The parties shall keep all shared information confidential.",
                "explanation": "Neither side may share private information it receives.",
                "importance": "MEDIUM",
            },
        ]
