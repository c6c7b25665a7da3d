"""
Parsing of clause extraction completions.

Models often wrap JSON in markdown fences or add a sentence around it, so the
first top-level JSON array is located before validation. Any item that fails
validation fails the whole batch: a run either yields a complete clause set or
nothing.
"""
import json
import re
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from ..api.exceptions import GatewayError
from ..domain.entities import ImportanceLevel

DEFAULT_CLAUSE_CONFIDENCE = 0.8

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


class ParsedClause(BaseModel):
    """One clause as returned by the model."""
    clause_type: str = Field(alias="clauseType", min_length=1)
    clause_text: str = Field(alias="clauseText", min_length=1)
    explanation: Optional[str] = None
    importance: ImportanceLevel = ImportanceLevel.MEDIUM
    confidence: float = Field(default=DEFAULT_CLAUSE_CONFIDENCE, ge=0.0, le=1.0)

    @field_validator("clause_type", "clause_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("importance", mode="before")
    @classmethod
    def _normalize_importance(cls, value):
        if value is None or value == "":
            return ImportanceLevel.MEDIUM
        return str(value).strip().upper()

    @field_validator("confidence", mode="before")
    @classmethod
    def _default_confidence(cls, value):
        return DEFAULT_CLAUSE_CONFIDENCE if value is None else value


def _decode_json_array(response: str):
    text = response.strip()
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    start = text.find("[")
    if start < 0:
        raise GatewayError(GatewayError.MALFORMED_RESPONSE, "Clause response contains no JSON array")
    # Trailing prose after the array is ignored
    items, _ = json.JSONDecoder().raw_decode(text, start)
    return items


def parse_clauses(response: str) -> List[ParsedClause]:
    """
    Parse a model completion into validated clauses.

    Raises:
        GatewayError: MALFORMED_RESPONSE when the completion is not a valid clause array
    """
    try:
        items = _decode_json_array(response)
    except json.JSONDecodeError as e:
        raise GatewayError(GatewayError.MALFORMED_RESPONSE, f"Clause response is not valid JSON: {e.msg}")

    if not isinstance(items, list):
        raise GatewayError(GatewayError.MALFORMED_RESPONSE, "Clause response is not a JSON array")

    clauses = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise GatewayError(GatewayError.MALFORMED_RESPONSE, f"Clause {index} is not an object")
        try:
            clauses.append(ParsedClause.model_validate(item))
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise GatewayError(
                GatewayError.MALFORMED_RESPONSE,
                f"Clause {index} is invalid: {field} {first.get('msg', '')}".strip(),
            )
    return clauses
