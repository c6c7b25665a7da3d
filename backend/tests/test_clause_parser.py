import pytest

from legalease.api.exceptions import GatewayError
from legalease.domain.entities import ImportanceLevel
from legalease.services.clause_parser import DEFAULT_CLAUSE_CONFIDENCE, parse_clauses


def test_fenced_json_with_preamble():
    response = """Here are the clauses:
```json
[
  {"clauseType": "Termination", "clauseText": "30 days notice.", "explanation": "Give notice.",
   "importance": "high", "confidence": 0.95}
]
```
Let me know if you need more."""

    clauses = parse_clauses(response)

    assert len(clauses) == 1
    assert clauses[0].clause_type == "Termination"
    assert clauses[0].importance == ImportanceLevel.HIGH
    assert clauses[0].confidence == 0.95


def test_defaults_for_missing_fields():
    clauses = parse_clauses('[{"clauseType": "Payment", "clauseText": "Pay on the 1st.", "importance": null}]')

    assert clauses[0].importance == ImportanceLevel.MEDIUM
    assert clauses[0].confidence == DEFAULT_CLAUSE_CONFIDENCE
    assert clauses[0].explanation is None


def test_empty_array_is_valid():
    assert parse_clauses("[]") == []


def test_prose_with_brackets_after_the_array_is_ignored():
    response = '[{"clauseType": "Liability", "clauseText": "Capped at fees paid."}] See [1] for details.'

    clauses = parse_clauses(response)

    assert [c.clause_type for c in clauses] == ["Liability"]


@pytest.mark.parametrize("response", [
    "No clauses found.",
    "[{\"clauseType\": \"A\", ",
    '{"clauseType": "A", "clauseText": "B"}',
    '["just a string"]',
    '[{"clauseType": "A", "clauseText": "   "}]',
    '[{"clauseText": "missing type"}]',
    '[{"clauseType": "A", "clauseText": "B", "importance": "URGENT"}]',
    '[{"clauseType": "A", "clauseText": "B", "confidence": 1.5}]',
])
def test_invalid_responses_fail_the_batch(response):
    with pytest.raises(GatewayError) as exc_info:
        parse_clauses(response)
    assert exc_info.value.kind == GatewayError.MALFORMED_RESPONSE
    assert not exc_info.value.retryable


def test_one_bad_item_fails_whole_batch():
    response = '[{"clauseType": "A", "clauseText": "fine"}, {"clauseType": "B"}]'
    with pytest.raises(GatewayError, match="Clause 1 is invalid"):
        parse_clauses(response)
