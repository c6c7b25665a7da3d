from legalease.services import prompt_builder


def test_short_document_is_not_truncated():
    prompt = prompt_builder.build_summary_prompt("Short contract.", limit=100)
    assert "Document content:\nShort contract." in prompt
    assert "truncated" not in prompt


def test_long_document_is_truncated_and_marked():
    text = "A" * 50 + "B" * 50
    prompt = prompt_builder.build_clause_prompt(text, limit=50)

    assert "A" * 50 in prompt
    assert "A" * 50 + "B" not in prompt
    assert "only the first 50 of 100 characters" in prompt
    assert "JSON array" in prompt


def test_truncate_document():
    assert prompt_builder.truncate_document("abcdef", 3) == ("abc", True)
    assert prompt_builder.truncate_document("abc", 3) == ("abc", False)


def test_question_prompt_carries_question():
    prompt = prompt_builder.build_question_prompt("The rent is 1000.", "What is the rent?")
    assert "Question: What is the rent?" in prompt
    assert "The rent is 1000." in prompt


def test_template_prompt_has_no_document():
    prompt = prompt_builder.build_template_prompt("Residential Lease", "Two bedrooms, one year")
    assert "Template type: Residential Lease" in prompt
    assert "Requirements: Two bedrooms, one year" in prompt
    assert "Document content" not in prompt
