import json

import pytest

from instructly_classifier.backends.prompts import (
    INSTRUCTIONAL_DESIGN_PROMPT,
    build_user_prompt,
    parse_analysis,
)
from instructly_classifier.domain.exceptions import ProviderError, ProviderResponseError
from instructly_classifier.domain.models import Classification


def _payload(**overrides) -> str:
    data = {
        "classification": "facts",
        "contentType": "specific syntax rules",
        "rationale": "memorize the rules",
        "recommendedMethods": ["flashcards", "practice"],
        "confidence": 0.9,
    }
    data.update(overrides)
    return json.dumps(data)


def test_system_prompt_lists_all_categories():
    for category in ("FACTS", "CONCEPTS", "PROCESSES", "PROCEDURES", "PRINCIPLES"):
        assert category in INSTRUCTIONAL_DESIGN_PROMPT


def test_user_prompt_contains_literal_topic():
    assert build_user_prompt('Loops "for" and while') == (
        'Analyze this topic: "Loops "for" and while"'
    )


def test_parse_analysis_reads_all_fields():
    parsed = parse_analysis(_payload())

    assert parsed.classification is Classification.FACTS
    assert parsed.content_type == "specific syntax rules"
    assert parsed.recommended_methods == ["flashcards", "practice"]
    assert parsed.confidence == pytest.approx(0.9)


def test_parse_analysis_normalizes_classification_case():
    parsed = parse_analysis(_payload(classification=" Principles "))

    assert parsed.classification is Classification.PRINCIPLES


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[1, 2, 3]",
        _payload(classification="opinions"),
        _payload(confidence=1.2),
        json.dumps({"classification": "facts"}),
    ],
)
def test_parse_analysis_rejects_bad_payloads(content):
    with pytest.raises(ProviderResponseError):
        parse_analysis(content)


def test_response_error_is_a_provider_error():
    with pytest.raises(ProviderError):
        parse_analysis("{")
