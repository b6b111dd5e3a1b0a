import pytest
from pydantic import ValidationError as PydanticValidationError

from instructly_classifier.domain.exceptions import ValidationError
from instructly_classifier.domain.models import (
    AnalysisType,
    BackendResult,
    Classification,
    ClassificationRequest,
    InstructionalAnalysis,
    ModelTier,
    TierConfig,
    Topic,
)


def test_request_defaults_to_instructional_design():
    request = ClassificationRequest.from_payload({"topics": ["Basic math"]})

    assert request.topics == ("Basic math",)
    assert request.analysis_type is AnalysisType.INSTRUCTIONAL_DESIGN


def test_request_accepts_camel_case_analysis_type():
    request = ClassificationRequest.from_payload(
        {"topics": ["Basic math"], "analysisType": "bloom_taxonomy"}
    )

    assert request.analysis_type is AnalysisType.BLOOM_TAXONOMY


def test_request_with_exactly_ten_topics_is_valid():
    topics = [f"topic {i}" for i in range(10)]

    request = ClassificationRequest.from_payload({"topics": topics})

    assert len(request.topics) == 10


def test_request_with_eleven_topics_is_rejected():
    topics = [f"topic {i}" for i in range(11)]

    with pytest.raises(ValidationError):
        ClassificationRequest.from_payload({"topics": topics})


def test_empty_topic_list_is_rejected():
    with pytest.raises(ValidationError):
        ClassificationRequest.from_payload({"topics": []})


def test_topic_of_exactly_1000_characters_is_valid():
    request = ClassificationRequest.from_payload({"topics": ["a" * 1000]})

    assert len(request.topics[0]) == 1000


def test_topic_of_1001_characters_is_rejected():
    with pytest.raises(ValidationError) as exc_info:
        ClassificationRequest.from_payload({"topics": ["a" * 1001]})

    assert exc_info.value.context["errors"]


def test_empty_topic_string_is_rejected():
    with pytest.raises(ValidationError):
        ClassificationRequest.from_payload({"topics": ["valid", ""]})


def test_unknown_analysis_type_is_rejected():
    with pytest.raises(ValidationError):
        ClassificationRequest.from_payload(
            {"topics": ["Basic math"], "analysis_type": "vibes"}
        )


def test_missing_topics_is_rejected():
    with pytest.raises(ValidationError):
        ClassificationRequest.from_payload({"analysis_type": "bloom_taxonomy"})


def test_direct_construction_still_validates():
    with pytest.raises(PydanticValidationError):
        ClassificationRequest(topics=())


def test_tier_config_requires_positive_rates():
    with pytest.raises(PydanticValidationError):
        TierConfig(
            tier=ModelTier.ECONOMY, model_name="gpt-3.5-turbo", input_rate=0, output_rate=1
        )


def test_topic_is_immutable_and_gets_generated_id():
    topic = Topic(
        content="Basic math",
        classification=Classification.FACTS,
        analysis=InstructionalAnalysis(
            content_type="arithmetic",
            rationale="memorized facts",
            recommended_methods=("drills",),
            confidence=0.8,
            model_used=ModelTier.ECONOMY,
        ),
    )

    assert topic.id
    assert topic.generated_at.tzinfo is not None
    with pytest.raises(PydanticValidationError):
        topic.content = "changed"


def test_analysis_confidence_must_be_within_unit_interval():
    with pytest.raises(PydanticValidationError):
        InstructionalAnalysis(
            content_type="x",
            rationale="y",
            confidence=1.5,
            model_used=ModelTier.PREMIUM,
        )


def test_backend_result_converts_to_analysis():
    result = BackendResult(
        classification=Classification.PROCEDURES,
        content_type="steps",
        rationale="ordered steps",
        recommended_methods=("checklists",),
        confidence=0.7,
        tier=ModelTier.PREMIUM,
        model_name="gpt-4o",
        cost=0.01,
    )

    analysis = result.to_analysis()

    assert analysis.model_used is ModelTier.PREMIUM
    assert analysis.recommended_methods == ("checklists",)
    assert result.billable is True


@pytest.mark.parametrize("payload", [None, ["Basic math"], "Basic math", 42])
def test_from_payload_rejects_non_mapping_input(payload):
    with pytest.raises(ValidationError) as exc_info:
        ClassificationRequest.from_payload(payload)

    assert "expected an object" in exc_info.value.context["errors"][0]
