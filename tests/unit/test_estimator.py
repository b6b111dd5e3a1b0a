import pytest

from instructly_classifier.domain.models import ModelTier
from instructly_classifier.routing.estimator import (
    ComplexityHeuristic,
    KeywordSignal,
    LengthSignal,
    default_complexity_heuristic,
)
from instructly_classifier.routing.selector import TierSelector
from instructly_classifier.utils.cost_calculator import default_tier_config


@pytest.fixture
def heuristic() -> ComplexityHeuristic:
    return default_complexity_heuristic()


def test_heuristic_requires_signals():
    with pytest.raises(ValueError):
        ComplexityHeuristic([])


TOPICS = [
    ("Basic math", False),
    ("Python syntax basics", False),
    ("strategic framework design", True),
    ("Evaluate sources", True),
    ("THEORY of relativity", True),
    ("Instructional philosophy", True),
    ("Photosynthesis", False),
    ("x" * 100, False),
    ("x" * 101, True),
]


@pytest.mark.parametrize("topic,expected", TOPICS)
def test_heuristic_flags_expected_topics(heuristic, topic, expected):
    assert heuristic.is_complex(topic) is expected


def test_keyword_signal_matches_substrings_case_insensitively():
    signal = KeywordSignal()

    assert signal.matches("Redesigning Onboarding") == ["design"]
    assert signal.detect("nothing special") is False


def test_length_signal_is_strictly_greater_than_threshold():
    signal = LengthSignal(threshold=5)

    assert signal.detect("12345") is False
    assert signal.detect("123456") is True


def test_reasons_describe_fired_signals(heuristic):
    reasons = heuristic.reasons("Compare and analyze " + "x" * 100)

    assert any(reason.startswith("keywords=") for reason in reasons)
    assert any(reason.startswith("length=") for reason in reasons)


def test_selector_routes_complex_topics_to_premium():
    selector = TierSelector()

    assert selector.select_tier("strategic framework design") is ModelTier.PREMIUM
    assert selector.select("strategic framework design").model_name == "gpt-4o"


def test_selector_routes_simple_topics_to_economy():
    selector = TierSelector()

    assert selector.select_tier("Basic math") is ModelTier.ECONOMY
    assert selector.select("Basic math").model_name == "gpt-3.5-turbo"


def test_selector_is_deterministic():
    selector = TierSelector()

    tiers = {selector.select_tier("Design thinking") for _ in range(20)}

    assert tiers == {ModelTier.PREMIUM}


def test_selector_rejects_mismatched_tier_configs():
    with pytest.raises(ValueError):
        TierSelector(premium=default_tier_config(ModelTier.ECONOMY))


def test_selector_explain_mentions_reasons():
    selector = TierSelector()

    assert "keywords=design" in selector.explain("Course design")
    assert "no complexity signals" in selector.explain("Basic math")
