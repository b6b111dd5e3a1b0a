"""Deterministic keyword classifier used when the provider is disabled."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

from instructly_classifier.domain.interfaces import IClassificationBackend
from instructly_classifier.domain.models import (
    AnalysisType,
    BackendResult,
    Classification,
    TierConfig,
)
from instructly_classifier.utils.cost_calculator import (
    SYNTHETIC_INPUT_TOKENS,
    SYNTHETIC_OUTPUT_TOKENS,
    estimate_synthetic_cost,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordRule:
    """Classification template applied when any keyword appears in the topic."""

    classification: Classification
    keywords: Tuple[str, ...]
    content_type: str
    rationale: str
    recommended_methods: Tuple[str, ...]
    confidence: float

    def matches(self, lowered_topic: str) -> bool:
        return any(keyword in lowered_topic for keyword in self.keywords)


KEYWORD_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule(
        classification=Classification.FACTS,
        keywords=("syntax", "command", "specific", "data"),
        content_type="Specific factual information",
        rationale=(
            "This topic involves specific commands, syntax, or data points that "
            "learners need to memorize and recall accurately. It represents "
            "concrete, factual information rather than abstract concepts."
        ),
        recommended_methods=(
            "Flashcards",
            "Repetitive practice",
            "Reference guides",
            "Mnemonics",
        ),
        confidence=0.92,
    ),
    KeywordRule(
        classification=Classification.CONCEPTS,
        keywords=("concept", "theory", "principle", "understanding"),
        content_type="Abstract conceptual understanding",
        rationale=(
            "This topic represents an abstract idea or concept that requires "
            "learners to understand underlying principles and be able to recognize "
            "and apply the concept in various contexts."
        ),
        recommended_methods=(
            "Concept mapping",
            "Examples and non-examples",
            "Case studies",
            "Analogies",
        ),
        confidence=0.89,
    ),
    KeywordRule(
        classification=Classification.PROCESSES,
        keywords=("process", "flow", "workflow", "how"),
        content_type="Sequential process understanding",
        rationale=(
            "This topic involves understanding a sequence of events or a systematic "
            "workflow that learners need to comprehend as a complete process rather "
            "than individual steps."
        ),
        recommended_methods=(
            "Process diagrams",
            "Flowcharts",
            "Simulation",
            "Sequential explanations",
        ),
        confidence=0.87,
    ),
    KeywordRule(
        classification=Classification.PROCEDURES,
        keywords=("procedure", "step", "method", "technique"),
        content_type="Step-by-step procedural knowledge",
        rationale=(
            "This topic involves specific procedures or methods that learners need "
            "to execute following precise steps in a particular sequence."
        ),
        recommended_methods=(
            "Step-by-step tutorials",
            "Hands-on practice",
            "Checklists",
            "Guided practice",
        ),
        confidence=0.91,
    ),
)

DEFAULT_RULE = KeywordRule(
    classification=Classification.PRINCIPLES,
    keywords=(),
    content_type="Guiding principles and best practices",
    rationale=(
        "This topic involves higher-order principles or guidelines that require "
        "learners to understand when and how to apply them in various situations "
        "and contexts."
    ),
    recommended_methods=(
        "Case-based learning",
        "Problem-solving scenarios",
        "Decision trees",
        "Expert modeling",
    ),
    confidence=0.85,
)


def match_rule(
    topic: str, rules: Sequence[KeywordRule] = KEYWORD_RULES
) -> KeywordRule:
    """First rule whose keywords appear in the topic, else principles."""

    lowered = topic.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule
    return DEFAULT_RULE


class SyntheticBackend(IClassificationBackend):
    """Classifies locally and prices a fixed token estimate at the tier's rates."""

    name = "synthetic"

    async def classify(
        self, topic: str, analysis_type: AnalysisType, tier_config: TierConfig
    ) -> BackendResult:
        logger.info(
            "synthetic_classification",
            extra={"topic_preview": topic[:50], "tier": tier_config.tier.value},
        )
        rule = match_rule(topic)
        return BackendResult(
            classification=rule.classification,
            content_type=rule.content_type,
            rationale=rule.rationale,
            recommended_methods=rule.recommended_methods,
            confidence=rule.confidence,
            tier=tier_config.tier,
            model_name=tier_config.model_name,
            input_tokens=SYNTHETIC_INPUT_TOKENS,
            output_tokens=SYNTHETIC_OUTPUT_TOKENS,
            cost=estimate_synthetic_cost(tier_config),
            billable=False,
        )

    async def aclose(self) -> None:
        """Nothing to release."""
