"""Prompt text and response parsing for provider-backed classification."""

from __future__ import annotations

import json
from typing import List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
)

from instructly_classifier.domain.exceptions import ProviderResponseError
from instructly_classifier.domain.models import Classification

INSTRUCTIONAL_DESIGN_PROMPT = """You are an expert instructional designer. Analyze the provided topic and classify it according to instructional design framework categories:

1. **FACTS**: Specific information, data points, names, dates, or concrete details that learners need to memorize or recall
2. **CONCEPTS**: Abstract ideas, categories, theories, or principles that require understanding and recognition
3. **PROCESSES**: Natural phenomena, systems, or sequences that learners need to understand how they work
4. **PROCEDURES**: Step-by-step methods, techniques, or skills that learners need to perform
5. **PRINCIPLES**: Rules, guidelines, best practices, or complex reasoning that guide decision-making

For the given topic, provide:
- Primary classification (facts/concepts/processes/procedures/principles)
- Detailed rationale explaining your classification decision
- Recommended instructional methods based on the content type
- Confidence score (0.0-1.0) for your classification

Respond in this exact JSON format:
{
  "classification": "facts|concepts|processes|procedures|principles",
  "contentType": "brief description of the content type",
  "rationale": "detailed explanation of why this classification was chosen",
  "recommendedMethods": ["method1", "method2", "method3"],
  "confidence": 0.95
}"""


def build_user_prompt(topic: str) -> str:
    return f'Analyze this topic: "{topic}"'


class ProviderAnalysisPayload(BaseModel):
    """Shape the provider must return for a classification."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    classification: Classification
    content_type: str = Field(..., alias="contentType")
    rationale: str
    recommended_methods: List[str] = Field(..., alias="recommendedMethods")
    confidence: float = Field(..., ge=0, le=1)

    @field_validator("classification", mode="before")
    @classmethod
    def normalize_classification(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value


def parse_analysis(content: str) -> ProviderAnalysisPayload:
    """Parse provider output; any failure is reported as a provider error."""

    try:
        raw = json.loads(content)
    except (TypeError, ValueError) as exc:
        raise ProviderResponseError(
            "AI response is not valid JSON", context={"preview": str(content)[:200]}
        ) from exc
    if not isinstance(raw, dict):
        raise ProviderResponseError("AI response must be a JSON object")
    try:
        return ProviderAnalysisPayload.model_validate(raw)
    except PydanticValidationError as exc:
        raise ProviderResponseError(
            "AI response is missing required classification fields",
            context={"errors": [error["msg"] for error in exc.errors()]},
        ) from exc
