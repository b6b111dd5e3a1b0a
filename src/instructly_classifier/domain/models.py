"""Domain value objects representing topic classification concepts."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Mapping, Tuple
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationError as PydanticValidationError,
    field_validator,
)
from pydantic.dataclasses import dataclass as pydantic_dataclass

from .exceptions import ValidationError

MAX_TOPICS_PER_REQUEST = 10
MAX_TOPIC_LENGTH = 1000


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisType(str, Enum):
    """Kinds of analysis a caller may request for a batch."""

    INSTRUCTIONAL_DESIGN = "instructional_design"
    BLOOM_TAXONOMY = "bloom_taxonomy"
    INSTRUCTIONAL_METHODS = "instructional_methods"


class Classification(str, Enum):
    """Instructional-design content categories."""

    FACTS = "facts"
    CONCEPTS = "concepts"
    PROCESSES = "processes"
    PROCEDURES = "procedures"
    PRINCIPLES = "principles"


class ModelTier(str, Enum):
    """Pricing/capability tiers available for classification."""

    ECONOMY = "economy"
    PREMIUM = "premium"


@pydantic_dataclass(frozen=True)
class TierConfig:
    """Immutable model configuration and per-token pricing for a tier."""

    tier: ModelTier
    model_name: str
    input_rate: float = Field(..., gt=0)
    output_rate: float = Field(..., gt=0)

    @field_validator("model_name")
    @classmethod
    def validate_model_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("model_name must be a non-empty string")
        return value


TopicText = Annotated[
    str, StringConstraints(min_length=1, max_length=MAX_TOPIC_LENGTH)
]


class ClassificationRequest(BaseModel):
    """Validated batch of topics submitted for classification."""

    model_config = ConfigDict(frozen=True)

    topics: Tuple[TopicText, ...] = Field(
        ..., min_length=1, max_length=MAX_TOPICS_PER_REQUEST
    )
    analysis_type: AnalysisType = AnalysisType.INSTRUCTIONAL_DESIGN

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ClassificationRequest":
        """Build a request from raw caller input, raising the domain ValidationError."""

        if not isinstance(payload, Mapping):
            detail = f"payload: expected an object, got {type(payload).__name__}"
            raise ValidationError(
                "Invalid topic analysis request", context={"errors": [detail]}
            )
        data = dict(payload)
        if "analysisType" in data and "analysis_type" not in data:
            data["analysis_type"] = data.pop("analysisType")
        if data.get("analysis_type") is None:
            data.pop("analysis_type", None)
        topics = data.get("topics")
        if isinstance(topics, list):
            data["topics"] = tuple(topics)
        try:
            return cls(**data)
        except PydanticValidationError as exc:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            ]
            raise ValidationError(
                "Invalid topic analysis request", context={"errors": errors}
            ) from exc


class InstructionalAnalysis(BaseModel):
    """Structured rationale attached to a classified topic."""

    model_config = ConfigDict(frozen=True)

    content_type: str
    rationale: str
    recommended_methods: Tuple[str, ...] = Field(default_factory=tuple)
    confidence: float = Field(..., ge=0, le=1)
    model_used: ModelTier


class Topic(BaseModel):
    """A classified topic. Created once per cache miss and never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    content: str
    classification: Classification
    analysis: InstructionalAnalysis
    generated_at: datetime = Field(default_factory=_utcnow)


class ClassificationResult(BaseModel):
    """Batch outcome; ``processing_time`` is wall-clock milliseconds."""

    model_config = ConfigDict(frozen=True)

    topics: Tuple[Topic, ...]
    total_cost: float = Field(..., ge=0)
    processing_time: float = Field(..., ge=0)


class ProviderCompletion(BaseModel):
    """Normalized text completion returned by a language model provider."""

    model_config = ConfigDict(frozen=True)

    content: str
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    model_name: str = ""


class BackendResult(BaseModel):
    """Single-topic classification produced by a backend, with its cost."""

    model_config = ConfigDict(frozen=True)

    classification: Classification
    content_type: str
    rationale: str
    recommended_methods: Tuple[str, ...] = Field(default_factory=tuple)
    confidence: float = Field(..., ge=0, le=1)
    tier: ModelTier
    model_name: str
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cost: float = Field(..., ge=0)
    billable: bool = True

    def to_analysis(self) -> InstructionalAnalysis:
        return InstructionalAnalysis(
            content_type=self.content_type,
            rationale=self.rationale,
            recommended_methods=self.recommended_methods,
            confidence=self.confidence,
            model_used=self.tier,
        )


class UsageRecord(BaseModel):
    """Append-only audit entry for a billable model invocation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    model_tier: ModelTier
    model_name: str = ""
    operation_type: str = "topic_analysis"
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)
    cost_usd: float = Field(..., ge=0)
    created_at: datetime = Field(default_factory=_utcnow)


class CostLimitStatus(BaseModel):
    """Derived view of a user's monthly spend against the limit."""

    model_config = ConfigDict(frozen=True)

    within_limits: bool
    current_cost: float
    limit: float


class MonthlyCostSummary(BaseModel):
    """Monthly spend summary exposed to callers."""

    model_config = ConfigDict(frozen=True)

    current_cost: float
    limit: float
    within_limits: bool
    percentage_used: float


class HealthStatus(BaseModel):
    """Availability snapshot of the classification backend."""

    model_config = ConfigDict(frozen=True)

    ai_service_available: bool
    status: str
    backend: str
    checked_at: datetime = Field(default_factory=_utcnow)
