"""Domain-level interfaces defining contracts for classification collaborators."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .models import (
    AnalysisType,
    BackendResult,
    ProviderCompletion,
    TierConfig,
    Topic,
    UsageRecord,
)


class ILanguageModelProvider(Protocol):
    """Stateless request/response text-completion service."""

    async def complete(
        self, system_prompt: str, user_prompt: str, tier_config: TierConfig
    ) -> ProviderCompletion:
        """Return the completion text and the token usage reported by the provider."""


class IUsageRepository(Protocol):
    """Durable store for usage records and cost aggregation."""

    async def append_usage_record(self, record: UsageRecord) -> None:
        """Persist a usage record. Callers treat failures as best-effort."""

    async def sum_cost(self, user_id: str, since: datetime) -> float:
        """Sum ``cost_usd`` for the user's records created at or after ``since``."""


class ITopicCache(Protocol):
    """Key/value store for classified topics with its own expiry policy."""

    def get(self, key: str) -> Optional[Topic]:
        """Return the cached topic, or None when missing or expired."""

    def set(self, key: str, topic: Topic) -> None:
        """Store a topic under the key, evicting entries as the policy requires."""


class ITierSelector(Protocol):
    """Maps raw topic text to the tier that should classify it."""

    def select(self, topic: str) -> TierConfig:
        """Return the tier configuration for the topic."""


class IClassificationBackend(Protocol):
    """Capability that produces a classification for a single topic."""

    name: str

    async def classify(
        self, topic: str, analysis_type: AnalysisType, tier_config: TierConfig
    ) -> BackendResult:
        """Classify a topic at the given tier and report the incurred cost."""

    async def aclose(self) -> None:
        """Release resources held by the backend."""
