"""Caller-facing facade that enforces the monthly budget before classifying."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from instructly_classifier.core.engine import ClassificationEngine
from instructly_classifier.domain.exceptions import CostLimitExceededError
from instructly_classifier.domain.models import (
    ClassificationRequest,
    ClassificationResult,
    HealthStatus,
    MonthlyCostSummary,
)

logger = logging.getLogger(__name__)


class ClassificationService:
    """High-level API used by request handlers.

    The cost check happens here, once per batch, so the engine itself never
    refuses work mid-batch.
    """

    def __init__(self, engine: ClassificationEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> ClassificationEngine:
        return self._engine

    async def analyze_topics(
        self,
        request: Union[ClassificationRequest, Mapping[str, Any]],
        user_id: str,
    ) -> ClassificationResult:
        if not isinstance(request, ClassificationRequest):
            request = ClassificationRequest.from_payload(request)

        status = await self._engine.check_cost_limits(user_id)
        if not status.within_limits:
            logger.warning(
                "cost_limit_exceeded",
                extra={
                    "user_id": user_id,
                    "current_cost": status.current_cost,
                    "limit": status.limit,
                },
            )
            raise CostLimitExceededError(
                f"Monthly AI cost limit exceeded. Current usage: "
                f"${status.current_cost:.2f}, Limit: ${status.limit:.2f}",
                context={"user_id": user_id},
            )

        return await self._engine.classify_batch(request, user_id)

    async def get_monthly_cost(self, user_id: str) -> MonthlyCostSummary:
        status = await self._engine.check_cost_limits(user_id)
        return MonthlyCostSummary(
            current_cost=status.current_cost,
            limit=status.limit,
            within_limits=status.within_limits,
            percentage_used=(status.current_cost / status.limit) * 100,
        )

    def health_check(self) -> HealthStatus:
        backend_name = getattr(self._engine.backend, "name", "unknown")
        live = backend_name == "live"
        return HealthStatus(
            ai_service_available=live,
            status="healthy" if live else "degraded",
            backend=backend_name,
        )

    async def aclose(self) -> None:
        await self._engine.aclose()
