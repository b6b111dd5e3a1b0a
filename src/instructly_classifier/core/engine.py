"""Classification engine coordinating routing, caching, backends and cost."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Tuple, Union

from instructly_classifier.analytics.ledger import UsageLedger
from instructly_classifier.cache.memory_cache import topic_cache_key
from instructly_classifier.domain.exceptions import ClassificationError, ClassifierError
from instructly_classifier.domain.interfaces import (
    IClassificationBackend,
    ITierSelector,
    ITopicCache,
)
from instructly_classifier.domain.models import (
    AnalysisType,
    ClassificationRequest,
    ClassificationResult,
    CostLimitStatus,
    Topic,
)

logger = logging.getLogger(__name__)


class ClassificationEngine:
    """Classifies topic batches sequentially, one provider call per cache miss.

    The engine does not check the monthly cost limit; callers are expected to
    run :meth:`check_cost_limits` before starting a batch, and a batch that
    has started runs to completion or failure.
    """

    def __init__(
        self,
        selector: ITierSelector,
        backend: IClassificationBackend,
        cache: ITopicCache,
        ledger: UsageLedger,
    ) -> None:
        self._selector = selector
        self._backend = backend
        self._cache = cache
        self._ledger = ledger

    @property
    def backend(self) -> IClassificationBackend:
        return self._backend

    @property
    def ledger(self) -> UsageLedger:
        return self._ledger

    async def analyze_topics(
        self,
        request: Union[ClassificationRequest, Mapping[str, Any]],
        user_id: str,
    ) -> ClassificationResult:
        if not isinstance(request, ClassificationRequest):
            request = ClassificationRequest.from_payload(request)
        return await self.classify_batch(request, user_id)

    async def classify_batch(
        self, request: ClassificationRequest, user_id: str
    ) -> ClassificationResult:
        started = time.perf_counter()
        topics: list[Topic] = []
        total_cost = 0.0

        try:
            for content in request.topics:
                key = topic_cache_key(content, request.analysis_type)
                cached = self._cache.get(key)
                if cached is not None:
                    logger.debug(
                        "classification_cache_hit",
                        extra={"cache_key": key, "user_id": user_id},
                    )
                    topics.append(cached)
                    continue

                topic, cost = await self.classify_single(
                    content, request.analysis_type, user_id
                )
                topics.append(topic)
                total_cost += cost
                self._cache.set(key, topic)
        except ClassifierError as exc:
            self._log_failure(user_id, request, exc)
            raise
        except Exception as exc:
            self._log_failure(user_id, request, exc)
            raise ClassificationError(
                f"AI analysis failed: {exc}", context={"user_id": user_id}
            ) from exc

        processing_time = (time.perf_counter() - started) * 1000
        logger.info(
            "classification_batch_complete",
            extra={
                "user_id": user_id,
                "topics": len(topics),
                "total_cost": total_cost,
                "processing_time_ms": processing_time,
            },
        )
        return ClassificationResult(
            topics=tuple(topics),
            total_cost=total_cost,
            processing_time=processing_time,
        )

    async def classify_single(
        self, topic: str, analysis_type: AnalysisType, user_id: str
    ) -> Tuple[Topic, float]:
        tier_config = self._selector.select(topic)
        result = await self._backend.classify(topic, analysis_type, tier_config)

        if result.billable:
            await self._ledger.record_usage(user_id, result)

        classified = Topic(
            content=topic,
            classification=result.classification,
            analysis=result.to_analysis(),
        )
        return classified, result.cost

    async def get_user_monthly_cost(self, user_id: str) -> float:
        return await self._ledger.get_user_monthly_cost(user_id)

    async def check_cost_limits(self, user_id: str) -> CostLimitStatus:
        return await self._ledger.check_cost_limits(user_id)

    async def aclose(self) -> None:
        """Release the backend's provider transport."""

        close = getattr(self._backend, "aclose", None)
        if close is not None:
            await close()

    @staticmethod
    def _log_failure(
        user_id: str, request: ClassificationRequest, exc: BaseException
    ) -> None:
        logger.error(
            "classification_batch_failed",
            extra={
                "user_id": user_id,
                "topics": len(request.topics),
                "analysis_type": request.analysis_type.value,
                "error": str(exc),
            },
        )
