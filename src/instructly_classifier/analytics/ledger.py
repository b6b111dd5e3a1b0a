"""Usage ledger that records spend and enforces the monthly ceiling."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from instructly_classifier.domain.exceptions import CostQueryError, UsageLoggingError
from instructly_classifier.domain.interfaces import IUsageRepository
from instructly_classifier.domain.models import (
    BackendResult,
    CostLimitStatus,
    UsageRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_LIMIT = 50.0
TOPIC_ANALYSIS_OPERATION = "topic_analysis"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def month_start(now: Optional[datetime] = None) -> datetime:
    """First instant of the calendar month containing ``now``.

    Naive values and fixed offsets other than UTC (what ``astimezone()``
    yields) are read on the server-local clock. Midnight on day 1 gets its
    own UTC offset, which differs from ``now``'s when a DST change falls in
    between. Zone-aware values (``zoneinfo``, UTC) stay in their zone.
    """

    current = now or _local_now()
    tz = current.tzinfo
    if tz is None or (isinstance(tz, timezone) and tz != timezone.utc):
        wall = current.astimezone() if tz is not None else current
        start = wall.replace(
            tzinfo=None, day=1, hour=0, minute=0, second=0, microsecond=0
        )
        return start.astimezone()
    return current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class UsageLedger:
    """Facade over the usage repository.

    Writes are best-effort and reads fail open: neither path ever raises to
    the caller.
    """

    def __init__(
        self,
        repository: IUsageRepository,
        *,
        monthly_limit: float = DEFAULT_MONTHLY_LIMIT,
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        if monthly_limit <= 0:
            raise ValueError("monthly_limit must be greater than zero")
        self._repository = repository
        self._monthly_limit = monthly_limit
        self._clock = clock

    @property
    def monthly_limit(self) -> float:
        return self._monthly_limit

    async def record_usage(
        self,
        user_id: str,
        result: BackendResult,
        *,
        operation_type: str = TOPIC_ANALYSIS_OPERATION,
    ) -> Optional[UsageRecord]:
        """Append a usage record, returning None when persistence failed."""

        record = UsageRecord(
            user_id=user_id,
            model_tier=result.tier,
            model_name=result.model_name,
            operation_type=operation_type,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            cost_usd=result.cost,
        )
        try:
            await self._repository.append_usage_record(record)
        except Exception as exc:
            error = UsageLoggingError(
                context={"user_id": user_id, "record_id": record.id}
            )
            logger.warning(
                "usage_logging_failed",
                extra={"error": str(error), "cause": repr(exc)},
                exc_info=exc,
            )
            return None
        return record

    async def get_user_monthly_cost(self, user_id: str) -> float:
        since = month_start(self._clock())
        try:
            total = await self._repository.sum_cost(user_id, since)
        except Exception as exc:
            error = CostQueryError(context={"user_id": user_id})
            logger.warning(
                "monthly_cost_query_failed",
                extra={"error": str(error), "cause": repr(exc)},
                exc_info=exc,
            )
            return 0.0
        return float(total or 0.0)

    async def check_cost_limits(self, user_id: str) -> CostLimitStatus:
        current_cost = await self.get_user_monthly_cost(user_id)
        return CostLimitStatus(
            within_limits=current_cost < self._monthly_limit,
            current_cost=current_cost,
            limit=self._monthly_limit,
        )
