"""Backend that classifies topics through the language model provider."""

from __future__ import annotations

import asyncio
import logging

from instructly_classifier.domain.exceptions import ProviderError, ProviderTimeoutError
from instructly_classifier.domain.interfaces import (
    IClassificationBackend,
    ILanguageModelProvider,
)
from instructly_classifier.domain.models import (
    AnalysisType,
    BackendResult,
    ModelTier,
    TierConfig,
)
from instructly_classifier.utils.cost_calculator import calculate_cost
from instructly_classifier.utils.retry import async_retry

from .prompts import INSTRUCTIONAL_DESIGN_PROMPT, build_user_prompt, parse_analysis

logger = logging.getLogger(__name__)


class LiveBackend(IClassificationBackend):
    """Calls the provider, retrying a failed premium attempt at the same tier.

    Economy failures propagate after a single call.
    """

    name = "live"

    def __init__(
        self,
        provider: ILanguageModelProvider,
        *,
        timeout_seconds: float = 10.0,
        max_retries: int = 1,
        retry_delay: float = 0.5,
        system_prompt: str = INSTRUCTIONAL_DESIGN_PROMPT,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self._provider = provider
        self._timeout = timeout_seconds
        self._system_prompt = system_prompt
        self._attempt_with_retry = async_retry(
            attempts=max_retries + 1,
            delay=retry_delay,
            exceptions=(ProviderError,),
        )(self._attempt)

    @property
    def provider(self) -> ILanguageModelProvider:
        return self._provider

    async def classify(
        self, topic: str, analysis_type: AnalysisType, tier_config: TierConfig
    ) -> BackendResult:
        if tier_config.tier is ModelTier.PREMIUM:
            return await self._attempt_with_retry(topic, tier_config)
        return await self._attempt(topic, tier_config)

    async def aclose(self) -> None:
        close = getattr(self._provider, "aclose", None)
        if close is not None:
            await close()

    async def _attempt(self, topic: str, tier_config: TierConfig) -> BackendResult:
        try:
            completion = await asyncio.wait_for(
                self._provider.complete(
                    self._system_prompt, build_user_prompt(topic), tier_config
                ),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise ProviderTimeoutError(
                "AI provider call timed out",
                context={"timeout": self._timeout, "model": tier_config.model_name},
            ) from exc
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(
                f"AI provider call failed: {exc}",
                context={"model": tier_config.model_name},
            ) from exc

        parsed = parse_analysis(completion.content)
        cost = calculate_cost(
            tier_config, completion.input_tokens, completion.output_tokens
        )
        return BackendResult(
            classification=parsed.classification,
            content_type=parsed.content_type,
            rationale=parsed.rationale,
            recommended_methods=tuple(parsed.recommended_methods),
            confidence=parsed.confidence,
            tier=tier_config.tier,
            model_name=completion.model_name or tier_config.model_name,
            input_tokens=completion.input_tokens,
            output_tokens=completion.output_tokens,
            cost=cost,
            billable=True,
        )
