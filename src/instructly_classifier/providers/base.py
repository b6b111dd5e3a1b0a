"""Provider abstractions and shared behavior implementations."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from instructly_classifier.domain.exceptions import ProviderError
from instructly_classifier.domain.models import ProviderCompletion, TierConfig


@dataclass(frozen=True)
class ProviderConfig:
    """Configuration values shared by all provider adapters."""

    api_key: str
    base_url: str
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must be provided")
        if not self.base_url:
            raise ValueError("base_url must be provided")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")


class BaseProvider(ABC):
    """Template-method base class that normalizes errors and logs calls.

    One call to ``complete`` is exactly one provider request; retries belong
    to the caller.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.logger = logger or logging.getLogger(
            f"{__name__}.{self.__class__.__name__}"
        )

    async def complete(
        self, system_prompt: str, user_prompt: str, tier_config: TierConfig
    ) -> ProviderCompletion:
        """Public API that aligns with ILanguageModelProvider.complete."""

        self.log_request(user_prompt, tier_config)
        try:
            completion = await self._make_api_call(
                system_prompt, user_prompt, tier_config
            )
        except ProviderError:
            raise
        except Exception as exc:
            self.logger.exception("Unexpected provider failure")
            raise ProviderError(
                "Unexpected provider failure",
                context={"provider": self.__class__.__name__},
            ) from exc
        self.log_response(completion)
        return completion

    @abstractmethod
    async def _make_api_call(
        self, system_prompt: str, user_prompt: str, tier_config: TierConfig
    ) -> ProviderCompletion:
        """Provider-specific HTTP/API interaction implemented by subclasses."""

    def log_request(self, user_prompt: str, tier_config: TierConfig) -> None:
        self.logger.debug(
            "provider_request",
            extra={
                "prompt_preview": user_prompt[:100],
                "model": tier_config.model_name,
                "tier": tier_config.tier.value,
                "provider": self.__class__.__name__,
            },
        )

    def log_response(self, completion: ProviderCompletion) -> None:
        self.logger.debug(
            "provider_response",
            extra={
                "model": completion.model_name,
                "input_tokens": completion.input_tokens,
                "output_tokens": completion.output_tokens,
                "provider": self.__class__.__name__,
            },
        )

    async def aclose(self) -> None:
        """Release any transport resources held by the adapter."""
