"""OpenAI provider adapter built on top of ``BaseProvider``."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from instructly_classifier.domain.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
    ProviderUnavailableError,
)
from instructly_classifier.domain.models import ProviderCompletion, TierConfig

from .base import BaseProvider, ProviderConfig


OPENAI_BASE_URL = "https://api.openai.com"
OPENAI_CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


class OpenAIProvider(BaseProvider):
    """Concrete provider that speaks to OpenAI's chat completions API."""

    TEMPERATURE = 0.3
    MAX_TOKENS = 1000

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        config: ProviderConfig,
        *,
        owns_client: bool = False,
    ) -> None:
        super().__init__(config)
        self._http = http_client
        self._owns_client = owns_client
        self._endpoint = (
            f"{self.config.base_url.rstrip('/')}{OPENAI_CHAT_COMPLETIONS_PATH}"
        )

    async def _make_api_call(
        self, system_prompt: str, user_prompt: str, tier_config: TierConfig
    ) -> ProviderCompletion:
        payload = self._build_payload(system_prompt, user_prompt, tier_config)
        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

        try:
            http_response = await self._http.post(
                self._endpoint,
                json=payload,
                timeout=self.config.timeout,
                headers=headers,
            )
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(
                "OpenAI request timed out", context={"timeout": self.config.timeout}
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(
                "OpenAI request failed", context={"error": str(exc)}
            ) from exc

        return self._map_response(http_response, tier_config)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_payload(
        self, system_prompt: str, user_prompt: str, tier_config: TierConfig
    ) -> Dict[str, Any]:
        return {
            "model": tier_config.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.TEMPERATURE,
            "max_tokens": self.MAX_TOKENS,
            "response_format": {"type": "json_object"},
        }

    def _map_response(
        self, http_response: httpx.Response, tier_config: TierConfig
    ) -> ProviderCompletion:
        status = http_response.status_code
        data = self._safe_json(http_response)

        if status == 429:
            raise ProviderRateLimitError(
                "OpenAI rate limit exceeded",
                context={"status_code": status},
            )
        if status in (401, 403):
            raise ProviderAuthError(
                "OpenAI authentication failed", context={"status_code": status}
            )
        if status >= 500:
            raise ProviderUnavailableError(
                "OpenAI service unavailable",
                context={"status_code": status},
            )
        if status >= 400:
            message = "OpenAI request failed"
            error = data.get("error") if isinstance(data, dict) else None
            if isinstance(error, dict):
                message = error.get("message") or message
            elif isinstance(error, str) and error:
                message = error
            raise ProviderError(message, context={"status_code": status})

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ProviderResponseError(
                "Malformed OpenAI response", context={"status_code": status}
            ) from exc
        if not content:
            raise ProviderResponseError("No response from AI model")

        usage = data.get("usage") or {}
        return ProviderCompletion(
            content=content,
            input_tokens=int(usage.get("prompt_tokens", 0) or 0),
            output_tokens=int(usage.get("completion_tokens", 0) or 0),
            model_name=str(data.get("model") or tier_config.model_name),
        )

    @staticmethod
    def _safe_json(http_response: httpx.Response) -> Optional[Any]:
        try:
            return http_response.json()
        except ValueError:
            return None
