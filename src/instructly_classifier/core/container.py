"""Dependency injection container for building fully-wired engines."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import httpx

from instructly_classifier.analytics.ledger import UsageLedger
from instructly_classifier.analytics.sqlite_repository import SQLiteUsageRepository
from instructly_classifier.backends.live import LiveBackend
from instructly_classifier.backends.synthetic import SyntheticBackend
from instructly_classifier.cache.memory_cache import InMemoryTopicCache
from instructly_classifier.core.config import ClassifierConfig
from instructly_classifier.core.engine import ClassificationEngine
from instructly_classifier.core.service import ClassificationService
from instructly_classifier.domain.interfaces import (
    IClassificationBackend,
    ILanguageModelProvider,
    ITierSelector,
    ITopicCache,
    IUsageRepository,
)
from instructly_classifier.domain.models import ModelTier
from instructly_classifier.providers.base import ProviderConfig
from instructly_classifier.providers.openai_provider import OpenAIProvider
from instructly_classifier.routing.estimator import default_complexity_heuristic
from instructly_classifier.routing.selector import TierSelector
from instructly_classifier.utils.cost_calculator import default_tier_config

logger = logging.getLogger(__name__)


class DIContainer:
    """Factory helpers that assemble an engine with default wiring."""

    @staticmethod
    def create_engine(
        *,
        openai_api_key: Optional[str] = None,
        config: Optional[ClassifierConfig] = None,
        provider: Optional[ILanguageModelProvider] = None,
        repository: Optional[IUsageRepository] = None,
        cache: Optional[ITopicCache] = None,
        usage_db_path: str | Path | None = None,
    ) -> ClassificationEngine:
        cfg = config or ClassifierConfig.from_env()
        api_key = openai_api_key or os.getenv("OPENAI_API_KEY")

        selector = DIContainer._build_selector(cfg)
        backend = DIContainer._build_backend(cfg, api_key, provider)
        if cache is None:
            cache = InMemoryTopicCache(
                ttl_seconds=cfg.cache_ttl_seconds, max_entries=cfg.cache_max_entries
            )
        if repository is None:
            repository = SQLiteUsageRepository(usage_db_path or cfg.usage_db_path)
        ledger = UsageLedger(repository, monthly_limit=cfg.monthly_cost_limit)

        return ClassificationEngine(selector, backend, cache, ledger)

    @staticmethod
    def create_service(**kwargs) -> ClassificationService:
        return ClassificationService(DIContainer.create_engine(**kwargs))

    @staticmethod
    def create_custom_engine(
        *,
        selector: ITierSelector,
        backend: IClassificationBackend,
        cache: ITopicCache,
        ledger: UsageLedger,
    ) -> ClassificationEngine:
        return ClassificationEngine(selector, backend, cache, ledger)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_selector(config: ClassifierConfig) -> TierSelector:
        return TierSelector(
            default_complexity_heuristic(config.complexity_length_threshold),
            premium=default_tier_config(ModelTier.PREMIUM, config.premium_model),
            economy=default_tier_config(ModelTier.ECONOMY, config.economy_model),
        )

    @staticmethod
    def _build_backend(
        config: ClassifierConfig,
        api_key: Optional[str],
        provider: Optional[ILanguageModelProvider],
    ) -> IClassificationBackend:
        if config.use_mock_ai:
            logger.info("synthetic_backend_selected", extra={"reason": "use_mock_ai"})
            return SyntheticBackend()
        if provider is None:
            if not api_key:
                logger.warning(
                    "synthetic_backend_selected", extra={"reason": "missing_api_key"}
                )
                return SyntheticBackend()
            provider = DIContainer._build_openai_provider(config, api_key)
        return LiveBackend(
            provider,
            timeout_seconds=config.provider_timeout_seconds,
            max_retries=config.provider_max_retries,
            retry_delay=config.retry_delay_seconds,
        )

    @staticmethod
    def _build_openai_provider(
        config: ClassifierConfig, api_key: str
    ) -> OpenAIProvider:
        provider_config = ProviderConfig(
            api_key=api_key,
            base_url=config.openai_base_url,
            timeout=config.provider_timeout_seconds,
        )
        http_client = httpx.AsyncClient(timeout=provider_config.timeout)
        return OpenAIProvider(http_client, provider_config, owns_client=True)
