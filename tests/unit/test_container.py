import pytest

from instructly_classifier.backends.live import LiveBackend
from instructly_classifier.backends.synthetic import SyntheticBackend
from instructly_classifier.cache.memory_cache import InMemoryTopicCache
from instructly_classifier.core.config import ClassifierConfig
from instructly_classifier.core.container import DIContainer
from instructly_classifier.core.engine import ClassificationEngine
from instructly_classifier.core.service import ClassificationService
from instructly_classifier.analytics.ledger import UsageLedger
from instructly_classifier.providers.openai_provider import OpenAIProvider
from instructly_classifier.routing.selector import TierSelector


class _ProviderStub:
    async def complete(self, system_prompt, user_prompt, tier_config):
        raise NotImplementedError


class _RepoStub:
    async def append_usage_record(self, record):
        pass

    async def sum_cost(self, user_id, since):
        return 0.0


def test_create_engine_uses_synthetic_backend_without_key(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    engine = DIContainer.create_engine(
        config=ClassifierConfig(), usage_db_path=tmp_path / "usage.db"
    )

    assert isinstance(engine, ClassificationEngine)
    assert isinstance(engine.backend, SyntheticBackend)


def test_create_engine_uses_synthetic_backend_in_mock_mode(tmp_path):
    engine = DIContainer.create_engine(
        openai_api_key="sk-test",
        config=ClassifierConfig(use_mock_ai=True),
        usage_db_path=tmp_path / "usage.db",
    )

    assert isinstance(engine.backend, SyntheticBackend)


def test_create_engine_builds_openai_backend_with_key(tmp_path):
    engine = DIContainer.create_engine(
        openai_api_key="sk-test",
        config=ClassifierConfig(),
        usage_db_path=tmp_path / "usage.db",
    )

    assert isinstance(engine.backend, LiveBackend)
    assert isinstance(engine.backend.provider, OpenAIProvider)


def test_create_engine_reads_key_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    engine = DIContainer.create_engine(
        config=ClassifierConfig(), usage_db_path=tmp_path / "usage.db"
    )

    assert isinstance(engine.backend, LiveBackend)


def test_create_engine_accepts_injected_collaborators():
    provider = _ProviderStub()
    cache = InMemoryTopicCache()

    engine = DIContainer.create_engine(
        config=ClassifierConfig(monthly_cost_limit=25),
        provider=provider,
        repository=_RepoStub(),
        cache=cache,
    )

    assert isinstance(engine.backend, LiveBackend)
    assert engine.backend.provider is provider
    assert engine.ledger.monthly_limit == 25


def test_create_service_wraps_engine(tmp_path):
    service = DIContainer.create_service(
        config=ClassifierConfig(use_mock_ai=True),
        usage_db_path=tmp_path / "usage.db",
    )

    assert isinstance(service, ClassificationService)
    assert service.health_check().status == "degraded"


def test_create_custom_engine_returns_engine():
    engine = DIContainer.create_custom_engine(
        selector=TierSelector(),
        backend=SyntheticBackend(),
        cache=InMemoryTopicCache(),
        ledger=UsageLedger(_RepoStub()),
    )

    assert isinstance(engine, ClassificationEngine)


def test_engine_instances_are_independent(tmp_path):
    first = DIContainer.create_engine(
        config=ClassifierConfig(use_mock_ai=True), usage_db_path=tmp_path / "a.db"
    )
    second = DIContainer.create_engine(
        config=ClassifierConfig(use_mock_ai=True), usage_db_path=tmp_path / "b.db"
    )

    assert first is not second
    assert first.ledger is not second.ledger


def test_config_validation_errors_surface_from_container():
    with pytest.raises(ValueError):
        DIContainer.create_engine(config=ClassifierConfig(cache_max_entries=0))
