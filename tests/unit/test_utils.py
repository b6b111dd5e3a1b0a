import pytest

from instructly_classifier.domain.models import ModelTier
from instructly_classifier.utils import cost_calculator, retry


def test_premium_rates_are_forty_times_economy_rates():
    premium = cost_calculator.default_tier_config(ModelTier.PREMIUM)
    economy = cost_calculator.default_tier_config(ModelTier.ECONOMY)

    assert premium.input_rate / economy.input_rate == pytest.approx(40)
    assert premium.output_rate / economy.output_rate == pytest.approx(40)


def test_calculate_cost_uses_tier_config_rates():
    economy = cost_calculator.default_tier_config(ModelTier.ECONOMY)

    cost = cost_calculator.calculate_cost(economy, 100, 50)

    assert cost == pytest.approx(100 * 0.0005 / 1000 + 50 * 0.0015 / 1000)


def test_calculate_cost_accepts_tier_enum():
    cost = cost_calculator.calculate_cost(ModelTier.PREMIUM, 1000, 1000)

    assert cost == pytest.approx(0.02 + 0.06)


def test_synthetic_estimate_uses_fixed_token_counts():
    premium = cost_calculator.default_tier_config(ModelTier.PREMIUM)

    assert cost_calculator.estimate_synthetic_cost(premium) == pytest.approx(
        150 * premium.input_rate + 250 * premium.output_rate
    )


def test_default_tier_config_model_override():
    config = cost_calculator.default_tier_config(ModelTier.PREMIUM, "gpt-4.1")

    assert config.model_name == "gpt-4.1"
    assert config.tier is ModelTier.PREMIUM


@pytest.mark.asyncio
async def test_async_retry_retries_specified_attempts():
    calls = {"count": 0}

    @retry.async_retry(attempts=3, delay=0)
    async def flaky():
        calls["count"] += 1
        if calls["count"] < 3:
            raise ValueError("fail")
        return "ok"

    assert await flaky() == "ok"
    assert calls["count"] == 3


@pytest.mark.asyncio
async def test_async_retry_reraises_after_last_attempt():
    calls = {"count": 0}

    @retry.async_retry(attempts=2, delay=0)
    async def always_fails():
        calls["count"] += 1
        raise ValueError("boom")

    with pytest.raises(ValueError):
        await always_fails()
    assert calls["count"] == 2


@pytest.mark.asyncio
async def test_async_retry_ignores_unlisted_exceptions():
    calls = {"count": 0}

    @retry.async_retry(attempts=3, delay=0, exceptions=(KeyError,))
    async def wrong_error():
        calls["count"] += 1
        raise ValueError("not retried")

    with pytest.raises(ValueError):
        await wrong_error()
    assert calls["count"] == 1


def test_async_retry_rejects_zero_attempts():
    with pytest.raises(ValueError):
        retry.async_retry(attempts=0)
