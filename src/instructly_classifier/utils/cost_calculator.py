"""Cost calculation helpers for model usage."""

from __future__ import annotations

from typing import Mapping, Union

from instructly_classifier.domain.models import ModelTier, TierConfig

# USD per token.
PRICING: Mapping[ModelTier, Mapping[str, float]] = {
    ModelTier.PREMIUM: {"input": 0.02 / 1000, "output": 0.06 / 1000},
    ModelTier.ECONOMY: {"input": 0.0005 / 1000, "output": 0.0015 / 1000},
}

DEFAULT_MODELS: Mapping[ModelTier, str] = {
    ModelTier.PREMIUM: "gpt-4o",
    ModelTier.ECONOMY: "gpt-3.5-turbo",
}

SYNTHETIC_INPUT_TOKENS = 150
SYNTHETIC_OUTPUT_TOKENS = 250


def default_tier_config(tier: ModelTier, model_name: str | None = None) -> TierConfig:
    """Build the reference tier configuration, optionally overriding the model."""

    pricing = PRICING[tier]
    return TierConfig(
        tier=tier,
        model_name=model_name or DEFAULT_MODELS[tier],
        input_rate=pricing["input"],
        output_rate=pricing["output"],
    )


def calculate_cost(
    tier: Union[TierConfig, ModelTier], input_tokens: int, output_tokens: int
) -> float:
    """Return USD cost for a completion at the tier's per-token rates."""

    if isinstance(tier, TierConfig):
        input_rate, output_rate = tier.input_rate, tier.output_rate
    else:
        pricing = PRICING[ModelTier(tier)]
        input_rate, output_rate = pricing["input"], pricing["output"]
    return input_tokens * input_rate + output_tokens * output_rate


def estimate_synthetic_cost(tier: Union[TierConfig, ModelTier]) -> float:
    """Cost estimate for a locally synthesized classification."""

    return calculate_cost(tier, SYNTHETIC_INPUT_TOKENS, SYNTHETIC_OUTPUT_TOKENS)
